from typing import Optional
from datetime import datetime
from pydantic import BaseModel


class AssessmentComplete(BaseModel):
    # validação 1..10 fica no domínio (InvalidMetric)
    sleep_quality: int
    stress_level: int
    mood: int


class AssessmentOut(BaseModel):
    id: int
    registration_id: int
    type: str
    status: str
    sleep_quality: Optional[int] = None
    stress_level: Optional[int] = None
    mood: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class ImpactOut(BaseModel):
    sleep_quality_change: Optional[int] = None
    stress_level_change: Optional[int] = None
    mood_change: Optional[int] = None
    overall_impact: Optional[float] = None


class ImpactReport(BaseModel):
    registration_id: int
    pre: Optional[AssessmentOut] = None
    post: Optional[AssessmentOut] = None
    impact: ImpactOut
