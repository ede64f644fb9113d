from __future__ import annotations
from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel

from wellness.schemas.instance import InstanceOut
from wellness.schemas.wellness import AssessmentOut


class EventRef(BaseModel):
    id: int
    name: str
    time: str

    model_config = {"from_attributes": True}


class InstanceRef(InstanceOut):
    event: Optional[EventRef] = None


class RegistrationCreate(BaseModel):
    instance_id: int


class RegistrationOut(BaseModel):
    id: int
    user_id: str
    instance_id: int
    token: str
    status: str
    created_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class RegistrationDetail(RegistrationOut):
    instance: Optional[InstanceRef] = None
    attended: bool = False
    assessments: List[AssessmentOut] = []
