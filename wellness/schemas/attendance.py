from __future__ import annotations
from typing import Optional
from datetime import datetime
from pydantic import BaseModel, model_validator


class ScanIn(BaseModel):
    token: Optional[str] = None
    registration_id: Optional[int] = None

    @model_validator(mode="after")
    def _one_of(self):
        if not self.token and self.registration_id is None:
            raise ValueError("token or registration_id is required")
        return self


class AttendanceOut(BaseModel):
    id: int
    registration_id: int
    attended_at: datetime
    checked_in_by: str

    model_config = {"from_attributes": True}


class AttendanceStats(BaseModel):
    instance_id: int
    total: int
    attended: int
    pending: int
    pre_completed: int
    post_completed: int
