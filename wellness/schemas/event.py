from pydantic import BaseModel, Field, model_validator
from typing import Any, Dict, Optional
from datetime import datetime, date

from wellness.models.event import RecurrenceType

# ---------------------------
# Event Schemas
# ---------------------------

class EventBase(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    time: str = Field(description="Hora local HH:MM (24h)")
    capacity: int
    recurrence_type: RecurrenceType = RecurrenceType.SINGLE
    recurrence_pattern: Optional[Dict[str, Any]] = None
    start_date: date
    end_date: Optional[date] = None

class EventCreate(EventBase):
    pass

REQUIRED_ON_UPDATE = ("name", "time", "capacity", "recurrence_type", "start_date")

class EventUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    time: str | None = None
    capacity: int | None = None
    recurrence_type: RecurrenceType | None = None
    recurrence_pattern: Dict[str, Any] | None = None
    start_date: date | None = None
    end_date: date | None = None

    @model_validator(mode="after")
    def _no_null_required(self):
        # ausente = não altera; null explícito só vale para campos opcionais
        nulls = sorted(f for f in REQUIRED_ON_UPDATE if f in self.model_fields_set and getattr(self, f) is None)
        if nulls:
            raise ValueError(f"fields cannot be null: {', '.join(nulls)}")
        return self

class EventOut(EventBase):
    id: int
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}

class RegenerationOut(BaseModel):
    created: int = 0
    deleted: int = 0
    flagged: int = 0

class EventWithReport(BaseModel):
    event: EventOut
    instances: Optional[RegenerationOut] = None
