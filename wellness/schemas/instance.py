from pydantic import BaseModel
from datetime import datetime


class InstanceOut(BaseModel):
    id: int
    event_id: int
    date_time: datetime
    capacity: int
    confirmed: int
    is_active: bool
    is_orphaned: bool

    model_config = {"from_attributes": True}


class Availability(BaseModel):
    instance_id: int
    capacity: int
    registered: int
    available: int


class CapacityIn(BaseModel):
    capacity: int
