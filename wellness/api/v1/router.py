# wellness/api/v1/router.py
from fastapi import APIRouter
from wellness.api.v1 import (
    events,
    instances,
    registrations,
    attendance,
    wellness,
)

api_router = APIRouter()

api_router.include_router(events.router,        prefix="/events",        tags=["events"])
api_router.include_router(instances.router,     prefix="/instances",     tags=["instances"])
api_router.include_router(registrations.router, prefix="/registrations", tags=["registrations"])
api_router.include_router(attendance.router,    prefix="/attendance",    tags=["attendance"])
api_router.include_router(wellness.router,      prefix="/wellness",      tags=["wellness"])
