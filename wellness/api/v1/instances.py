from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from wellness.api.deps import get_current_user, get_db
from wellness.core.rbac import require_roles
from wellness.core.tokens import ROLE_ADMIN
from wellness.crud.attendance import attendance_crud
from wellness.crud.instance import instance_crud
from wellness.crud.ledger import ledger
from wellness.crud.registration import registration_crud
from wellness.schemas.attendance import AttendanceOut, AttendanceStats
from wellness.schemas.instance import Availability, CapacityIn, InstanceOut
from wellness.schemas.registration import RegistrationDetail

router = APIRouter()

@router.get("/{instance_id}", response_model=InstanceOut)
def get_instance(instance_id: int, db: Session = Depends(get_db), _=Depends(get_current_user)):
    return InstanceOut.model_validate(instance_crud.get_or_404(db, instance_id))

@router.get("/{instance_id}/availability", response_model=Availability)
def availability(instance_id: int, db: Session = Depends(get_db), _=Depends(get_current_user)):
    return Availability(instance_id=instance_id, **ledger.availability(db, instance_id))

@router.put("/{instance_id}/capacity", response_model=InstanceOut, dependencies=[Depends(require_roles(ROLE_ADMIN))])
def set_capacity(instance_id: int, body: CapacityIn, db: Session = Depends(get_db)):
    return InstanceOut.model_validate(ledger.set_capacity(db, instance_id, body.capacity))

@router.post("/{instance_id}/deactivate", response_model=InstanceOut, dependencies=[Depends(require_roles(ROLE_ADMIN))])
def deactivate(instance_id: int, db: Session = Depends(get_db)):
    return InstanceOut.model_validate(instance_crud.deactivate(db, instance_id))

@router.get("/{instance_id}/registrations", response_model=List[RegistrationDetail],
            dependencies=[Depends(require_roles(ROLE_ADMIN))])
def list_registrations(instance_id: int, db: Session = Depends(get_db)):
    return [RegistrationDetail.model_validate(r) for r in registration_crud.list_for_instance(db, instance_id)]

@router.get("/{instance_id}/attendance", response_model=List[AttendanceOut],
            dependencies=[Depends(require_roles(ROLE_ADMIN))])
def list_attendance(instance_id: int, db: Session = Depends(get_db)):
    return [AttendanceOut.model_validate(a) for a in attendance_crud.list_for_instance(db, instance_id)]

@router.get("/{instance_id}/attendance/stats", response_model=AttendanceStats,
            dependencies=[Depends(require_roles(ROLE_ADMIN))])
def attendance_stats(instance_id: int, db: Session = Depends(get_db)):
    return AttendanceStats(instance_id=instance_id, **attendance_crud.stats_for_instance(db, instance_id))
