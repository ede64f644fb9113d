# wellness/api/v1/attendance.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from wellness.api.deps import CurrentUser, get_db
from wellness.core.rbac import require_roles
from wellness.core.tokens import ROLE_ADMIN
from wellness.crud.attendance import attendance_crud
from wellness.schemas.attendance import AttendanceOut, ScanIn

router = APIRouter()

# POST /attendance/scan  { "token": "..." } ou { "registration_id": 1 }
@router.post("/scan", response_model=AttendanceOut, status_code=status.HTTP_201_CREATED)
def scan(body: ScanIn, db: Session = Depends(get_db), admin: CurrentUser = Depends(require_roles(ROLE_ADMIN))):
    att = attendance_crud.mark_attendance(
        db, by_admin_id=admin.id, token=body.token, registration_id=body.registration_id
    )
    return AttendanceOut.model_validate(att)
