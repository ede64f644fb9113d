from typing import List
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from wellness.api.deps import CurrentUser, get_current_user, get_db
from wellness.core.errors import NotOwner
from wellness.core.rbac import ensure_owner_or_admin
from wellness.crud.registration import registration_crud
from wellness.crud.wellness import wellness_crud
from wellness.schemas.registration import RegistrationCreate, RegistrationDetail, RegistrationOut
from wellness.schemas.wellness import AssessmentOut, ImpactOut, ImpactReport
from wellness.services.qr import render_qr_png

router = APIRouter()

@router.post("", response_model=RegistrationDetail, status_code=status.HTTP_201_CREATED)
def register(body: RegistrationCreate, db: Session = Depends(get_db), user: CurrentUser = Depends(get_current_user)):
    reg = registration_crud.register(db, user_id=user.id, instance_id=body.instance_id)
    return RegistrationDetail.model_validate(reg)

@router.get("/me", response_model=List[RegistrationDetail])
def my_registrations(
    include_cancelled: bool = Query(False),
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
):
    rows = registration_crud.list_for_user(db, user.id, include_cancelled=include_cancelled)
    return [RegistrationDetail.model_validate(r) for r in rows]

@router.get("/{registration_id}", response_model=RegistrationDetail)
def get_registration(registration_id: int, db: Session = Depends(get_db), user: CurrentUser = Depends(get_current_user)):
    reg = registration_crud.get_or_404(db, registration_id)
    ensure_owner_or_admin(user, reg.user_id)
    return RegistrationDetail.model_validate(reg)

# PNG com o token; é o que a portaria escaneia
@router.get("/{registration_id}/qr", response_class=Response)
def registration_qr(registration_id: int, db: Session = Depends(get_db), user: CurrentUser = Depends(get_current_user)):
    reg = registration_crud.get_or_404(db, registration_id)
    if reg.user_id != user.id:
        raise NotOwner()
    return Response(content=render_qr_png(reg.token), media_type="image/png")

@router.post("/{registration_id}/cancel", response_model=RegistrationOut)
def cancel_registration(registration_id: int, db: Session = Depends(get_db), user: CurrentUser = Depends(get_current_user)):
    reg = registration_crud.cancel(db, registration_id=registration_id, by_user_id=user.id)
    return RegistrationOut.model_validate(reg)

@router.get("/{registration_id}/impact", response_model=ImpactReport)
def registration_impact(registration_id: int, db: Session = Depends(get_db), user: CurrentUser = Depends(get_current_user)):
    reg = registration_crud.get_or_404(db, registration_id)
    ensure_owner_or_admin(user, reg.user_id)
    report = wellness_crud.impact_report(db, registration_id)
    pre, post, impact = report["pre"], report["post"], report["impact"]
    return ImpactReport(
        registration_id=registration_id,
        pre=AssessmentOut.model_validate(pre) if pre else None,
        post=AssessmentOut.model_validate(post) if post else None,
        impact=ImpactOut(**impact.as_dict()) if impact else ImpactOut(),
    )
