from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from wellness.api.deps import CurrentUser, get_current_user, get_db
from wellness.crud.wellness import wellness_crud
from wellness.schemas.wellness import AssessmentComplete, AssessmentOut

router = APIRouter()

@router.post("/{assessment_id}/complete", response_model=AssessmentOut)
def complete_assessment(
    assessment_id: int,
    body: AssessmentComplete,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
):
    a = wellness_crud.complete(db, assessment_id=assessment_id, by_user_id=user.id, **body.model_dump())
    return AssessmentOut.model_validate(a)

@router.get("/pending", response_model=List[AssessmentOut])
def pending(db: Session = Depends(get_db), user: CurrentUser = Depends(get_current_user)):
    return [AssessmentOut.model_validate(a) for a in wellness_crud.list_pending_for_user(db, user.id)]

@router.get("/completed", response_model=List[AssessmentOut])
def completed(db: Session = Depends(get_db), user: CurrentUser = Depends(get_current_user)):
    return [AssessmentOut.model_validate(a) for a in wellness_crud.list_completed_for_user(db, user.id)]
