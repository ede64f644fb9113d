from typing import List
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from wellness.api.deps import CurrentUser, get_current_user, get_db
from wellness.core.rbac import require_roles
from wellness.core.tokens import ROLE_ADMIN
from wellness.crud.event import event_crud
from wellness.crud.instance import instance_crud
from wellness.schemas.event import EventCreate, EventOut, EventUpdate, EventWithReport, RegenerationOut
from wellness.schemas.instance import InstanceOut

router = APIRouter()

@router.post("", response_model=EventWithReport, status_code=status.HTTP_201_CREATED)
def create_event(
    body: EventCreate,
    db: Session = Depends(get_db),
    admin: CurrentUser = Depends(require_roles(ROLE_ADMIN)),
):
    ev, report = event_crud.create_with_instances(db, body, created_by=admin.id)
    return EventWithReport(event=EventOut.model_validate(ev), instances=RegenerationOut(**report.as_dict()))

@router.get("", response_model=List[EventOut])
def list_events(db: Session = Depends(get_db), _=Depends(get_current_user)):
    return [EventOut.model_validate(e) for e in event_crud.list_events(db)]

@router.get("/{event_id}", response_model=EventOut)
def get_event(event_id: int, db: Session = Depends(get_db), _=Depends(get_current_user)):
    return EventOut.model_validate(event_crud.get_or_404(db, event_id))

# mudanças de regra, janela ou horário regeneram só as instâncias futuras
@router.patch("/{event_id}", response_model=EventWithReport, dependencies=[Depends(require_roles(ROLE_ADMIN))])
def update_event(event_id: int, body: EventUpdate, db: Session = Depends(get_db)):
    ev = event_crud.get_or_404(db, event_id)
    ev, report = event_crud.update_event(db, ev, body)
    return EventWithReport(
        event=EventOut.model_validate(ev),
        instances=RegenerationOut(**report.as_dict()) if report else None,
    )

@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT, dependencies=[Depends(require_roles(ROLE_ADMIN))])
def delete_event(event_id: int, db: Session = Depends(get_db)):
    event_crud.delete_event(db, event_id)

@router.get("/{event_id}/instances", response_model=List[InstanceOut])
def list_instances(
    event_id: int,
    upcoming: bool = Query(False, description="Somente instâncias futuras"),
    db: Session = Depends(get_db),
    _=Depends(get_current_user),
):
    return [InstanceOut.model_validate(i) for i in instance_crud.list_for_event(db, event_id, upcoming_only=upcoming)]

@router.get("/{event_id}/instances/available", response_model=List[InstanceOut])
def list_available_instances(event_id: int, db: Session = Depends(get_db), _=Depends(get_current_user)):
    return [InstanceOut.model_validate(i) for i in instance_crud.list_available(db, event_id)]
