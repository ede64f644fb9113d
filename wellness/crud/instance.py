import logging
from typing import List

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from wellness.core.config import settings
from wellness.core.errors import InstanceHasRegistrations, InvariantViolation, NotFound
from wellness.crud.base import CRUDBase, utcnow
from wellness.crud.ledger import CapacityLedger, ledger
from wellness.models.event import Event
from wellness.models.attendance import Attendance
from wellness.models.event_instance import EventInstance
from wellness.models.registration import Registration, RegistrationStatus

logger = logging.getLogger(__name__)


class CRUDEventInstance(CRUDBase[EventInstance, None, None]):
    def __init__(self, model, ledger: CapacityLedger):
        super().__init__(model)
        self.ledger = ledger

    def get_or_404(self, db: Session, instance_id: int) -> EventInstance:
        inst = db.get(EventInstance, instance_id)
        if not inst:
            raise NotFound("Event instance", instance_id)
        return inst

    def list_for_event(self, db: Session, event_id: int, *, upcoming_only: bool = False) -> List[EventInstance]:
        if db.get(Event, event_id) is None:
            raise NotFound("Event", event_id)
        stmt = select(EventInstance).where(EventInstance.event_id == event_id)
        if upcoming_only:
            stmt = stmt.where(EventInstance.date_time > utcnow())
        return list(db.scalars(stmt.order_by(EventInstance.date_time)))

    def list_available(self, db: Session, event_id: int) -> List[EventInstance]:
        """Future, active instances that still have seats."""
        if db.get(Event, event_id) is None:
            raise NotFound("Event", event_id)
        stmt = (
            select(EventInstance)
            .where(
                EventInstance.event_id == event_id,
                EventInstance.is_active.is_(True),
                EventInstance.date_time > utcnow(),
                EventInstance.confirmed < EventInstance.capacity,
            )
            .order_by(EventInstance.date_time)
        )
        return list(db.scalars(stmt))

    def deactivate(self, db: Session, instance_id: int, *, policy: str | None = None) -> EventInstance:
        """Take an instance out of booking.

        ``block`` refuses while confirmed registrations exist; ``cascade``
        cancels them and frees their seats in the same transaction.
        """
        policy = policy or settings.INSTANCE_CANCEL_POLICY
        inst = self.get_or_404(db, instance_id)

        # desativa primeiro: a partir daqui reserve() não encontra mais a linha ativa
        stmt = update(EventInstance).where(EventInstance.id == instance_id)
        if policy != "cascade":
            stmt = stmt.where(EventInstance.confirmed == 0)
        res = db.execute(stmt.values(is_active=False).execution_options(synchronize_session=False))
        if res.rowcount != 1:
            db.rollback()
            if policy == "cascade":
                raise NotFound("Event instance", instance_id)
            raise InstanceHasRegistrations()

        active_ids = list(db.scalars(
            select(Registration.id).where(
                Registration.instance_id == instance_id,
                Registration.status == RegistrationStatus.confirmed.value,
            )
        ))

        now = utcnow()
        # presença já registrada não se desfaz
        attended = select(Attendance.id).where(Attendance.registration_id == Registration.id).exists()
        cancelled = 0
        for reg_id in active_ids:
            res = db.execute(
                update(Registration)
                .where(Registration.id == reg_id, Registration.status == RegistrationStatus.confirmed.value, ~attended)
                .values(status=RegistrationStatus.cancelled.value, cancelled_at=now)
                .execution_options(synchronize_session=False)
            )
            if res.rowcount == 1:
                try:
                    self.ledger.release(db, instance_id)
                except InvariantViolation:
                    db.rollback()
                    raise
                cancelled += 1

        db.commit(); db.refresh(inst)
        logger.info("Instance %s deactivated (%d registrations cancelled)", instance_id, cancelled)
        return inst


instance_crud = CRUDEventInstance(EventInstance, ledger)
