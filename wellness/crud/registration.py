import logging
from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from wellness.core.errors import (
    AlreadyAttended,
    AlreadyCancelled,
    AlreadyRegistered,
    CapacityExceeded,
    InstanceInactive,
    InstancePast,
    InvariantViolation,
    NotFound,
    NotOwner,
)
from wellness.crud.base import CRUDBase, as_utc, utcnow
from wellness.crud.ledger import CapacityLedger, ledger
from wellness.models.attendance import Attendance
from wellness.models.event_instance import EventInstance
from wellness.models.registration import Registration, RegistrationStatus
from wellness.models.wellness_assessment import AssessmentStatus, AssessmentType, WellnessAssessment
from wellness.services.qr import new_registration_token

logger = logging.getLogger(__name__)

CONFIRMED = RegistrationStatus.confirmed.value
CANCELLED = RegistrationStatus.cancelled.value


class CRUDRegistration(CRUDBase[Registration, None, None]):
    def __init__(self, model, ledger: CapacityLedger):
        super().__init__(model)
        self.ledger = ledger

    def _with_relations(self, stmt):
        return stmt.options(
            selectinload(Registration.instance).selectinload(EventInstance.event),
            selectinload(Registration.attendance),
            selectinload(Registration.assessments),
        )

    def get_active(self, db: Session, *, user_id: str, instance_id: int) -> Optional[Registration]:
        return db.execute(
            select(Registration).where(
                Registration.user_id == str(user_id),
                Registration.instance_id == instance_id,
                Registration.status == CONFIRMED,
            )
        ).scalar_one_or_none()

    def get_or_404(self, db: Session, registration_id: int) -> Registration:
        reg = db.execute(
            self._with_relations(select(Registration).where(Registration.id == registration_id))
        ).scalar_one_or_none()
        if not reg:
            raise NotFound("Registration", registration_id)
        return reg

    def get_by_token(self, db: Session, token: str) -> Registration:
        reg = db.execute(
            self._with_relations(select(Registration).where(Registration.token == token))
        ).scalar_one_or_none()
        if not reg:
            raise NotFound("Registration")
        return reg

    def list_for_user(self, db: Session, user_id: str, include_cancelled: bool = False) -> List[Registration]:
        stmt = select(Registration).where(Registration.user_id == str(user_id))
        if not include_cancelled:
            stmt = stmt.where(Registration.status == CONFIRMED)
        stmt = stmt.order_by(Registration.created_at.desc(), Registration.id.desc())
        return list(db.scalars(self._with_relations(stmt)))

    def list_for_instance(self, db: Session, instance_id: int) -> List[Registration]:
        if db.get(EventInstance, instance_id) is None:
            raise NotFound("Event instance", instance_id)
        stmt = (
            select(Registration)
            .where(Registration.instance_id == instance_id, Registration.status == CONFIRMED)
            .order_by(Registration.created_at.desc(), Registration.id.desc())
        )
        return list(db.scalars(self._with_relations(stmt)))

    def register(self, db: Session, *, user_id: str, instance_id: int) -> Registration:
        """Book one seat of ``instance_id`` for ``user_id``.

        Seat reservation, registration insert and the PENDING PRE assessment
        commit together or not at all.
        """
        user_id = str(user_id)
        inst = db.get(EventInstance, instance_id)
        if not inst:
            raise NotFound("Event instance", instance_id)
        if not inst.is_active:
            raise InstanceInactive()
        if as_utc(inst.date_time) < utcnow():
            raise InstancePast()
        if self.get_active(db, user_id=user_id, instance_id=instance_id):
            raise AlreadyRegistered()

        token = new_registration_token()
        try:
            if not self.ledger.reserve(db, instance_id):
                db.rollback()
                # a instância pode ter sido desativada depois da leitura acima
                active = db.scalar(select(EventInstance.is_active).where(EventInstance.id == instance_id))
                if not active:
                    logger.info("Instance %s deactivated, registration by user %s rejected", instance_id, user_id)
                    raise InstanceInactive()
                logger.info("Instance %s full, registration by user %s rejected", instance_id, user_id)
                raise CapacityExceeded()

            reg = Registration(user_id=user_id, instance_id=instance_id, token=token, status=CONFIRMED)
            db.add(reg); db.flush()
            db.add(WellnessAssessment(
                registration_id=reg.id,
                type=AssessmentType.PRE.value,
                status=AssessmentStatus.PENDING.value,
            ))
            db.commit()
        except IntegrityError as exc:
            db.rollback()
            self._raise_conflict(db, exc, user_id=user_id, instance_id=instance_id, token=token)

        db.refresh(reg)
        logger.info("User %s registered to instance %s (registration %s)", user_id, instance_id, reg.id)
        return reg

    def _raise_conflict(self, db: Session, exc: IntegrityError, *, user_id: str, instance_id: int, token: str):
        # decide qual constraint falhou olhando o estado já commitado
        if self.get_active(db, user_id=user_id, instance_id=instance_id):
            logger.info("Concurrent duplicate booking by user %s on instance %s", user_id, instance_id)
            raise AlreadyRegistered() from None
        if db.scalar(select(Registration.id).where(Registration.token == token)) is not None:
            logger.critical("Registration token collision on instance %s", instance_id)
            raise InvariantViolation("registration token collision") from exc
        raise exc

    def cancel(self, db: Session, *, registration_id: int, by_user_id: str) -> Registration:
        reg = db.get(Registration, registration_id)
        if not reg:
            raise NotFound("Registration", registration_id)
        if reg.user_id != str(by_user_id):
            raise NotOwner()
        if reg.is_cancelled:
            raise AlreadyCancelled()
        if reg.attendance is not None:
            raise AlreadyAttended()
        if as_utc(reg.instance.date_time) <= utcnow():
            raise InstancePast()

        attended = select(Attendance.id).where(Attendance.registration_id == Registration.id).exists()
        res = db.execute(
            update(Registration)
            .where(Registration.id == registration_id, Registration.status == CONFIRMED, ~attended)
            .values(status=CANCELLED, cancelled_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        if res.rowcount != 1:
            db.rollback()
            # perdeu a corrida para outro cancelamento ou para o check-in
            if db.scalar(select(Attendance.id).where(Attendance.registration_id == registration_id)):
                raise AlreadyAttended()
            raise AlreadyCancelled()

        try:
            self.ledger.release(db, reg.instance_id)
        except InvariantViolation:
            db.rollback()
            raise
        db.commit(); db.refresh(reg)
        logger.info("Registration %s cancelled by user %s", registration_id, by_user_id)
        return reg


registration_crud = CRUDRegistration(Registration, ledger)
