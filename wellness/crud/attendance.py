import logging
from typing import Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from wellness.core.errors import AlreadyAttended, NotFound, PreAssessmentMissing
from wellness.crud.base import CRUDBase, utcnow
from wellness.crud.registration import registration_crud
from wellness.models.attendance import Attendance
from wellness.models.event_instance import EventInstance
from wellness.models.registration import Registration, RegistrationStatus
from wellness.models.wellness_assessment import AssessmentStatus, AssessmentType, WellnessAssessment

logger = logging.getLogger(__name__)

CONFIRMED = RegistrationStatus.confirmed.value


class CRUDAttendance(CRUDBase[Attendance, None, None]):
    def _resolve(self, db: Session, *, token: Optional[str], registration_id: Optional[int]) -> Registration:
        if token:
            reg = registration_crud.get_by_token(db, token)
        elif registration_id is not None:
            reg = registration_crud.get_or_404(db, registration_id)
        else:
            raise ValueError("token or registration_id is required")
        # ingresso cancelado não serve para check-in
        if reg.status != CONFIRMED:
            raise NotFound("Registration", reg.id)
        return reg

    def mark_attendance(
        self,
        db: Session,
        *,
        by_admin_id: str,
        token: Optional[str] = None,
        registration_id: Optional[int] = None,
    ) -> Attendance:
        """Check a participant in by QR token or registration id.

        PENDING -> ATTENDED only, and only once the PRE questionnaire is
        COMPLETED. The attendance row and the lazily created POST
        questionnaire commit together.
        """
        reg = self._resolve(db, token=token, registration_id=registration_id)

        if db.scalar(select(Attendance.id).where(Attendance.registration_id == reg.id)) is not None:
            raise AlreadyAttended()

        by_type = {a.type: a for a in reg.assessments}
        pre = by_type.get(AssessmentType.PRE.value)
        if pre is None or not pre.is_completed:
            logger.info("Check-in of registration %s refused: PRE not completed", reg.id)
            raise PreAssessmentMissing()

        try:
            att = Attendance(registration_id=reg.id, attended_at=utcnow(), checked_in_by=str(by_admin_id))
            db.add(att); db.flush()

            # um cancelamento concorrente pode ter passado antes do insert
            status = db.scalar(select(Registration.status).where(Registration.id == reg.id))
            if status != CONFIRMED:
                db.rollback()
                raise NotFound("Registration", reg.id)

            if AssessmentType.POST.value not in by_type:
                db.add(WellnessAssessment(
                    registration_id=reg.id,
                    type=AssessmentType.POST.value,
                    status=AssessmentStatus.PENDING.value,
                ))
            db.commit()
        except IntegrityError:
            db.rollback()
            logger.info("Concurrent check-in of registration %s rejected", reg.id)
            raise AlreadyAttended() from None

        db.refresh(att)
        logger.info("Registration %s checked in by %s", reg.id, by_admin_id)
        return att

    def list_for_instance(self, db: Session, instance_id: int) -> List[Attendance]:
        if db.get(EventInstance, instance_id) is None:
            raise NotFound("Event instance", instance_id)
        stmt = (
            select(Attendance)
            .join(Registration, Registration.id == Attendance.registration_id)
            .where(Registration.instance_id == instance_id)
            .order_by(Attendance.attended_at)
        )
        return list(db.scalars(stmt))

    def stats_for_instance(self, db: Session, instance_id: int) -> Dict[str, int]:
        if db.get(EventInstance, instance_id) is None:
            raise NotFound("Event instance", instance_id)
        active = (Registration.instance_id == instance_id, Registration.status == CONFIRMED)

        total = db.scalar(select(func.count(Registration.id)).where(*active)) or 0
        attended = db.scalar(
            select(func.count(Attendance.id))
            .join(Registration, Registration.id == Attendance.registration_id)
            .where(*active)
        ) or 0

        def completed(kind: AssessmentType) -> int:
            return db.scalar(
                select(func.count(WellnessAssessment.id))
                .join(Registration, Registration.id == WellnessAssessment.registration_id)
                .where(
                    *active,
                    WellnessAssessment.type == kind.value,
                    WellnessAssessment.status == AssessmentStatus.COMPLETED.value,
                )
            ) or 0

        return {
            "total": total,
            "attended": attended,
            "pending": total - attended,
            "pre_completed": completed(AssessmentType.PRE),
            "post_completed": completed(AssessmentType.POST),
        }


attendance_crud = CRUDAttendance(Attendance)
