import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from wellness.core.errors import AlreadyCompleted, InvalidMetric, NotFound, NotOwner
from wellness.crud.base import CRUDBase, utcnow
from wellness.models.registration import Registration, RegistrationStatus
from wellness.models.wellness_assessment import METRICS, AssessmentStatus, AssessmentType, WellnessAssessment
from wellness.services.impact import WellnessImpact, impact_from_pair

logger = logging.getLogger(__name__)

PENDING = AssessmentStatus.PENDING.value
COMPLETED = AssessmentStatus.COMPLETED.value


def _check_metric(name: str, value: Any) -> int:
    # bool é subclasse de int; não vale como nota
    if isinstance(value, bool) or not isinstance(value, int) or not 1 <= value <= 10:
        raise InvalidMetric(details=f"{name}={value!r}")
    return value


class CRUDWellness(CRUDBase[WellnessAssessment, None, None]):
    def get_or_404(self, db: Session, assessment_id: int) -> WellnessAssessment:
        a = self.get(db, assessment_id)
        if not a:
            raise NotFound("Assessment", assessment_id)
        return a

    def complete(
        self,
        db: Session,
        *,
        assessment_id: int,
        sleep_quality: Any,
        stress_level: Any,
        mood: Any,
        by_user_id: Optional[str] = None,
    ) -> WellnessAssessment:
        a = self.get_or_404(db, assessment_id)
        if by_user_id is not None and a.registration.user_id != str(by_user_id):
            raise NotOwner()
        if a.is_completed:
            raise AlreadyCompleted()
        values = {
            name: _check_metric(name, v)
            for name, v in zip(METRICS, (sleep_quality, stress_level, mood))
        }

        res = db.execute(
            update(WellnessAssessment)
            .where(WellnessAssessment.id == assessment_id, WellnessAssessment.status == PENDING)
            .values(status=COMPLETED, updated_at=utcnow(), **values)
            .execution_options(synchronize_session=False)
        )
        if res.rowcount != 1:
            db.rollback()
            raise AlreadyCompleted()
        db.commit(); db.refresh(a)
        logger.info("Assessment %s (%s) of registration %s completed", a.id, a.type, a.registration_id)
        return a

    def _pair(self, db: Session, registration_id: int):
        if db.get(Registration, registration_id) is None:
            raise NotFound("Registration", registration_id)
        by_type = {a.type: a for a in self.list_for_registration(db, registration_id)}
        return by_type.get(AssessmentType.PRE.value), by_type.get(AssessmentType.POST.value)

    def compute_impact(self, db: Session, registration_id: int) -> WellnessImpact:
        pre, post = self._pair(db, registration_id)
        return impact_from_pair(pre, post)

    def impact_report(self, db: Session, registration_id: int) -> Dict[str, Any]:
        """PRE, POST and the impact, with impact fields null until both are done."""
        pre, post = self._pair(db, registration_id)
        impact = None
        if pre is not None and post is not None and pre.is_completed and post.is_completed:
            impact = impact_from_pair(pre, post)
        return {"registration_id": registration_id, "pre": pre, "post": post, "impact": impact}

    def list_for_registration(self, db: Session, registration_id: int) -> List[WellnessAssessment]:
        stmt = (
            select(WellnessAssessment)
            .where(WellnessAssessment.registration_id == registration_id)
            .order_by(WellnessAssessment.type.desc())
        )
        return list(db.scalars(stmt))

    def _list_for_user(self, db: Session, user_id: str, status: str) -> List[WellnessAssessment]:
        stmt = (
            select(WellnessAssessment)
            .join(Registration, Registration.id == WellnessAssessment.registration_id)
            .where(
                Registration.user_id == str(user_id),
                Registration.status == RegistrationStatus.confirmed.value,
                WellnessAssessment.status == status,
            )
            .order_by(WellnessAssessment.created_at.desc(), WellnessAssessment.id.desc())
        )
        return list(db.scalars(stmt))

    def list_pending_for_user(self, db: Session, user_id: str) -> List[WellnessAssessment]:
        return self._list_for_user(db, user_id, PENDING)

    def list_completed_for_user(self, db: Session, user_id: str) -> List[WellnessAssessment]:
        return self._list_for_user(db, user_id, COMPLETED)


wellness_crud = CRUDWellness(WellnessAssessment)
