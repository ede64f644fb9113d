from enum import Enum
from typing import Optional
from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import ForeignKey, String, Integer, DateTime, UniqueConstraint, CheckConstraint, func
from wellness.db.base_class import Base

class AssessmentType(str, Enum):
    PRE = "PRE"
    POST = "POST"

class AssessmentStatus(str, Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"

METRICS = ("sleep_quality", "stress_level", "mood")

class WellnessAssessment(Base):
    __tablename__ = "wellness_assessments"
    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    registration_id: Mapped[int] = mapped_column(ForeignKey("registrations.id"), index=True)
    type: Mapped[str] = mapped_column(String(4))
    status: Mapped[str] = mapped_column(String(10), default=AssessmentStatus.PENDING.value)
    sleep_quality: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    stress_level: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    mood: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    registration = relationship("Registration", back_populates="assessments")

    __table_args__ = (
        UniqueConstraint("registration_id", "type", name="uq_assessment_registration_type"),
        CheckConstraint("type IN ('PRE', 'POST')", name="type_valid"),
        CheckConstraint("status IN ('PENDING', 'COMPLETED')", name="status_valid"),
    )

    @property
    def is_completed(self) -> bool:
        return self.status == AssessmentStatus.COMPLETED.value
