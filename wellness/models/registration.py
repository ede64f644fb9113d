from enum import Enum
from typing import Optional
from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import ForeignKey, String, DateTime, Index, func, text
from wellness.db.base_class import Base

class RegistrationStatus(str, Enum):
    confirmed = "confirmed"
    cancelled = "cancelled"

class Registration(Base):
    __tablename__ = "registrations"
    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(64), index=True)
    instance_id: Mapped[int] = mapped_column(ForeignKey("event_instances.id"), index=True)
    token: Mapped[str] = mapped_column(String(64), unique=True, index=True)
    status: Mapped[str] = mapped_column(String(20), default=RegistrationStatus.confirmed.value)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    cancelled_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    instance = relationship("EventInstance", back_populates="registrations")
    attendance = relationship("Attendance", back_populates="registration", uselist=False)
    assessments = relationship(
        "WellnessAssessment",
        back_populates="registration",
        order_by="WellnessAssessment.type.desc()",
    )

    __table_args__ = (
        # uma inscrição ativa por usuário e instância; canceladas não contam
        Index(
            "uq_registrations_active_seat",
            "user_id",
            "instance_id",
            unique=True,
            sqlite_where=text("status = 'confirmed'"),
            postgresql_where=text("status = 'confirmed'"),
        ),
    )

    @property
    def is_cancelled(self) -> bool:
        return self.status == RegistrationStatus.cancelled.value

    @property
    def attended(self) -> bool:
        return self.attendance is not None
