from enum import Enum
from typing import Any, Dict, Optional
from datetime import date, datetime
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import String, Text, Integer, Date, DateTime, JSON, CheckConstraint, func
from wellness.db.base_class import Base

class RecurrenceType(str, Enum):
    SINGLE = "SINGLE"
    WEEKLY = "WEEKLY"
    INTERVAL = "INTERVAL"

class Event(Base):
    __tablename__ = "events"
    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200))
    description: Mapped[Optional[str]] = mapped_column(Text(), nullable=True)
    time: Mapped[str] = mapped_column(String(5))  # HH:MM, hora local do TIMEZONE
    capacity: Mapped[int] = mapped_column(Integer)
    recurrence_type: Mapped[str] = mapped_column(String(10), default=RecurrenceType.SINGLE.value)
    recurrence_pattern: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON, nullable=True)
    start_date: Mapped[date] = mapped_column(Date)
    end_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    created_by: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    instances = relationship(
        "EventInstance",
        back_populates="event",
        cascade="all, delete-orphan",
        order_by="EventInstance.date_time",
    )

    __table_args__ = (CheckConstraint("capacity >= 1", name="capacity_positive"),)
