from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import ForeignKey, Integer, Boolean, DateTime, UniqueConstraint, CheckConstraint, Index, true, false
from wellness.db.base_class import Base

class EventInstance(Base):
    """A concrete session of an Event.

    ``confirmed`` is the capacity ledger counter; only ``wellness.crud.ledger``
    writes it.
    """

    __tablename__ = "event_instances"
    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    event_id: Mapped[int] = mapped_column(ForeignKey("events.id", ondelete="CASCADE"))
    date_time: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    capacity: Mapped[int] = mapped_column(Integer)
    confirmed: Mapped[int] = mapped_column(Integer, default=0, server_default="0")
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, server_default=true())
    is_orphaned: Mapped[bool] = mapped_column(Boolean, default=False, server_default=false())

    event = relationship("Event", back_populates="instances")
    registrations = relationship("Registration", back_populates="instance")

    __table_args__ = (
        UniqueConstraint("event_id", "date_time", name="uq_event_instance_datetime"),
        CheckConstraint("capacity >= 1", name="capacity_positive"),
        CheckConstraint("confirmed >= 0", name="confirmed_non_negative"),
        CheckConstraint("confirmed <= capacity", name="confirmed_lte_capacity"),
        Index("ix_event_instances_event_datetime", "event_id", "date_time"),
    )
