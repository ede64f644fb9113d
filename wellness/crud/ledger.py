"""Capacity ledger.

Each ``EventInstance`` row carries its own ``capacity`` and ``confirmed``
counter. This module is the only writer of ``confirmed``; every change is a
single conditional UPDATE, so two transactions racing for the last seat are
serialised by the database and at most one of them sees a matched row.

Nothing here commits: the caller owns the transaction, so a seat reserved
for a registration that later fails to insert is rolled back with it.
"""
import logging
from typing import Dict

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from wellness.core.errors import InvalidCapacity, InvariantViolation, NotFound
from wellness.models.event_instance import EventInstance

logger = logging.getLogger(__name__)


class CapacityLedger:
    def reserve(self, db: Session, instance_id: int) -> bool:
        """Take one seat of an active instance. Returns False when none was taken."""
        res = db.execute(
            update(EventInstance)
            .where(
                EventInstance.id == instance_id,
                EventInstance.is_active.is_(True),
                EventInstance.confirmed < EventInstance.capacity,
            )
            .values(confirmed=EventInstance.confirmed + 1)
            .execution_options(synchronize_session=False)
        )
        return res.rowcount == 1

    def release(self, db: Session, instance_id: int) -> None:
        res = db.execute(
            update(EventInstance)
            .where(EventInstance.id == instance_id, EventInstance.confirmed > 0)
            .values(confirmed=EventInstance.confirmed - 1)
            .execution_options(synchronize_session=False)
        )
        if res.rowcount != 1:
            logger.critical("Capacity ledger for instance %s would go negative", instance_id)
            raise InvariantViolation(f"confirmed counter of instance {instance_id} is already zero")

    def set_capacity(self, db: Session, instance_id: int, capacity: int) -> EventInstance:
        """Administrative per-instance capacity edit; commits."""
        if capacity < 1:
            raise InvalidCapacity()
        inst = db.get(EventInstance, instance_id)
        if not inst:
            raise NotFound("Event instance", instance_id)

        res = db.execute(
            update(EventInstance)
            .where(EventInstance.id == instance_id, EventInstance.confirmed <= capacity)
            .values(capacity=capacity)
            .execution_options(synchronize_session=False)
        )
        if res.rowcount != 1:
            db.rollback()
            raise InvalidCapacity(f"Capacity cannot go below the {inst.confirmed} confirmed seats")
        db.commit(); db.refresh(inst)
        logger.info("Capacity of instance %s set to %s", instance_id, capacity)
        return inst

    def availability(self, db: Session, instance_id: int) -> Dict[str, int]:
        row = db.execute(
            select(EventInstance.capacity, EventInstance.confirmed).where(EventInstance.id == instance_id)
        ).one_or_none()
        if row is None:
            raise NotFound("Event instance", instance_id)
        capacity, registered = row
        if registered < 0 or registered > capacity:
            logger.critical("Instance %s ledger out of range: %s/%s", instance_id, registered, capacity)
            raise InvariantViolation(f"instance {instance_id} has {registered} confirmed for capacity {capacity}")
        return {"capacity": capacity, "registered": registered, "available": capacity - registered}


ledger = CapacityLedger()
