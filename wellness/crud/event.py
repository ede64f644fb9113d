import logging
from dataclasses import dataclass, asdict
from typing import Any, Dict, List

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from wellness.core.errors import EventInPast, InstanceHasRegistrations, InvalidCapacity, NotFound
from wellness.crud.base import CRUDBase, as_utc, utcnow
from wellness.models.event import Event
from wellness.models.event_instance import EventInstance
from wellness.models.registration import Registration
from wellness.schemas.event import EventCreate, EventUpdate
from wellness.services.recurrence import expand, parse_time, rule_from_parts, rule_to_parts

logger = logging.getLogger(__name__)

# mudanças nestes campos invalidam as instâncias futuras
SCHEDULE_FIELDS = {"recurrence_type", "recurrence_pattern", "start_date", "end_date", "time"}


@dataclass
class RegenerationReport:
    created: int = 0
    deleted: int = 0
    flagged: int = 0

    def as_dict(self) -> Dict[str, int]:
        return asdict(self)


class CRUDEvent(CRUDBase[Event, EventCreate, EventUpdate]):
    def get_or_404(self, db: Session, event_id: int) -> Event:
        ev = self.get(db, event_id)
        if not ev:
            raise NotFound("Event", event_id)
        return ev

    def list_events(self, db: Session) -> List[Event]:
        return list(db.scalars(select(Event).order_by(Event.start_date, Event.id)))

    def create_with_instances(self, db: Session, obj_in: EventCreate, *, created_by: str | None = None) -> tuple[Event, RegenerationReport]:
        data = obj_in.model_dump()
        if data["capacity"] < 1:
            raise InvalidCapacity()
        rule = rule_from_parts(data["recurrence_type"], data.get("recurrence_pattern"))
        parse_time(data["time"])
        rtype, pattern = rule_to_parts(rule)

        # janela inteira no passado; janela vazia (end < start) segue sem instâncias
        moments = expand(rule, data["start_date"], data.get("end_date"), data["time"])
        if moments and moments[-1] <= utcnow():
            raise EventInPast()

        ev = Event(
            name=data["name"].strip(),
            description=data.get("description"),
            time=data["time"],
            capacity=data["capacity"],
            recurrence_type=rtype,
            recurrence_pattern=pattern,
            start_date=data["start_date"],
            end_date=data.get("end_date"),
            created_by=created_by,
        )
        db.add(ev); db.flush()
        report = self.regenerate_instances(db, ev)
        db.refresh(ev)
        logger.info("Event %s created with %d instances", ev.id, report.created)
        return ev, report

    def update_event(self, db: Session, ev: Event, obj_in: EventUpdate) -> tuple[Event, RegenerationReport | None]:
        data: Dict[str, Any] = obj_in.model_dump(exclude_unset=True)
        if "capacity" in data and (data["capacity"] is None or data["capacity"] < 1):
            raise InvalidCapacity()

        if "recurrence_type" in data or "recurrence_pattern" in data:
            rule = rule_from_parts(
                data.get("recurrence_type", ev.recurrence_type),
                data.get("recurrence_pattern", ev.recurrence_pattern),
            )
            data["recurrence_type"], data["recurrence_pattern"] = rule_to_parts(rule)
        if "time" in data:
            parse_time(data["time"])

        reschedule = any(k in SCHEDULE_FIELDS and getattr(ev, k) != v for k, v in data.items())
        for f, v in data.items():
            setattr(ev, f, v)
        db.add(ev); db.flush()

        report = self.regenerate_instances(db, ev) if reschedule else None
        if report is None:
            db.commit()
        db.refresh(ev)
        return ev, report

    def regenerate_instances(self, db: Session, ev: Event) -> RegenerationReport:
        """Bring future instances in line with the event's current rule.

        Past instances are never touched. Matching future instances are kept
        with their ids; unmatched ones are deleted when nobody ever registered
        and flagged ``is_orphaned`` otherwise. Commits.
        """
        rule = rule_from_parts(ev.recurrence_type, ev.recurrence_pattern)
        now = utcnow()
        wanted = {at for at in expand(rule, ev.start_date, ev.end_date, ev.time) if at > now}

        report = RegenerationReport()
        existing = list(db.scalars(select(EventInstance).where(EventInstance.event_id == ev.id)))
        present = set()
        for inst in existing:
            at = as_utc(inst.date_time)
            present.add(at)
            if at <= now:
                continue
            if at in wanted:
                inst.is_orphaned = False
                continue
            held = db.scalar(select(func.count(Registration.id)).where(Registration.instance_id == inst.id))
            if held:
                inst.is_orphaned = True
                report.flagged += 1
                logger.warning("Instance %s of event %s no longer matches its rule but holds registrations", inst.id, ev.id)
            else:
                db.delete(inst)
                report.deleted += 1

        for at in sorted(wanted - present):
            db.add(EventInstance(event_id=ev.id, date_time=at, capacity=ev.capacity))
            report.created += 1

        db.commit()
        logger.info("Event %s instances regenerated: %s", ev.id, report.as_dict())
        return report

    def delete_event(self, db: Session, event_id: int) -> None:
        ev = self.get_or_404(db, event_id)
        held = db.scalar(
            select(func.count(Registration.id))
            .join(EventInstance, EventInstance.id == Registration.instance_id)
            .where(EventInstance.event_id == event_id)
        )
        if held:
            raise InstanceHasRegistrations("This event still has registrations; deactivate its sessions instead")
        db.delete(ev); db.commit()
        logger.info("Event %s deleted", event_id)


event_crud = CRUDEvent(Event)
