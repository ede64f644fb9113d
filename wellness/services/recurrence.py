"""Recurrence expansion.

Turns an event's rule (SINGLE, WEEKLY or INTERVAL) and validity window into
the ordered, de-duplicated list of session datetimes. Everything here is pure:
no database access, so the same rule always expands to the same list.

Weekdays use 0 = Sunday .. 6 = Saturday. Wall-clock times are interpreted in
the configured ``TIMEZONE`` and returned as UTC-aware datetimes.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Any, Dict, Iterator, Optional, Tuple, Union
from zoneinfo import ZoneInfo

from wellness.core.config import settings
from wellness.core.errors import InvalidPattern
from wellness.models.event import RecurrenceType

logger = logging.getLogger(__name__)

_TIME_RE = re.compile(r"^([01]?\d|2[0-3]):([0-5]\d)$")


@dataclass(frozen=True)
class Single:
    pass


@dataclass(frozen=True)
class Weekly:
    weekdays: frozenset[int]


@dataclass(frozen=True)
class Interval:
    interval_days: int


RecurrenceRule = Union[Single, Weekly, Interval]


def parse_time(value: str) -> time:
    m = _TIME_RE.match(value or "")
    if not m:
        raise InvalidPattern(f"time must be HH:MM (24h), got {value!r}")
    return time(int(m.group(1)), int(m.group(2)))


def validate_rule(rule: RecurrenceRule) -> None:
    match rule:
        case Single():
            return
        case Weekly(weekdays=weekdays):
            if not weekdays:
                raise InvalidPattern("weekly rule needs at least one weekday")
            if any(isinstance(d, bool) or not isinstance(d, int) or not 0 <= d <= 6 for d in weekdays):
                raise InvalidPattern("weekdays must be integers between 0 (Sunday) and 6 (Saturday)")
        case Interval(interval_days=step):
            if isinstance(step, bool) or not isinstance(step, int) or step < 1:
                raise InvalidPattern("interval_days must be an integer >= 1")
        case _:
            raise InvalidPattern(f"unknown rule {rule!r}")


def rule_from_parts(rtype: str | RecurrenceType, pattern: Optional[Dict[str, Any]]) -> RecurrenceRule:
    """Build a validated rule from its stored form (type + pattern JSON)."""
    try:
        kind = RecurrenceType(rtype)
    except ValueError:
        raise InvalidPattern(f"unknown recurrence type {rtype!r}") from None
    pattern = pattern or {}

    if kind is RecurrenceType.SINGLE:
        rule: RecurrenceRule = Single()
    elif kind is RecurrenceType.WEEKLY:
        days = pattern.get("weekdays") or []
        if not isinstance(days, (list, tuple, set, frozenset)):
            raise InvalidPattern("weekdays must be a list")
        rule = Weekly(weekdays=frozenset(days))
    else:
        rule = Interval(interval_days=pattern.get("interval_days", 0))

    validate_rule(rule)
    return rule


def rule_to_parts(rule: RecurrenceRule) -> Tuple[str, Optional[Dict[str, Any]]]:
    match rule:
        case Single():
            return RecurrenceType.SINGLE.value, None
        case Weekly(weekdays=weekdays):
            return RecurrenceType.WEEKLY.value, {"weekdays": sorted(weekdays)}
        case Interval(interval_days=step):
            return RecurrenceType.INTERVAL.value, {"interval_days": step}
    raise InvalidPattern(f"unknown rule {rule!r}")


def weekday_of(day: date) -> int:
    # date.weekday() is Monday=0; rules count from Sunday=0
    return (day.weekday() + 1) % 7


def _candidate_days(rule: RecurrenceRule, first: date, last: date) -> Iterator[date]:
    match rule:
        case Single():
            yield first
        case Weekly(weekdays=weekdays):
            day = first
            while day <= last:
                if weekday_of(day) in weekdays:
                    yield day
                day += timedelta(days=1)
        case Interval(interval_days=step):
            day = first
            while day <= last:
                yield day
                day += timedelta(days=step)


def window_end(start_date: date, end_date: Optional[date], horizon_days: Optional[int] = None) -> date:
    if end_date is not None:
        return end_date
    days = settings.RECURRENCE_HORIZON_DAYS if horizon_days is None else horizon_days
    return start_date + timedelta(days=days)


def expand(
    rule: RecurrenceRule,
    start_date: date,
    end_date: Optional[date],
    time_of_day: str,
    *,
    tz: Optional[tzinfo] = None,
    horizon_days: Optional[int] = None,
    max_instances: Optional[int] = None,
) -> list[datetime]:
    """Expand ``rule`` over ``[start_date, end_date]`` into UTC datetimes.

    An absent ``end_date`` means "up to the horizon". An ``end_date`` before
    ``start_date`` yields an empty list. At most ``max_instances`` datetimes
    are returned.
    """
    validate_rule(rule)
    at = parse_time(time_of_day)
    zone = tz or ZoneInfo(settings.TIMEZONE)
    cap = settings.RECURRENCE_MAX_INSTANCES if max_instances is None else max_instances
    last = window_end(start_date, end_date, horizon_days)

    if last < start_date:
        return []

    out: list[datetime] = []
    seen: set[datetime] = set()
    for day in _candidate_days(rule, start_date, last):
        if len(out) >= cap:
            logger.warning("Recurrence expansion truncated at %d instances (start=%s, end=%s)", cap, start_date, last)
            break
        moment = datetime.combine(day, at, tzinfo=zone).astimezone(timezone.utc)
        if moment in seen:
            continue
        seen.add(moment)
        out.append(moment)
    return out
