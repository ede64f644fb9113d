"""Tests for recurrence expansion.

Run with: pytest tests/test_recurrence.py -v
"""

import logging
from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from wellness.core.errors import InvalidPattern
from wellness.services.recurrence import (
    Interval,
    Single,
    Weekly,
    expand,
    rule_from_parts,
    rule_to_parts,
    weekday_of,
)

UTC = timezone.utc


class TestExpand:
    """Tests for expand() over each rule kind."""

    def test_single_yields_one_instance(self):
        """SINGLE gives exactly the start date at the event time."""
        out = expand(Single(), date(2024, 3, 5), date(2024, 3, 30), "18:30", tz=UTC)
        assert out == [datetime(2024, 3, 5, 18, 30, tzinfo=UTC)]

    def test_interval_every_seven_days(self):
        """INTERVAL{7} from 2024-01-01 to 2024-01-22 gives four sessions."""
        out = expand(Interval(7), date(2024, 1, 1), date(2024, 1, 22), "09:00", tz=UTC)
        assert [d.date() for d in out] == [
            date(2024, 1, 1),
            date(2024, 1, 8),
            date(2024, 1, 15),
            date(2024, 1, 22),
        ]

    def test_weekly_only_selected_weekdays(self):
        """Every WEEKLY instance falls on one of the rule's weekdays, without duplicates."""
        rule = Weekly(frozenset({1, 3}))  # segunda e quarta
        out = expand(rule, date(2024, 1, 1), date(2024, 1, 31), "07:00", tz=UTC)

        assert len(out) == 10
        assert all(weekday_of(d.date()) in {1, 3} for d in out)
        assert len(set(out)) == len(out)
        assert out == sorted(out)

    def test_sunday_is_zero(self):
        """Weekday numbering starts at Sunday."""
        assert weekday_of(date(2024, 1, 7)) == 0
        assert weekday_of(date(2024, 1, 13)) == 6

    @pytest.mark.parametrize("rule", [Single(), Weekly(frozenset({2})), Interval(1)])
    def test_end_before_start_is_empty(self, rule):
        """An end date before the start date yields no sessions for any rule."""
        assert expand(rule, date(2024, 2, 10), date(2024, 2, 1), "10:00", tz=UTC) == []

    def test_wall_clock_converted_to_utc(self):
        """Times are read in the given zone and returned in UTC."""
        out = expand(Single(), date(2024, 1, 1), None, "09:00", tz=ZoneInfo("America/Sao_Paulo"))
        assert out == [datetime(2024, 1, 1, 12, 0, tzinfo=UTC)]
        assert out[0].tzinfo == UTC


class TestHorizon:
    """Tests for open-ended windows and the instance cap."""

    def test_open_ended_stops_at_horizon(self):
        """Without an end date the window ends horizon_days after the start."""
        out = expand(Interval(1), date(2024, 1, 1), None, "08:00", tz=UTC, horizon_days=10)
        assert len(out) == 11
        assert out[-1].date() == date(2024, 1, 11)

    def test_cap_truncates_and_warns(self, caplog):
        """No expansion exceeds max_instances; truncation is logged."""
        with caplog.at_level(logging.WARNING, logger="wellness.services.recurrence"):
            out = expand(Interval(1), date(2024, 1, 1), date(2024, 12, 31), "08:00", tz=UTC, max_instances=5)
        assert len(out) == 5
        assert "truncated" in caplog.text

    def test_cap_not_logged_when_window_fits(self, caplog):
        with caplog.at_level(logging.WARNING, logger="wellness.services.recurrence"):
            out = expand(Interval(1), date(2024, 1, 1), date(2024, 1, 5), "08:00", tz=UTC, max_instances=5)
        assert len(out) == 5
        assert "truncated" not in caplog.text


class TestInvalidPattern:
    """Tests for rule and time validation."""

    @pytest.mark.parametrize(
        "rtype,pattern",
        [
            ("WEEKLY", {"weekdays": []}),
            ("WEEKLY", {"weekdays": [7]}),
            ("WEEKLY", {"weekdays": [-1, 2]}),
            ("WEEKLY", {"weekdays": "mon"}),
            ("WEEKLY", None),
            ("INTERVAL", {"interval_days": 0}),
            ("INTERVAL", {"interval_days": "3"}),
            ("INTERVAL", {}),
            ("MONTHLY", None),
        ],
    )
    def test_bad_rules_rejected(self, rtype, pattern):
        with pytest.raises(InvalidPattern):
            rule_from_parts(rtype, pattern)

    @pytest.mark.parametrize("value", ["25:00", "9am", "12:60", "", "1200"])
    def test_bad_time_rejected(self, value):
        """Time of day must be HH:MM on a 24h clock."""
        with pytest.raises(InvalidPattern):
            expand(Single(), date(2024, 1, 1), None, value, tz=UTC)

    def test_expand_validates_rule(self):
        with pytest.raises(InvalidPattern):
            expand(Interval(0), date(2024, 1, 1), date(2024, 1, 5), "08:00", tz=UTC)


class TestRuleParts:
    """Tests for the stored (type, pattern) form."""

    def test_weekly_parts_are_normalised(self):
        rule = rule_from_parts("WEEKLY", {"weekdays": [5, 1, 1]})
        assert rule == Weekly(frozenset({1, 5}))
        assert rule_to_parts(rule) == ("WEEKLY", {"weekdays": [1, 5]})

    def test_single_ignores_missing_pattern(self):
        assert rule_to_parts(rule_from_parts("SINGLE", None)) == ("SINGLE", None)

    def test_interval_parts(self):
        assert rule_to_parts(rule_from_parts("INTERVAL", {"interval_days": 3})) == ("INTERVAL", {"interval_days": 3})
