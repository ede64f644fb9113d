"""Tests for questionnaire completion and impact.

Run with: pytest tests/test_wellness.py -v
"""

from types import SimpleNamespace

import pytest

from wellness.core.errors import AlreadyCompleted, IncompleteAssessments, InvalidMetric, NotFound, NotOwner
from wellness.crud.attendance import attendance_crud
from wellness.crud.registration import registration_crud
from wellness.crud.wellness import wellness_crud
from wellness.services.impact import impact_from_pair


@pytest.fixture
def registration(db, make_instance):
    inst = make_instance(capacity=5)
    return registration_crud.register(db, user_id="u1", instance_id=inst.id)


def _by_type(db, registration_id):
    return {a.type: a for a in wellness_crud.list_for_registration(db, registration_id)}


class TestComplete:
    """Tests for complete()."""

    def test_stores_metrics(self, db, registration):
        pre = _by_type(db, registration.id)["PRE"]
        done = wellness_crud.complete(db, assessment_id=pre.id, sleep_quality=4, stress_level=8, mood=3, by_user_id="u1")

        assert done.status == "COMPLETED"
        assert (done.sleep_quality, done.stress_level, done.mood) == (4, 8, 3)
        assert done.updated_at is not None

    def test_twice(self, db, registration):
        pre = _by_type(db, registration.id)["PRE"]
        wellness_crud.complete(db, assessment_id=pre.id, sleep_quality=4, stress_level=8, mood=3)
        with pytest.raises(AlreadyCompleted):
            wellness_crud.complete(db, assessment_id=pre.id, sleep_quality=9, stress_level=1, mood=9)
        db.expire_all()
        assert wellness_crud.get_or_404(db, pre.id).sleep_quality == 4

    @pytest.mark.parametrize(
        "metrics",
        [
            {"sleep_quality": 0, "stress_level": 5, "mood": 5},
            {"sleep_quality": 5, "stress_level": 11, "mood": 5},
            {"sleep_quality": 5, "stress_level": 5, "mood": 2.5},
            {"sleep_quality": True, "stress_level": 5, "mood": 5},
            {"sleep_quality": "7", "stress_level": 5, "mood": 5},
        ],
    )
    def test_invalid_metrics(self, db, registration, metrics):
        """Metrics must be integers from 1 to 10; nothing is stored otherwise."""
        pre = _by_type(db, registration.id)["PRE"]
        with pytest.raises(InvalidMetric):
            wellness_crud.complete(db, assessment_id=pre.id, **metrics)
        assert wellness_crud.get_or_404(db, pre.id).status == "PENDING"

    def test_not_owner(self, db, registration):
        pre = _by_type(db, registration.id)["PRE"]
        with pytest.raises(NotOwner):
            wellness_crud.complete(db, assessment_id=pre.id, sleep_quality=4, stress_level=8, mood=3, by_user_id="u2")

    def test_missing(self, db):
        with pytest.raises(NotFound):
            wellness_crud.complete(db, assessment_id=123, sleep_quality=4, stress_level=8, mood=3)

    def test_concurrent_completions(self, db, registration, run_concurrently):
        """Only one of two simultaneous submissions is stored."""
        pre_id = _by_type(db, registration.id)["PRE"].id
        answers = [(4, 8, 3), (6, 2, 7)]

        def submit(values):
            def _fn(session):
                sleep, stress, mood = values
                return wellness_crud.complete(session, assessment_id=pre_id, sleep_quality=sleep, stress_level=stress, mood=mood)
            return _fn

        outcomes = run_concurrently(*(submit(v) for v in answers))

        winners = [i for i, (_, exc) in enumerate(outcomes) if exc is None]
        losers = [exc for _, exc in outcomes if exc is not None]
        assert len(winners) == 1
        assert len(losers) == 1 and isinstance(losers[0], AlreadyCompleted)
        db.expire_all()
        stored = wellness_crud.get_or_404(db, pre_id)
        assert stored.status == "COMPLETED"
        assert (stored.sleep_quality, stored.stress_level, stored.mood) == answers[winners[0]]


class TestImpact:
    """Tests for compute_impact() and the impact report."""

    def _attend(self, db, registration):
        pre = _by_type(db, registration.id)["PRE"]
        wellness_crud.complete(db, assessment_id=pre.id, sleep_quality=4, stress_level=8, mood=3)
        attendance_crud.mark_attendance(db, by_admin_id="admin-1", token=registration.token)
        return _by_type(db, registration.id)["POST"]

    def test_pre_post_deltas(self, db, registration):
        """PRE{4,8,3} and POST{7,5,6} give +3, -3, +3 and an overall of 3.0."""
        post = self._attend(db, registration)
        wellness_crud.complete(db, assessment_id=post.id, sleep_quality=7, stress_level=5, mood=6)

        impact = wellness_crud.compute_impact(db, registration.id)

        assert impact.sleep_quality_change == 3
        assert impact.stress_level_change == -3
        assert impact.mood_change == 3
        assert impact.overall_impact == 3.0
        assert wellness_crud.compute_impact(db, registration.id) == impact

    def test_incomplete_before_post(self, db, registration):
        self._attend(db, registration)
        with pytest.raises(IncompleteAssessments):
            wellness_crud.compute_impact(db, registration.id)

    def test_report_has_null_impact_until_done(self, db, registration):
        report = wellness_crud.impact_report(db, registration.id)
        assert report["impact"] is None
        assert report["post"] is None
        assert report["pre"].type == "PRE"

    def test_missing_registration(self, db):
        with pytest.raises(NotFound):
            wellness_crud.compute_impact(db, 555)

    def test_pure_function_rounds(self):
        pre = SimpleNamespace(sleep_quality=5, stress_level=5, mood=5, is_completed=True)
        post = SimpleNamespace(sleep_quality=6, stress_level=5, mood=5, is_completed=True)
        assert impact_from_pair(pre, post).overall_impact == 0.33

    def test_pure_function_rejects_pending(self):
        pre = SimpleNamespace(sleep_quality=5, stress_level=5, mood=5, is_completed=True)
        post = SimpleNamespace(sleep_quality=None, stress_level=None, mood=None, is_completed=False)
        with pytest.raises(IncompleteAssessments):
            impact_from_pair(pre, post)


class TestUserLists:
    """Tests for the pending/completed questionnaire lists."""

    def test_pending_and_completed(self, db, registration):
        assert [a.type for a in wellness_crud.list_pending_for_user(db, "u1")] == ["PRE"]
        pre = _by_type(db, registration.id)["PRE"]
        wellness_crud.complete(db, assessment_id=pre.id, sleep_quality=4, stress_level=8, mood=3)

        assert wellness_crud.list_pending_for_user(db, "u1") == []
        assert [a.id for a in wellness_crud.list_completed_for_user(db, "u1")] == [pre.id]
        assert wellness_crud.list_pending_for_user(db, "someone-else") == []
