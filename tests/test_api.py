"""HTTP surface tests: routing, auth and the error body shape.

Run with: pytest tests/test_api.py -v
"""

from datetime import date, timedelta


def _create_event(client, admin_headers, capacity=2):
    body = {
        "name": "Pilates",
        "time": "09:30",
        "capacity": capacity,
        "recurrence_type": "WEEKLY",
        "recurrence_pattern": {"weekdays": [1, 3, 5]},
        "start_date": str(date.today() + timedelta(days=3)),
        "end_date": str(date.today() + timedelta(days=16)),
    }
    r = client.post("/api/v1/events", json=body, headers=admin_headers)
    assert r.status_code == 201, r.text
    return r.json()


def _first_instance(client, event_id, headers):
    r = client.get(f"/api/v1/events/{event_id}/instances/available", headers=headers)
    assert r.status_code == 200
    return r.json()[0]


class TestAuth:
    """Tests for the bearer token boundary."""

    def test_missing_token(self, client):
        assert client.get("/api/v1/events").status_code == 401

    def test_garbage_token(self, client):
        r = client.get("/api/v1/events", headers={"Authorization": "Bearer not-a-jwt"})
        assert r.status_code == 401

    def test_participant_cannot_create_events(self, client, user_headers):
        r = client.post("/api/v1/events", json={}, headers=user_headers)
        assert r.status_code in (403, 422)

    def test_healthz_is_public(self, client):
        assert client.get("/healthz").json() == {"status": "ok"}


class TestEventsApi:
    """Tests for event endpoints."""

    def test_create_reports_instances(self, client, admin_headers):
        data = _create_event(client, admin_headers)
        assert data["event"]["recurrence_pattern"] == {"weekdays": [1, 3, 5]}
        assert data["instances"]["created"] >= 5

    def test_invalid_pattern_body(self, client, admin_headers):
        body = {"name": "x", "time": "9h", "capacity": 1, "start_date": str(date.today())}
        r = client.post("/api/v1/events", json=body, headers=admin_headers)
        assert r.status_code == 422
        assert r.json()["code"] == "INVALID_PATTERN"

    def test_past_event_refused(self, client, admin_headers):
        body = {"name": "x", "time": "10:00", "capacity": 1, "start_date": str(date.today() - timedelta(days=5))}
        r = client.post("/api/v1/events", json=body, headers=admin_headers)
        assert r.status_code == 422
        assert r.json() == {"code": "EVENT_IN_PAST", "message": "Cannot create events in the past", "details": None}

    def test_patch_null_start_date(self, client, admin_headers):
        """An explicit null on a required field is a validation error, not a conflict."""
        ev = _create_event(client, admin_headers)["event"]
        r = client.patch(f"/api/v1/events/{ev['id']}", json={"start_date": None}, headers=admin_headers)
        assert r.status_code == 422
        again = client.get(f"/api/v1/events/{ev['id']}", headers=admin_headers).json()
        assert again["start_date"] == ev["start_date"]


class TestRegistrationFlow:
    """End-to-end registration, check-in and impact over HTTP."""

    def test_full_flow(self, client, admin_headers, user_headers):
        ev = _create_event(client, admin_headers)
        inst = _first_instance(client, ev["event"]["id"], user_headers)

        r = client.post("/api/v1/registrations", json={"instance_id": inst["id"]}, headers=user_headers)
        assert r.status_code == 201, r.text
        reg = r.json()
        pre = reg["assessments"][0]
        assert pre["type"] == "PRE"

        r = client.post("/api/v1/attendance/scan", json={"token": reg["token"]}, headers=admin_headers)
        assert r.status_code == 409
        assert r.json() == {
            "code": "PRE_ASSESSMENT_MISSING",
            "message": "The PRE questionnaire has not been completed",
            "details": None,
        }

        r = client.post(f"/api/v1/wellness/{pre['id']}/complete",
                        json={"sleep_quality": 4, "stress_level": 8, "mood": 3}, headers=user_headers)
        assert r.status_code == 200

        r = client.post("/api/v1/attendance/scan", json={"token": reg["token"]}, headers=admin_headers)
        assert r.status_code == 201

        pending = client.get("/api/v1/wellness/pending", headers=user_headers).json()
        assert [a["type"] for a in pending] == ["POST"]
        r = client.post(f"/api/v1/wellness/{pending[0]['id']}/complete",
                        json={"sleep_quality": 7, "stress_level": 5, "mood": 6}, headers=user_headers)
        assert r.status_code == 200

        r = client.get(f"/api/v1/registrations/{reg['id']}/impact", headers=user_headers)
        assert r.json()["impact"] == {
            "sleep_quality_change": 3,
            "stress_level_change": -3,
            "mood_change": 3,
            "overall_impact": 3.0,
        }

        stats = client.get(f"/api/v1/instances/{inst['id']}/attendance/stats", headers=admin_headers).json()
        assert stats["attended"] == 1 and stats["post_completed"] == 1

    def test_full_instance_error_body(self, client, admin_headers, make_headers):
        ev = _create_event(client, admin_headers, capacity=1)
        inst = _first_instance(client, ev["event"]["id"], admin_headers)

        first = client.post("/api/v1/registrations", json={"instance_id": inst["id"]}, headers=make_headers("a"))
        second = client.post("/api/v1/registrations", json={"instance_id": inst["id"]}, headers=make_headers("b"))

        assert first.status_code == 201
        assert second.status_code == 409
        assert second.json()["code"] == "CAPACITY_EXCEEDED"
        avail = client.get(f"/api/v1/instances/{inst['id']}/availability", headers=admin_headers).json()
        assert avail == {"instance_id": inst["id"], "capacity": 1, "registered": 1, "available": 0}

    def test_cancel_by_other_user(self, client, admin_headers, user_headers, make_headers):
        ev = _create_event(client, admin_headers)
        inst = _first_instance(client, ev["event"]["id"], user_headers)
        reg = client.post("/api/v1/registrations", json={"instance_id": inst["id"]}, headers=user_headers).json()

        r = client.post(f"/api/v1/registrations/{reg['id']}/cancel", headers=make_headers("intruder"))
        assert r.status_code == 403
        assert r.json()["code"] == "NOT_OWNER"

        r = client.post(f"/api/v1/registrations/{reg['id']}/cancel", headers=user_headers)
        assert r.status_code == 200
        assert r.json()["status"] == "cancelled"

    def test_qr_png(self, client, admin_headers, user_headers):
        ev = _create_event(client, admin_headers)
        inst = _first_instance(client, ev["event"]["id"], user_headers)
        reg = client.post("/api/v1/registrations", json={"instance_id": inst["id"]}, headers=user_headers).json()

        r = client.get(f"/api/v1/registrations/{reg['id']}/qr", headers=user_headers)
        assert r.status_code == 200
        assert r.headers["content-type"] == "image/png"
        assert r.content.startswith(b"\x89PNG")

    def test_unknown_registration(self, client, user_headers):
        r = client.get("/api/v1/registrations/9999", headers=user_headers)
        assert r.status_code == 404
        assert r.json()["code"] == "NOT_FOUND"
