"""Pytest configuration and shared fixtures."""

import os
import tempfile
import threading
from datetime import timedelta

# settings leem o ambiente na importação
os.environ.setdefault("DATA_DIR", tempfile.mkdtemp(prefix="wellness-test-"))
os.environ.setdefault("RUN_MIGRATIONS_ON_STARTUP", "false")
os.environ.setdefault("TIMEZONE", "UTC")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from wellness.core.tokens import ROLE_ADMIN, ROLE_PARTICIPANT, create_access_token
from wellness.crud.base import utcnow
from wellness.db.base import Base
from wellness.db.session import build_engine, get_db
from wellness.models.event import Event, RecurrenceType
from wellness.models.event_instance import EventInstance


@pytest.fixture
def engine(tmp_path):
    # arquivo, não :memory:, para que threads vejam o mesmo banco
    eng = build_engine(f"sqlite:///{tmp_path / 'test.db'}")
    Base.metadata.create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    from wellness.main import api

    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    api.dependency_overrides[get_db] = _get_db
    yield TestClient(api, raise_server_exceptions=False)
    api.dependency_overrides.clear()


def auth_header(user_id: str, role: str = ROLE_PARTICIPANT) -> dict:
    return {"Authorization": f"Bearer {create_access_token(sub=user_id, role=role)}"}


@pytest.fixture
def make_headers():
    return auth_header


@pytest.fixture
def admin_headers() -> dict:
    return auth_header("admin-1", ROLE_ADMIN)


@pytest.fixture
def user_headers() -> dict:
    return auth_header("user-1")


@pytest.fixture
def make_instance(db):
    """Insert an event with one instance ``days_ahead`` days from now."""

    def _make(capacity: int = 5, days_ahead: float = 7) -> EventInstance:
        at = utcnow() + timedelta(days=days_ahead)
        ev = Event(
            name="Yoga",
            time=at.strftime("%H:%M"),
            capacity=capacity,
            recurrence_type=RecurrenceType.SINGLE.value,
            start_date=at.date(),
        )
        db.add(ev); db.flush()
        inst = EventInstance(event_id=ev.id, date_time=at, capacity=capacity)
        db.add(inst); db.commit(); db.refresh(inst)
        return inst

    return _make


@pytest.fixture
def run_concurrently(session_factory):
    """Run each ``fn(session)`` in its own thread and session, released together.

    Returns one ``(result, exception)`` pair per callable, in order.
    """

    def _run(*fns):
        barrier = threading.Barrier(len(fns))
        outcomes = [None] * len(fns)

        def worker(idx, fn):
            session = session_factory()
            try:
                barrier.wait()
                outcomes[idx] = (fn(session), None)
            except Exception as exc:  # noqa: BLE001  (o teste inspeciona o tipo)
                outcomes[idx] = (None, exc)
            finally:
                session.close()

        threads = [threading.Thread(target=worker, args=(i, fn)) for i, fn in enumerate(fns)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=60)
        return outcomes

    return _run
