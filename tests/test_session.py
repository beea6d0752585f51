from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from backend.services.session import SessionManager

T0 = datetime(2024, 5, 6, 9, 0, tzinfo=timezone.utc)


class FakeClock:
    def __init__(self, now=T0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock()


def test_create_update_and_get_session(clock):
    manager = SessionManager(timeout_minutes=60, clock=clock)
    session_id = manager.create_session()

    assert manager.update_session(session_id, {"user_id": "user-1"})
    assert manager.get_session(session_id) == {"user_id": "user-1"}
    assert manager.get_active_session_count() == 1


def test_session_data_is_shared_between_lookups(clock):
    manager = SessionManager(clock=clock)
    session_id = manager.create_session()

    manager.get_session(session_id)["timer_state"] = "{}"

    assert manager.get_session(session_id) == {"timer_state": "{}"}


def test_unknown_session():
    manager = SessionManager()
    assert manager.get_session("missing") is None
    assert manager.update_session("missing", {}) is False
    assert manager.delete_session("missing") is False


def test_idle_session_is_dropped(clock):
    manager = SessionManager(timeout_minutes=5, clock=clock)
    session_id = manager.create_session()
    clock.advance(minutes=10)

    assert manager.get_session(session_id) is None
    assert manager.get_active_session_count() == 0


def test_access_refreshes_idle_timer(clock):
    manager = SessionManager(timeout_minutes=5, clock=clock)
    session_id = manager.create_session()

    clock.advance(minutes=4)
    assert manager.get_session(session_id) == {}
    clock.advance(minutes=4)
    assert manager.get_session(session_id) == {}


def test_remove_expired_keeps_active_sessions(clock):
    manager = SessionManager(timeout_minutes=5, clock=clock)
    stale = manager.create_session()
    clock.advance(minutes=4)
    fresh = manager.create_session()
    clock.advance(minutes=2)

    assert manager.remove_expired() == 1
    assert manager.get_session(stale) is None
    assert manager.get_session(fresh) == {}


def test_delete_closes_record_store(clock):
    manager = SessionManager(clock=clock)
    store = MagicMock()
    session_id = manager.create_session()
    manager.update_session(session_id, {"record_store": store})

    assert manager.delete_session(session_id) is True
    store.close.assert_called_once()


@pytest.mark.asyncio
async def test_cleanup_task_starts_and_stops():
    manager = SessionManager(cleanup_interval_seconds=3600)
    await manager.start_cleanup_task()
    assert manager._cleanup_task is not None

    await manager.stop_cleanup_task()
    assert manager._cleanup_task is None
