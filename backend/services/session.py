"""In-memory login sessions keyed by the ``session_id`` cookie."""

import secrets
import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class SessionEntry:
    data: dict[str, Any] = field(default_factory=dict)
    last_seen: datetime = field(default_factory=_utcnow)


class SessionManager:
    """
    Holds one entry per signed-in browser.

    Each entry carries the user's ``RecordStore`` client, identity and timer
    state. Entries idle for longer than ``timeout_minutes`` are dropped on
    access and by a periodic sweep; dropping an entry closes its store client.
    """

    def __init__(
        self,
        timeout_minutes: int = 60,
        cleanup_interval_seconds: int = 300,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.timeout_minutes = timeout_minutes
        self.cleanup_interval_seconds = cleanup_interval_seconds
        self.clock = clock
        self._entries: dict[str, SessionEntry] = {}
        self._cleanup_task: Optional[asyncio.Task] = None

    @property
    def timeout(self) -> timedelta:
        return timedelta(minutes=self.timeout_minutes)

    async def start_cleanup_task(self):
        """Start the periodic sweep of idle sessions."""
        if self._cleanup_task is None:
            self._cleanup_task = asyncio.create_task(self._sweep_forever())
            logger.info(f"Session sweep every {self.cleanup_interval_seconds}s")

    async def stop_cleanup_task(self):
        if self._cleanup_task is None:
            return
        self._cleanup_task.cancel()
        try:
            await self._cleanup_task
        except asyncio.CancelledError:
            pass
        self._cleanup_task = None

    async def _sweep_forever(self):
        while True:
            await asyncio.sleep(self.cleanup_interval_seconds)
            removed = self.remove_expired()
            if removed:
                logger.info(f"Removed {removed} idle sessions")

    def remove_expired(self) -> int:
        """Drop every idle session; returns how many were dropped."""
        now = self.clock()
        idle = [sid for sid, entry in self._entries.items() if self._idle(entry, now)]
        for session_id in idle:
            self.delete_session(session_id)
        return len(idle)

    def create_session(self) -> str:
        session_id = secrets.token_urlsafe(32)
        self._entries[session_id] = SessionEntry(last_seen=self.clock())
        return session_id

    def get_session(self, session_id: str) -> Optional[dict[str, Any]]:
        """
        Look up a session and refresh its idle timer.

        Returns:
            The mutable session dict, or None if unknown or idle too long
        """
        entry = self._entries.get(session_id)
        if entry is None:
            return None

        now = self.clock()
        if self._idle(entry, now):
            logger.info("Session expired after inactivity")
            self.delete_session(session_id)
            return None

        entry.last_seen = now
        return entry.data

    def update_session(self, session_id: str, data: dict[str, Any]) -> bool:
        entry = self._entries.get(session_id)
        if entry is None:
            return False

        entry.data.update(data)
        entry.last_seen = self.clock()
        return True

    def delete_session(self, session_id: str) -> bool:
        """Forget a session and close its record store client, if any."""
        entry = self._entries.pop(session_id, None)
        if entry is None:
            return False

        store = entry.data.get("record_store")
        if store is not None and hasattr(store, "close"):
            store.close()
        return True

    def _idle(self, entry: SessionEntry, now: datetime) -> bool:
        return now - entry.last_seen > self.timeout

    def get_active_session_count(self) -> int:
        return len(self._entries)
