"""Running timer persisted in the user session."""

import logging
from datetime import datetime, timezone
from typing import Any, Optional
from backend.models.activity import Activity, ActivityCreate
from backend.models.timer import TimerState
from backend.services.record_store import RecordStore
from backend.services.time_format import format_elapsed, to_iso_z

logger = logging.getLogger(__name__)

TIMER_KEY = "timer_state"


class TimerService:
    """Load, mutate and save the timer snapshot kept in a session."""

    def __init__(self, session: dict[str, Any]):
        self.session = session

    @staticmethod
    def now() -> datetime:
        return datetime.now(timezone.utc)

    def load(self) -> TimerState:
        raw = self.session.get(TIMER_KEY)
        if not raw:
            return TimerState()
        return TimerState.model_validate_json(raw)

    def save(self, state: TimerState) -> TimerState:
        self.session[TIMER_KEY] = state.model_dump_json()
        return state

    def clear(self) -> TimerState:
        self.session.pop(TIMER_KEY, None)
        return TimerState()

    def update_draft(
        self,
        title: Optional[str] = None,
        category: Optional[str] = None,
        description: Optional[str] = None,
    ) -> TimerState:
        state = self.load()
        if title is not None:
            state.title = title
        if category is not None:
            state.category = category
        if description is not None:
            state.description = description
        return self.save(state)

    def start(self, now: Optional[datetime] = None) -> TimerState:
        state = self.load()
        state.start(now or self.now())
        return self.save(state)

    def pause(self, now: Optional[datetime] = None) -> TimerState:
        state = self.load()
        state.pause(now or self.now())
        return self.save(state)

    def snapshot(self, now: Optional[datetime] = None) -> dict:
        """Timer state plus the elapsed time as of ``now``."""
        state = self.load()
        elapsed = state.elapsed(now or self.now())
        data = state.model_dump(mode="json")
        data["elapsed"] = elapsed
        data["elapsed_display"] = format_elapsed(elapsed)
        return data

    def build_record(self, state: TimerState, now: datetime) -> ActivityCreate:
        """
        Turn the timer into an activity ending at ``now``.

        Raises:
            ValueError: If the timer never ran or has no title
        """
        started_at = state.started_at(now)
        if started_at is None:
            raise ValueError("Please start the timer first")
        if not state.title.strip():
            raise ValueError("Please enter a title for this activity")

        return ActivityCreate(
            title=state.title.strip(),
            category=state.category.strip() or None,
            description=state.description.strip() or None,
            start_time=to_iso_z(started_at),
            end_time=to_iso_z(now),
            date=now.astimezone(timezone.utc).date(),
        )

    async def stop(
        self, store: RecordStore, owner_id: str, now: Optional[datetime] = None
    ) -> Activity:
        """
        Save the running entry as an activity and clear the timer.

        The timer state is kept if the insert fails.
        """
        now = now or self.now()
        record = self.build_record(self.load(), now)
        stored = await store.insert_activity(record, owner_id)
        self.clear()
        logger.info(f"Saved timer entry {stored.id} for {owner_id}")
        return stored
