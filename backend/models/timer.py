"""Running timer state."""

from datetime import datetime, timedelta
from typing import Optional
from pydantic import BaseModel, Field


class TimerState(BaseModel):
    """
    Serialisable snapshot of an in-progress timer entry.

    ``elapsed_seconds`` holds the time accumulated before the current run;
    while running, ``resumed_at`` marks when the current run began.
    """

    title: str = ""
    category: str = ""
    description: str = ""
    is_running: bool = False
    elapsed_seconds: int = Field(0, ge=0)
    resumed_at: Optional[datetime] = None

    def elapsed(self, now: datetime) -> int:
        """Total elapsed whole seconds as of ``now``."""
        if self.is_running and self.resumed_at is not None:
            running_for = int((now - self.resumed_at).total_seconds())
            return self.elapsed_seconds + max(running_for, 0)
        return self.elapsed_seconds

    def start(self, now: datetime) -> None:
        if not self.is_running:
            self.resumed_at = now
            self.is_running = True

    def pause(self, now: datetime) -> None:
        if self.is_running:
            self.elapsed_seconds = self.elapsed(now)
            self.is_running = False
            self.resumed_at = None

    def started_at(self, now: datetime) -> Optional[datetime]:
        """Start of the entry, accounting for any paused time; None if never started."""
        if not self.is_running and self.elapsed_seconds == 0:
            return None
        return now - timedelta(seconds=self.elapsed(now))
