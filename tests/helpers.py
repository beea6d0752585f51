"""Test doubles and builders shared by the test modules."""

import itertools
from datetime import date, datetime, timedelta, timezone
from typing import Optional

from backend.models import Activity, ActivityCreate, AuthUser
from backend.services import AuthenticationError, RecordStoreError

PASSWORD = "secret"


class FakeStore:
    """In-memory record store used in place of the hosted backend."""

    def __init__(self):
        self.activities: list[Activity] = []
        self.fail_titles: set[str] = set()
        self.inserted_titles: list[str] = []
        self.registered: list[str] = []
        self.user: Optional[AuthUser] = None
        self._ids = itertools.count(1)
        self._clock = datetime(2024, 1, 1, tzinfo=timezone.utc)

    async def sign_up(self, email, password):
        if email in self.registered:
            raise AuthenticationError("User already registered")
        self.registered.append(email)
        return AuthUser(id=f"user-{email}", email=email)

    async def sign_in(self, email, password):
        if password != PASSWORD:
            raise AuthenticationError("Invalid login credentials")
        self.user = AuthUser(id="user-1", email=email, access_token="token-1")
        return self.user

    async def get_user(self):
        if self.user is None:
            raise AuthenticationError("JWT expired")
        return self.user

    async def sign_out(self):
        self.user = None

    async def insert_activity(self, record: ActivityCreate, owner_id):
        if record.title in self.fail_titles:
            raise RecordStoreError("insert rejected")
        self._clock += timedelta(minutes=1)
        stored = Activity(
            id=f"act-{next(self._ids)}",
            user_id=owner_id,
            created_at=self._clock,
            **record.model_dump(),
        )
        self.activities.append(stored)
        self.inserted_titles.append(record.title)
        return stored

    async def list_activities(self, owner_id, since=None, order_by="created_at", ascending=False):
        rows = [a for a in self.activities if a.user_id == owner_id]
        if since is not None:
            rows = [a for a in rows if a.date >= since]
        return sorted(rows, key=lambda a: getattr(a, order_by), reverse=not ascending)

    async def delete_activity(self, activity_id, owner_id):
        self.activities = [
            a for a in self.activities if not (a.id == activity_id and a.user_id == owner_id)
        ]


def make_activity(title="Write report", category="Work", day=date(2024, 5, 6), **kwargs):
    fields = {
        "id": f"id-{title}",
        "title": title,
        "category": category,
        "date": day,
        "user_id": "user-1",
    }
    fields.update(kwargs)
    return Activity(**fields)
