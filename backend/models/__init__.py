"""Data models for the application."""

from .activity import Activity, ActivityCreate, ActivitySummary, ChartData, ReportResponse
from .auth import AuthUser
from .imports import ImportRow, ImportRowResult, ImportResult
from .timer import TimerState

__all__ = [
    "Activity",
    "ActivityCreate",
    "ActivitySummary",
    "ChartData",
    "ReportResponse",
    "AuthUser",
    "ImportRow",
    "ImportRowResult",
    "ImportResult",
    "TimerState",
]
