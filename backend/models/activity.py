"""Activity data models."""

from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, Field


class ActivityCreate(BaseModel):
    """Writable fields of an activity record."""

    title: str = Field(min_length=1)
    category: Optional[str] = None
    description: Optional[str] = None
    start_time: Optional[str] = Field(None, description="Start timestamp (ISO, may lack a date)")
    end_time: Optional[str] = Field(None, description="End timestamp (ISO, may lack a date)")
    date: date


class Activity(ActivityCreate):
    """Logged activity as stored in the activities table."""

    id: str
    user_id: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        json_schema_extra = {
            "example": {
                "id": "0b6f4c1e-3f0a-4c55-9d2f-1d2b8f3e9a10",
                "title": "Morning run",
                "category": "Exercise",
                "description": "5k around the park",
                "start_time": "2025-01-15T07:30:00.000Z",
                "end_time": "2025-01-15T08:05:00.000Z",
                "date": "2025-01-15",
                "user_id": "5c3a8e0e-0000-4000-8000-000000000001",
            }
        }


class ActivitySummary(BaseModel):
    """Summary statistics for multiple activities."""

    total_activities: int
    total_minutes: int = Field(description="Tracked minutes across activities with a valid duration")
    category_count: int = 0
    top_category: Optional[str] = None
    busiest_day: Optional[date] = None


class ChartData(BaseModel):
    """Labels and counts for a single chart."""

    labels: list[str]
    values: list[int]


class ReportResponse(BaseModel):
    """Bucketed counts for the reports tab."""

    days: int
    daily: dict[str, int]
    categories: dict[str, int]
    daily_chart: ChartData
    category_chart: ChartData
    summary: ActivitySummary
