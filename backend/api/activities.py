"""Activities endpoints."""

import logging
from datetime import timedelta
from typing import Optional
from fastapi import APIRouter, Form, HTTPException, Request, Query
from fastapi.responses import RedirectResponse
from pydantic import ValidationError
from backend.config import settings
from backend.models.activity import ActivityCreate, ReportResponse
from backend.services import DataProcessor, RecordStoreError
from backend.services.time_format import format_time_for_db
from backend.api.deps import get_session_data, get_store, raise_store_error

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/activities", tags=["activities"])


@router.get("/list")
async def list_activities(request: Request):
    """
    Get all activities of the signed-in user, newest first.

    Returns:
        Activities with display fields and a count
    """
    session = get_session_data(request)
    store = get_store(session)

    try:
        activities = await store.list_activities(session["user_id"])
    except RecordStoreError as e:
        raise_store_error("fetching activities", e)

    return {
        "activities": [DataProcessor.to_card(a) for a in activities],
        "count": len(activities),
    }


@router.post("/create")
async def create_activity(
    request: Request,
    title: str = Form(""),
    category: str = Form(""),
    description: str = Form(""),
    start_time: str = Form(""),
    end_time: str = Form(""),
    date: str = Form(""),
):
    """
    Log a new activity from the dashboard form.

    Args:
        title: Activity title (required)
        category: Category label
        description: Free-text details
        start_time: Start time of day (HH:MM)
        end_time: End time of day (HH:MM)
        date: Calendar day (YYYY-MM-DD, required)

    Returns:
        Redirect to the dashboard on success
    """
    session = get_session_data(request)
    store = get_store(session)

    if not title.strip():
        raise HTTPException(status_code=400, detail="Title is required")
    if not date.strip():
        raise HTTPException(status_code=400, detail="Date is required")

    try:
        record = ActivityCreate(
            title=title.strip(),
            category=category.strip() or None,
            description=description.strip() or None,
            start_time=format_time_for_db(date, start_time.strip()),
            end_time=format_time_for_db(date, end_time.strip()),
            date=date,
        )
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=f"Invalid activity: {e.errors()[0]['msg']}")

    try:
        await store.insert_activity(record, session["user_id"])
    except RecordStoreError as e:
        raise_store_error("adding activity", e)

    return RedirectResponse(url="/dashboard", status_code=303)


@router.post("/{activity_id}/delete")
async def delete_activity(request: Request, activity_id: str):
    """Delete one activity and return to the dashboard."""
    session = get_session_data(request)
    store = get_store(session)

    try:
        await store.delete_activity(activity_id, session["user_id"])
    except RecordStoreError as e:
        raise_store_error("deleting activity", e)

    return RedirectResponse(url="/dashboard", status_code=303)


@router.post("/{activity_id}/edit")
async def edit_activity(request: Request, activity_id: str):
    """Editing is not supported; the request is only logged."""
    get_session_data(request)
    logger.info(f"Edit requested for activity {activity_id}")
    raise HTTPException(status_code=501, detail="Editing activities is not supported")


async def _fetch_window(request: Request, lookback_days: int):
    session = get_session_data(request)
    store = get_store(session)
    since = DataProcessor.today() - timedelta(days=lookback_days)

    try:
        return await store.list_activities(
            session["user_id"], since=since, order_by="date", ascending=True
        )
    except RecordStoreError as e:
        raise_store_error("fetching chart data", e)


@router.get("/charts")
async def get_charts(request: Request, days: int = Query(7, ge=1, le=365)):
    """
    Category distribution and activities per day for the charts tab.

    Args:
        days: Length of the per-day window

    Returns:
        Category and daily chart data
    """
    activities = await _fetch_window(request, settings.CHART_LOOKBACK_DAYS)

    categories = DataProcessor.category_counts(activities, settings.UNCATEGORIZED_LABEL)
    daily = DataProcessor.daily_counts(activities, days)

    return {
        "category_chart": DataProcessor.to_chart(categories).model_dump(),
        "daily_chart": DataProcessor.to_chart(
            daily, DataProcessor.day_labels(list(daily), "weekday")
        ).model_dump(),
    }


@router.get("/reports")
async def get_reports(
    request: Request,
    days: int = Query(7, ge=1, le=365),
    category: Optional[list[str]] = Query(None),
) -> ReportResponse:
    """
    Bucketed counts and summary over the last ``days`` days.

    Args:
        days: Length of the window
        category: Only count these categories (repeatable)
    """
    activities = await _fetch_window(request, days)
    activities = DataProcessor.filter_activities(
        activities, category, fallback=settings.UNCATEGORIZED_LABEL
    )
    return DataProcessor.build_report(activities, days, settings.UNCATEGORIZED_LABEL)
