"""Running timer endpoints."""

import logging
from typing import Optional
from fastapi import APIRouter, Form, HTTPException, Request
from fastapi.responses import RedirectResponse
from backend.services import RecordStoreError, TimerService
from backend.api.deps import get_session_data, get_store, raise_store_error

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/timer", tags=["timer"])


def _back_to_dashboard() -> RedirectResponse:
    return RedirectResponse(url="/dashboard", status_code=303)


@router.get("/")
async def get_timer(request: Request):
    """Current timer snapshot, restored from the session."""
    session = get_session_data(request)
    return TimerService(session).snapshot()


@router.post("/draft")
async def update_draft(
    request: Request,
    title: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
):
    """Save the in-progress title, category and description."""
    session = get_session_data(request)
    TimerService(session).update_draft(title=title, category=category, description=description)
    return _back_to_dashboard()


@router.post("/start")
async def start_timer(request: Request):
    """Start or resume the timer."""
    session = get_session_data(request)
    TimerService(session).start()
    return _back_to_dashboard()


@router.post("/pause")
async def pause_timer(request: Request):
    session = get_session_data(request)
    TimerService(session).pause()
    return _back_to_dashboard()


@router.post("/reset")
async def reset_timer(request: Request):
    """Discard the in-progress entry."""
    session = get_session_data(request)
    TimerService(session).clear()
    return _back_to_dashboard()


@router.post("/stop")
async def stop_timer(request: Request):
    """
    Save the timed entry as an activity and clear the timer.

    Returns:
        Redirect to the dashboard on success
    """
    session = get_session_data(request)
    store = get_store(session)

    try:
        await TimerService(session).stop(store, session["user_id"])
    except RecordStoreError as e:
        raise_store_error("saving timer entry", e)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return _back_to_dashboard()
