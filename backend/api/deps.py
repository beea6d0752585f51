"""Shared request helpers for the API routers."""

import logging
from typing import Any, NoReturn
from fastapi import HTTPException, Request
from backend.services import SessionManager, RecordStore, RecordStoreError, AuthenticationError

logger = logging.getLogger(__name__)


def get_session_data(request: Request) -> dict[str, Any]:
    """Helper to get and validate session."""
    session_manager: SessionManager = request.app.state.session_manager
    session_id = request.cookies.get("session_id")

    if not session_id:
        raise HTTPException(status_code=401, detail="Not authenticated")

    session = session_manager.get_session(session_id)
    if not session:
        raise HTTPException(status_code=401, detail="Session expired")

    return session


def get_store(session: dict[str, Any]) -> RecordStore:
    store = session.get("record_store")
    if not store:
        raise HTTPException(status_code=500, detail="Record store not initialized")
    return store


def raise_store_error(action: str, error: RecordStoreError) -> NoReturn:
    """Translate a record store failure into an HTTP error."""
    logger.error(f"Error {action}: {error}")
    if isinstance(error, AuthenticationError):
        raise HTTPException(status_code=401, detail=str(error)) from error
    raise HTTPException(status_code=502, detail=str(error)) from error
