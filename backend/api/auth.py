"""Authentication endpoints."""

import logging
from fastapi import APIRouter, HTTPException, Form, Request
from fastapi.responses import RedirectResponse
from backend.services import SessionManager, RecordStoreError, AuthenticationError

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login")
async def login(
    request: Request,
    email: str = Form(...),
    password: str = Form(...),
):
    """
    Sign in with the hosted auth service.

    Args:
        email: Account email
        password: Account password

    Returns:
        Redirect to dashboard on success
    """
    session_manager: SessionManager = request.app.state.session_manager

    session_id = session_manager.create_session()
    store = request.app.state.store_factory()

    try:
        user = await store.sign_in(email, password)

        session_manager.update_session(
            session_id,
            {
                "record_store": store,
                "user_id": user.id,
                "email": user.email or email,
            },
        )

        logger.info(f"User {email} logged in successfully")

        redirect_response = RedirectResponse(url="/dashboard", status_code=303)
        redirect_response.set_cookie(
            key="session_id",
            value=session_id,
            httponly=True,
            max_age=session_manager.timeout_minutes * 60,
            samesite="lax",
        )
        return redirect_response

    except AuthenticationError as e:
        logger.error(f"Login failed for {email}: {e}")
        session_manager.delete_session(session_id)
        raise HTTPException(status_code=401, detail=str(e))
    except RecordStoreError as e:
        logger.error(f"Login failed for {email}: {e}")
        session_manager.delete_session(session_id)
        raise HTTPException(status_code=502, detail=str(e))
    except Exception as e:
        logger.error(f"Unexpected error during login: {e}")
        session_manager.delete_session(session_id)
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("/register")
async def register(
    request: Request,
    email: str = Form(...),
    password: str = Form(...),
):
    """Create an account and send the user back to the login page."""
    store = request.app.state.store_factory()

    try:
        await store.sign_up(email, password)
    except RecordStoreError as e:
        logger.error(f"Registration failed for {email}: {e}")
        raise HTTPException(status_code=400, detail=str(e))

    logger.info(f"Registered {email}; awaiting email verification")
    return RedirectResponse(url="/?registered=1", status_code=303)


@router.post("/logout")
async def logout(request: Request):
    """Logout and destroy session."""
    session_manager: SessionManager = request.app.state.session_manager
    session_id = request.cookies.get("session_id")

    if session_id:
        session = session_manager.get_session(session_id)
        if session:
            store = session.get("record_store")
            if store:
                await store.sign_out()

        session_manager.delete_session(session_id)

    redirect_response = RedirectResponse(url="/", status_code=303)
    redirect_response.delete_cookie("session_id")
    return redirect_response


@router.get("/status")
async def status(request: Request):
    """Check authentication status."""
    session_manager: SessionManager = request.app.state.session_manager
    session_id = request.cookies.get("session_id")

    if not session_id:
        return {"authenticated": False}

    session = session_manager.get_session(session_id)
    if not session:
        return {"authenticated": False}

    return {
        "authenticated": True,
        "email": session.get("email"),
        "user_id": session.get("user_id"),
        "active_sessions": session_manager.get_active_session_count(),
    }
