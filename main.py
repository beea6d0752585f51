"""Main FastAPI application for Activity Tracker."""

import logging
from contextlib import asynccontextmanager
from datetime import timedelta
from pathlib import Path
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from backend.api import auth_router, activities_router, timer_router, export_router
from backend.config import settings
from backend.services import (
    AuthenticationError,
    DataProcessor,
    RecordStore,
    RecordStoreError,
    SessionManager,
    TimerService,
)

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Paths
BASE_DIR = Path(__file__).resolve().parent
TEMPLATES_DIR = BASE_DIR / "backend" / "templates"
STATIC_DIR = BASE_DIR / "backend" / "static"

TABS = ("activities", "charts", "reports", "export-import")
CATEGORIES = ("Work", "Study", "Exercise", "Personal", "Other")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup/shutdown events."""
    logger.info("Starting Activity Tracker application...")
    session_manager = SessionManager(
        timeout_minutes=settings.SESSION_TIMEOUT_MINUTES,
        cleanup_interval_seconds=settings.SESSION_CLEANUP_INTERVAL_SECONDS,
    )
    await session_manager.start_cleanup_task()
    app.state.session_manager = session_manager
    if not hasattr(app.state, "store_factory"):
        app.state.store_factory = RecordStore.from_settings
    logger.info("Session manager initialized")

    yield

    logger.info("Shutting down Activity Tracker application...")
    await session_manager.stop_cleanup_task()


app = FastAPI(
    title="Activity Tracker",
    description="Personal activity log with charts, reports and CSV export/import",
    version="0.1.0",
    lifespan=lifespan,
)

STATIC_DIR.mkdir(exist_ok=True)
app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

app.include_router(auth_router)
app.include_router(activities_router)
app.include_router(timer_router)
app.include_router(export_router)


def _current_session(request: Request):
    session_id = request.cookies.get("session_id")
    if not session_id:
        return None
    session_manager: SessionManager = request.app.state.session_manager
    return session_manager.get_session(session_id)


@app.get("/", response_class=HTMLResponse)
async def index(request: Request, registered: bool = False):
    """Landing page with login form."""
    if _current_session(request):
        return RedirectResponse(url="/dashboard", status_code=303)

    return templates.TemplateResponse(
        request, "index.html", {"registered": registered}
    )


@app.get("/register", response_class=HTMLResponse)
async def register_page(request: Request):
    """Account registration form."""
    return templates.TemplateResponse(request, "register.html", {})


@app.get("/dashboard", response_class=HTMLResponse)
async def dashboard(
    request: Request,
    tab: str = "activities",
    days: int = 7,
    category: Optional[str] = None,
):
    """
    Main dashboard page.

    The access token is re-checked on every load; a revoked or expired
    token ends the session.
    """
    session = _current_session(request)
    if not session:
        response = RedirectResponse(url="/", status_code=303)
        response.delete_cookie("session_id")
        return response

    if tab not in TABS:
        tab = "activities"
    if days not in (7, 30):
        days = 7

    store: RecordStore = session["record_store"]
    owner_id = session["user_id"]
    context = {
        "email": session.get("email"),
        "tab": tab,
        "days": days,
        "categories": CATEGORIES,
        "today": DataProcessor.today().isoformat(),
        "timer": TimerService(session).snapshot(),
        "category": category or "",
        "uncategorized_label": settings.UNCATEGORIZED_LABEL,
        "error": None,
    }

    try:
        await store.get_user()
        if tab == "activities":
            activities = await store.list_activities(owner_id)
            context["activities"] = [DataProcessor.to_card(a) for a in activities]
        elif tab in ("charts", "reports"):
            lookback = settings.CHART_LOOKBACK_DAYS if tab == "charts" else days
            activities = await store.list_activities(
                owner_id,
                since=DataProcessor.today() - timedelta(days=lookback),
                order_by="date",
                ascending=True,
            )
            window = 7 if tab == "charts" else days
            if tab == "reports" and category:
                activities = DataProcessor.filter_activities(
                    activities, [category], fallback=settings.UNCATEGORIZED_LABEL
                )
            context["report"] = DataProcessor.build_report(
                activities, window, settings.UNCATEGORIZED_LABEL
            )
    except AuthenticationError as e:
        logger.error(f"Session for {session.get('email')} is no longer valid: {e}")
        request.app.state.session_manager.delete_session(request.cookies.get("session_id"))
        response = RedirectResponse(url="/", status_code=303)
        response.delete_cookie("session_id")
        return response
    except RecordStoreError as e:
        logger.error(f"Error loading dashboard: {e}")
        context["error"] = str(e)

    return templates.TemplateResponse(request, "dashboard.html", context)


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy", "service": "Activity Tracker"}


def main():
    """Run the application with uvicorn."""
    import uvicorn

    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info",
    )


if __name__ == "__main__":
    main()
