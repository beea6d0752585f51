"""API endpoints."""

from .auth import router as auth_router
from .activities import router as activities_router
from .timer import router as timer_router
from .export import router as export_router

__all__ = ["auth_router", "activities_router", "timer_router", "export_router"]
