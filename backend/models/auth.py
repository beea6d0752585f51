"""Authentication models."""

from typing import Optional
from pydantic import BaseModel


class AuthUser(BaseModel):
    """Authenticated user as returned by the hosted auth service."""

    id: str
    email: Optional[str] = None
    access_token: Optional[str] = None
