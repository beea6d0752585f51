"""Hosted record store and auth client."""

from datetime import date
from typing import Any, Optional
import asyncio
import logging
import requests
from backend.config import Settings, settings as default_settings
from backend.models.activity import Activity, ActivityCreate
from backend.models.auth import AuthUser

logger = logging.getLogger(__name__)


class RecordStoreError(ValueError):
    """The hosted backend rejected a request or could not be reached."""


class AuthenticationError(RecordStoreError):
    """Credentials were rejected or the access token is no longer valid."""


class RecordStore:
    """Client for the hosted auth service and activities table."""

    ORDER_COLUMNS = ("created_at", "date")

    def __init__(
        self,
        base_url: str,
        api_key: str,
        table: str = "activities",
        timeout: Optional[float] = None,
        http: Optional[requests.Session] = None,
    ):
        """
        Initialize the record store client.

        Args:
            base_url: Project base URL
            api_key: Public API key sent with every request
            table: Activities table name
            timeout: Optional per-request timeout in seconds
            http: HTTP session to use (a new one by default)
        """
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.table = table
        self.timeout = timeout
        self.http = http or requests.Session()
        self.access_token: Optional[str] = None
        self.user: Optional[AuthUser] = None

    @classmethod
    def from_settings(cls, config: Optional[Settings] = None) -> "RecordStore":
        config = config or default_settings
        return cls(
            base_url=config.SUPABASE_URL,
            api_key=config.SUPABASE_KEY,
            table=config.ACTIVITIES_TABLE,
            timeout=config.REQUEST_TIMEOUT_SECONDS,
        )

    def _headers(self, extra: Optional[dict[str, str]] = None) -> dict[str, str]:
        headers = {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.access_token or self.api_key}",
            "Content-Type": "application/json",
        }
        if extra:
            headers.update(extra)
        return headers

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[dict[str, str]] = None,
        json: Any = None,
        headers: Optional[dict[str, str]] = None,
    ) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = self.http.request(
                method,
                url,
                params=params,
                json=json,
                headers=self._headers(headers),
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            message = self._error_message(e.response)
            logger.error(f"{method} {path} failed with {status}: {message}")
            if status == 401 or (status in (400, 403) and path.startswith("/auth/")):
                raise AuthenticationError(message) from e
            raise RecordStoreError(f"Record store error: {message}") from e
        except requests.exceptions.RequestException as e:
            logger.error(f"{method} {path} failed: {e}")
            raise RecordStoreError(f"Could not reach record store: {e}") from e

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            logger.error(f"{method} {path} returned a body that is not JSON: {e}")
            raise RecordStoreError(f"Invalid response from record store: {e}") from e

    async def _call(self, method: str, path: str, **kwargs) -> Any:
        """Run ``_request`` in a worker thread."""
        return await asyncio.to_thread(self._request, method, path, **kwargs)

    @staticmethod
    def _error_message(response: Optional[requests.Response]) -> str:
        if response is None:
            return "no response"
        try:
            body = response.json()
        except ValueError:
            return response.text or response.reason or "unknown error"
        if isinstance(body, dict):
            for key in ("error_description", "msg", "message", "error"):
                if body.get(key):
                    return str(body[key])
        return str(body)

    @staticmethod
    def _parse_user(payload: dict, access_token: Optional[str] = None) -> AuthUser:
        user = payload.get("user", payload)
        if not user or not user.get("id"):
            raise AuthenticationError("Auth response did not contain a user")
        return AuthUser(id=user["id"], email=user.get("email"), access_token=access_token)

    # --- Auth ---

    async def sign_up(self, email: str, password: str) -> AuthUser:
        """
        Register a new account.

        Raises:
            RecordStoreError: If registration is rejected
        """
        payload = await self._call(
            "POST", "/auth/v1/signup", json={"email": email, "password": password}
        )
        user = self._parse_user(payload or {})
        logger.info(f"Registered account for {email}")
        return user

    async def sign_in(self, email: str, password: str) -> AuthUser:
        """
        Sign in with email and password and keep the access token.

        Raises:
            AuthenticationError: If the credentials are rejected
        """
        payload = await self._call(
            "POST",
            "/auth/v1/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        payload = payload or {}
        access_token = payload.get("access_token")
        if not access_token:
            raise AuthenticationError("No access token returned")

        self.access_token = access_token
        self.user = self._parse_user(payload, access_token)
        logger.info(f"Signed in {email}")
        return self.user

    async def get_user(self) -> AuthUser:
        """Fetch the user behind the current access token."""
        if not self.access_token:
            raise AuthenticationError("Not signed in")
        payload = await self._call("GET", "/auth/v1/user")
        return self._parse_user(payload or {}, self.access_token)

    async def sign_out(self):
        """Revoke the access token and forget the user."""
        if not self.access_token:
            return
        try:
            await self._call("POST", "/auth/v1/logout")
        except RecordStoreError as e:
            logger.warning(f"Sign-out request failed: {e}")
        finally:
            self.access_token = None
            self.user = None

    # --- Activities ---

    async def insert_activity(self, record: ActivityCreate, owner_id: str) -> Activity:
        """
        Insert one activity owned by ``owner_id``.

        Returns:
            The stored activity including its identifier
        """
        row = record.model_dump(mode="json")
        row["user_id"] = owner_id
        payload = await self._call(
            "POST",
            f"/rest/v1/{self.table}",
            json=[row],
            headers={"Prefer": "return=representation"},
        )
        if not payload:
            raise RecordStoreError("Insert returned no row")
        stored = Activity.model_validate(payload[0])
        logger.info(f"Inserted activity {stored.id} for {owner_id}")
        return stored

    async def list_activities(
        self,
        owner_id: str,
        since: Optional[date] = None,
        order_by: str = "created_at",
        ascending: bool = False,
    ) -> list[Activity]:
        """
        Select all activities for an owner.

        Args:
            owner_id: Owner identifier
            since: Only activities dated on or after this day
            order_by: "created_at" or "date"
            ascending: Sort direction

        Returns:
            List of activities
        """
        if order_by not in self.ORDER_COLUMNS:
            raise ValueError(f"Cannot order activities by {order_by}")

        params = {
            "select": "*",
            "user_id": f"eq.{owner_id}",
            "order": f"{order_by}.{'asc' if ascending else 'desc'}",
        }
        if since is not None:
            params["date"] = f"gte.{since.isoformat()}"

        payload = await self._call("GET", f"/rest/v1/{self.table}", params=params)
        activities = [Activity.model_validate(row) for row in payload or []]
        logger.info(f"Retrieved {len(activities)} activities for {owner_id}")
        return activities

    async def delete_activity(self, activity_id: str, owner_id: str):
        """Delete one activity by identifier."""
        await self._call(
            "DELETE",
            f"/rest/v1/{self.table}",
            params={"id": f"eq.{activity_id}", "user_id": f"eq.{owner_id}"},
        )
        logger.info(f"Deleted activity {activity_id} for {owner_id}")

    def close(self):
        """Release the underlying HTTP connection pool."""
        self.http.close()
