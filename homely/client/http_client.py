"""Authenticated async client for the Homely REST API.

Every request carries the stored access token as a bearer token. A 401
answer on any endpoint other than login/refresh triggers one refresh
attempt followed by exactly one retry of the original request; when no
refresh token is available, or the refresh or the retry is rejected, the
stored session is cleared and the error is raised to the caller.

Error Handling:
    - HTTP error statuses: httpx.HTTPStatusError (from raise_for_status)
    - Connection errors and timeouts: the underlying httpx.HTTPError
"""

from __future__ import annotations

import uuid
from datetime import date
from types import TracebackType
from typing import Any

import httpx

from homely.client.token_store import TokenStore
from homely.core.logging import get_logger

logger = get_logger(__name__)

AUTH_ENDPOINTS = ("/api/auth/login", "/api/auth/refresh")
DEFAULT_TIMEOUT_SECONDS = 30.0


def is_auth_endpoint(path: str) -> bool:
    """Check whether a request path belongs to the token endpoints."""
    return any(endpoint in path for endpoint in AUTH_ENDPOINTS)


class HomelyClient:
    """Async client that keeps a session and refreshes it on demand.

    Attributes:
        tokens: Session tokens shared by all requests of this client.
    """

    def __init__(
        self,
        base_url: str,
        tokens: TokenStore | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: API root, e.g. ``http://localhost:8000``.
            tokens: Existing session; a fresh empty store when omitted.
            transport: Optional httpx transport, used to stub the API in tests.
            timeout: Request timeout in seconds.
        """
        self.tokens = tokens or TokenStore()
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )

    async def __aenter__(self) -> HomelyClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # -------------------------------------------------------------------------
    # Transport
    # -------------------------------------------------------------------------

    async def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        headers = dict(kwargs.pop("headers", None) or {})
        if self.tokens.access_token:
            headers["Authorization"] = f"Bearer {self.tokens.access_token}"
        return await self._client.request(method, path, headers=headers, **kwargs)

    async def request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """Send a request, refreshing the session once on 401.

        Returns:
            The successful response.

        Raises:
            httpx.HTTPStatusError: The final response has an error status.
        """
        response = await self._send(method, path, **kwargs)
        if response.status_code != 401:
            response.raise_for_status()
            return response

        if is_auth_endpoint(path) or not self.tokens.refresh_token:
            logger.error("Token expired or invalid, logging out user")
            self.tokens.clear()
            response.raise_for_status()

        try:
            await self.refresh()
        except httpx.HTTPError:
            logger.error("Token refresh failed, logging out user")
            self.tokens.clear()
            raise

        response = await self._send(method, path, **kwargs)
        if response.status_code == 401:
            logger.error("Request rejected after token refresh, logging out user")
            self.tokens.clear()
        response.raise_for_status()
        return response

    async def _json(self, method: str, path: str, **kwargs: Any) -> Any:
        response = await self.request(method, path, **kwargs)
        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    # -------------------------------------------------------------------------
    # Session
    # -------------------------------------------------------------------------

    async def login(self, email: str, password: str) -> dict[str, Any]:
        """Sign in and store the issued session."""
        session = await self._json(
            "POST", "/api/auth/login", json={"email": email, "password": password}
        )
        self.tokens.save_session(session)
        logger.info("Signed in to Homely API")
        return session

    async def refresh(self) -> dict[str, Any]:
        """Exchange the stored refresh token for a new session.

        Raises:
            httpx.HTTPStatusError: The refresh token was rejected.
        """
        response = await self._client.post(
            "/api/auth/refresh", json={"refresh_token": self.tokens.refresh_token}
        )
        response.raise_for_status()
        session = response.json()
        self.tokens.save_session(session)
        logger.info("Access token refreshed")
        return session

    async def logout(self) -> None:
        """Revoke the session server-side and forget it locally."""
        try:
            if self.tokens.access_token:
                await self._send("POST", "/api/auth/logout")
        except httpx.HTTPError as e:
            logger.warning(f"Logout request failed: {type(e).__name__}")
        finally:
            self.tokens.clear()

    async def me(self) -> dict[str, Any]:
        return await self._json("GET", "/api/auth/me")

    # -------------------------------------------------------------------------
    # Households
    # -------------------------------------------------------------------------

    async def my_households(self) -> list[dict[str, Any]]:
        return await self._json("GET", "/api/households/my")

    async def household(self, household_id: uuid.UUID) -> dict[str, Any]:
        return await self._json("GET", f"/api/households/{household_id}")

    async def household_members(self, household_id: uuid.UUID) -> list[dict[str, Any]]:
        return await self._json("GET", f"/api/households/{household_id}/members")

    # -------------------------------------------------------------------------
    # Tasks and events
    # -------------------------------------------------------------------------

    async def tasks(self, household_id: uuid.UUID, **filters: Any) -> dict[str, Any]:
        params = {"household_id": str(household_id), **_params(filters)}
        return await self._json("GET", "/api/tasks", params=params)

    async def create_task(self, payload: dict[str, Any]) -> dict[str, Any]:
        return await self._json("POST", "/api/tasks", json=payload)

    async def events(
        self,
        household_id: uuid.UUID,
        start_date: date | None = None,
        end_date: date | None = None,
        status: str | None = None,
    ) -> list[dict[str, Any]]:
        params = _params(
            {
                "household_id": household_id,
                "start_date": start_date,
                "end_date": end_date,
                "status": status,
            }
        )
        return await self._json("GET", "/api/events", params=params)

    async def complete_event(
        self,
        event_id: uuid.UUID,
        completion_notes: str | None = None,
        completion_date: date | None = None,
    ) -> dict[str, Any]:
        body = _params({"completion_notes": completion_notes, "completion_date": completion_date})
        return await self._json("POST", f"/api/events/{event_id}/complete", json=body)

    async def postpone_event(
        self, event_id: uuid.UUID, new_due_date: date, reason: str
    ) -> dict[str, Any]:
        body = {"new_due_date": new_due_date.isoformat(), "reason": reason}
        return await self._json("POST", f"/api/events/{event_id}/postpone", json=body)

    async def cancel_event(self, event_id: uuid.UUID, reason: str) -> dict[str, Any]:
        return await self._json("POST", f"/api/events/{event_id}/cancel", json={"reason": reason})

    # -------------------------------------------------------------------------
    # Dashboard
    # -------------------------------------------------------------------------

    async def upcoming_events(
        self, days: int = 7, household_id: uuid.UUID | None = None
    ) -> dict[str, Any]:
        params = _params({"days": days, "household_id": household_id})
        return await self._json("GET", "/api/dashboard/upcoming-events", params=params)

    async def dashboard_statistics(self, household_id: uuid.UUID) -> dict[str, Any]:
        return await self._json(
            "GET", "/api/dashboard/statistics", params={"household_id": str(household_id)}
        )


def _params(values: dict[str, Any]) -> dict[str, Any]:
    """Drop unset values and stringify ids and dates."""
    params: dict[str, Any] = {}
    for key, value in values.items():
        if value is None:
            continue
        if isinstance(value, uuid.UUID):
            value = str(value)
        elif isinstance(value, date):
            value = value.isoformat()
        params[key] = value
    return params
