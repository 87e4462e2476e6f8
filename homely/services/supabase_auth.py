"""HTTP client for the Supabase GoTrue authentication API.

Token endpoints are called with the anon key; admin endpoints
(``/auth/v1/admin/users``) use the service-role key both as ``apikey``
and as the bearer token.

Error Handling:
    - Connection errors and timeouts: ExternalServiceError
    - HTTP 5xx: ExternalServiceError
    - HTTP 400/401/403 on token endpoints: AuthenticationError
    - Other HTTP 4xx: ExternalServiceError carrying the upstream status
"""

from __future__ import annotations

import secrets
import string
import uuid
from typing import Any

import httpx

from homely.core.config import Settings, get_settings
from homely.core.exceptions import AuthenticationError, ExternalServiceError
from homely.core.logging import get_logger, sanitize_error

logger = get_logger(__name__)

SERVICE_NAME = "supabase"

_PASSWORD_ALPHABET = string.ascii_letters + string.digits + "!@#$%^&*"
GENERATED_PASSWORD_LENGTH = 16

_AUTH_FAILURE_STATUSES = frozenset({400, 401, 403})


def generate_password(length: int = GENERATED_PASSWORD_LENGTH) -> str:
    """Generate a random password for accounts created without one."""
    return "".join(secrets.choice(_PASSWORD_ALPHABET) for _ in range(length))


class SupabaseAuthClient:
    """Thin async wrapper over the GoTrue REST endpoints.

    Attributes:
        base_url: Supabase project URL without a trailing slash.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            settings: Application settings; defaults to get_settings().
            transport: Optional httpx transport, used to stub the API in tests.
        """
        self.settings = settings or get_settings()
        self.base_url = self.settings.supabase_url.rstrip("/")
        self._transport = transport
        self._timeout = httpx.Timeout(self.settings.supabase_timeout_seconds)

    def _anon_headers(self, access_token: str | None = None) -> dict[str, str]:
        headers = {"apikey": self.settings.supabase_key}
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"
        return headers

    def _admin_headers(self) -> dict[str, str]:
        key = self.settings.supabase_service_role_key
        return {"apikey": key, "Authorization": f"Bearer {key}"}

    async def _request(
        self,
        method: str,
        path: str,
        *,
        headers: dict[str, str],
        params: dict[str, str] | None = None,
        json: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """Send a request, converting transport failures to ExternalServiceError.

        HTTP error statuses are returned to the caller, not raised.
        """
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                response = await client.request(
                    method, path, headers=headers, params=params, json=json
                )
        except httpx.TimeoutException as e:
            logger.error(f"Supabase request timed out: {method} {path}")
            raise ExternalServiceError(
                "Authentication service timed out", service_name=SERVICE_NAME
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"Failed to reach Supabase: {method} {path}: {sanitize_error(e)}")
            raise ExternalServiceError(
                "Authentication service is unavailable", service_name=SERVICE_NAME
            ) from e

        if response.status_code >= 500:
            logger.error(
                f"Supabase returned {response.status_code} for {method} {path}",
                extra={"status_code": response.status_code},
            )
            raise ExternalServiceError(
                "Authentication service error",
                service_name=SERVICE_NAME,
                details={"upstream_status": response.status_code},
            )
        return response

    @staticmethod
    def _json(response: httpx.Response) -> dict[str, Any]:
        try:
            data = response.json()
        except ValueError as e:
            raise ExternalServiceError(
                "Malformed response from authentication service", service_name=SERVICE_NAME
            ) from e
        if not isinstance(data, dict):
            raise ExternalServiceError(
                "Malformed response from authentication service", service_name=SERVICE_NAME
            )
        return data

    # -------------------------------------------------------------------------
    # Session endpoints
    # -------------------------------------------------------------------------

    async def sign_in_with_password(self, email: str, password: str) -> dict[str, Any]:
        """Exchange email and password for a session.

        Returns:
            The GoTrue session payload (access_token, refresh_token,
            expires_in, user).

        Raises:
            AuthenticationError: Credentials were rejected.
            ExternalServiceError: Supabase could not be reached or failed.
        """
        response = await self._request(
            "POST",
            "/auth/v1/token",
            headers=self._anon_headers(),
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        if response.status_code in _AUTH_FAILURE_STATUSES:
            logger.info("Supabase rejected password sign-in")
            raise AuthenticationError("Invalid email or password", error_code="INVALID_CREDENTIALS")
        if response.is_error:
            raise ExternalServiceError(
                "Authentication service error",
                service_name=SERVICE_NAME,
                details={"upstream_status": response.status_code},
            )
        return self._json(response)

    async def refresh_session(self, refresh_token: str) -> dict[str, Any]:
        """Exchange a refresh token for a new session.

        Raises:
            AuthenticationError: The refresh token is invalid or expired.
            ExternalServiceError: Supabase could not be reached or failed.
        """
        response = await self._request(
            "POST",
            "/auth/v1/token",
            headers=self._anon_headers(),
            params={"grant_type": "refresh_token"},
            json={"refresh_token": refresh_token},
        )
        if response.status_code in _AUTH_FAILURE_STATUSES:
            raise AuthenticationError(
                "Invalid or expired refresh token", error_code="INVALID_REFRESH_TOKEN"
            )
        if response.is_error:
            raise ExternalServiceError(
                "Authentication service error",
                service_name=SERVICE_NAME,
                details={"upstream_status": response.status_code},
            )
        return self._json(response)

    async def sign_out(self, access_token: str) -> bool:
        """Revoke the session behind an access token.

        Returns:
            True if Supabase accepted the logout.
        """
        response = await self._request(
            "POST", "/auth/v1/logout", headers=self._anon_headers(access_token)
        )
        if response.is_error:
            logger.warning(f"Supabase logout returned {response.status_code}")
            return False
        return True

    async def get_user(self, access_token: str) -> dict[str, Any]:
        """Fetch the auth user behind an access token.

        Raises:
            AuthenticationError: The token was rejected.
        """
        response = await self._request(
            "GET", "/auth/v1/user", headers=self._anon_headers(access_token)
        )
        if response.status_code in _AUTH_FAILURE_STATUSES:
            raise AuthenticationError("Invalid or expired token", error_code="INVALID_TOKEN")
        if response.is_error:
            raise ExternalServiceError(
                "Authentication service error",
                service_name=SERVICE_NAME,
                details={"upstream_status": response.status_code},
            )
        return self._json(response)

    # -------------------------------------------------------------------------
    # Admin endpoints
    # -------------------------------------------------------------------------

    async def admin_create_user(
        self,
        email: str,
        password: str | None = None,
        *,
        email_confirm: bool = True,
        user_metadata: dict[str, Any] | None = None,
    ) -> uuid.UUID:
        """Create an auth user; a random password is generated when omitted.

        Returns:
            The new user's id.

        Raises:
            ExternalServiceError: Supabase rejected the request or returned no id.
        """
        logger.info("Creating user in Supabase Auth")
        response = await self._request(
            "POST",
            "/auth/v1/admin/users",
            headers=self._admin_headers(),
            json={
                "email": email,
                "password": password or generate_password(),
                "email_confirm": email_confirm,
                "user_metadata": user_metadata or {},
            },
        )
        if response.is_error:
            logger.error(f"Failed to create user in Supabase Auth. Status: {response.status_code}")
            raise ExternalServiceError(
                "Failed to create user in authentication service",
                service_name=SERVICE_NAME,
                details={"upstream_status": response.status_code},
            )

        user_id = self._json(response).get("id")
        if not user_id:
            raise ExternalServiceError(
                "User ID not returned from authentication service", service_name=SERVICE_NAME
            )
        logger.info(f"User created successfully in Supabase Auth: {user_id}")
        return uuid.UUID(str(user_id))

    async def admin_delete_user(self, user_id: uuid.UUID) -> bool:
        """Delete an auth user.

        Returns:
            True when deleted or already absent, False on any other failure.
        """
        response = await self._request(
            "DELETE", f"/auth/v1/admin/users/{user_id}", headers=self._admin_headers()
        )
        if response.status_code == 404:
            logger.warning(f"User {user_id} not found in Supabase Auth, considering as deleted")
            return True
        if response.is_error:
            logger.error(
                f"Failed to delete user from Supabase Auth. Status: {response.status_code}"
            )
            return False
        logger.info(f"User deleted successfully from Supabase Auth: {user_id}")
        return True
