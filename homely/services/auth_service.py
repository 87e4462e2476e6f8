"""Login, token refresh, logout and current-user lookup.

Credentials are verified by Supabase; this service shapes the session into
a TokenResponse and attaches the application-side user profile.
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING, Any

from homely.api.schemas.auth import TokenResponse, UserInfo
from homely.core.config import Settings, get_settings
from homely.core.exceptions import AuthenticationError, NotFoundError, ValidationError
from homely.core.logging import get_logger
from homely.services.supabase_auth import SupabaseAuthClient

if TYPE_CHECKING:
    from homely.repositories.unit_of_work import UnitOfWork

logger = get_logger(__name__)


class AuthService:
    """Authentication flows backed by Supabase GoTrue."""

    def __init__(
        self,
        uow: UnitOfWork,
        supabase: SupabaseAuthClient | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.uow = uow
        self.settings = settings or get_settings()
        self.supabase = supabase or SupabaseAuthClient(self.settings)

    async def _user_info(self, user_id: uuid.UUID, email: str | None) -> UserInfo:
        profile = await self.uow.user_profiles.get_by_id(user_id)
        if profile is None:
            return UserInfo(id=user_id, email=email)
        return UserInfo(
            id=user_id,
            email=email,
            first_name=profile.first_name,
            last_name=profile.last_name,
            avatar_url=profile.avatar_url,
            preferred_language=profile.preferred_language,
            timezone=profile.timezone,
        )

    async def _token_response(
        self, session: dict[str, Any], fallback_refresh_token: str = ""
    ) -> TokenResponse:
        user = session.get("user") or {}
        access_token = session.get("access_token")
        if not access_token or not user.get("id"):
            raise AuthenticationError("No session returned by the authentication service")

        user_id = uuid.UUID(str(user["id"]))
        await self.uow.user_profiles.update_last_active(user_id)
        return TokenResponse(
            access_token=access_token,
            refresh_token=session.get("refresh_token") or fallback_refresh_token,
            expires_in=session.get("expires_in") or self.settings.jwt_expiration_in_minutes * 60,
            user=await self._user_info(user_id, user.get("email")),
        )

    async def login(self, email: str, password: str) -> TokenResponse:
        """Sign in with email and password.

        Raises:
            AuthenticationError: Invalid credentials.
        """
        session = await self.supabase.sign_in_with_password(email, password)
        response = await self._token_response(session)
        logger.info(f"User successfully logged in: {response.user.id}")
        return response

    async def refresh(self, refresh_token: str) -> TokenResponse:
        """Exchange a refresh token for a new session.

        Raises:
            ValidationError: No refresh token was given.
            AuthenticationError: The refresh token was rejected.
        """
        if not refresh_token or not refresh_token.strip():
            raise ValidationError("Refresh token is required")
        session = await self.supabase.refresh_session(refresh_token)
        response = await self._token_response(session, fallback_refresh_token=refresh_token)
        logger.info(f"Token successfully refreshed for user: {response.user.id}")
        return response

    async def logout(self, access_token: str) -> None:
        """Revoke the session; upstream failures are logged and ignored.

        Raises:
            ValidationError: No access token was given.
        """
        if not access_token:
            raise ValidationError("Access token is required")
        if not await self.supabase.sign_out(access_token):
            logger.warning("Supabase logout failed, treating session as ended")
        logger.info("User successfully logged out")

    async def get_current_user(self, user_id: uuid.UUID, email: str | None = None) -> UserInfo:
        """Return the profile of the authenticated user.

        Raises:
            NotFoundError: The user has no profile.
        """
        profile = await self.uow.user_profiles.get_by_id(user_id)
        if profile is None:
            raise NotFoundError(resource="User profile", resource_id=user_id)
        return await self._user_info(user_id, email)
