"""Bearer token authentication middleware.

Access tokens are Supabase-issued JWTs signed with HS256. A valid token
must carry the configured issuer and audience, must not be expired, and
must name the user in ``sub``. The authenticated user's id, email and raw
token are stored on ``request.state`` for the route dependencies.
"""

from __future__ import annotations

import uuid
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

import jwt
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from homely.api.exception_handlers import build_error_response
from homely.core.config import Settings, get_settings
from homely.core.exceptions import AuthenticationError
from homely.core.logging import get_logger

logger = get_logger(__name__)

JWT_ALGORITHM = "HS256"

EXEMPT_PATHS = frozenset(
    {
        "/",
        "/health",
        "/openapi.json",
        "/api/auth/login",
        "/api/auth/refresh",
    }
)
EXEMPT_PREFIXES = ("/docs", "/redoc")


@dataclass(frozen=True)
class TokenClaims:
    """The claims the API relies on."""

    user_id: uuid.UUID
    email: str | None
    raw: dict[str, Any]


def is_exempt_path(path: str) -> bool:
    """Check if a path is reachable without a bearer token."""
    return path in EXEMPT_PATHS or path.startswith(EXEMPT_PREFIXES)


def decode_access_token(token: str, settings: Settings | None = None) -> TokenClaims:
    """Validate a JWT and extract the user identity.

    Args:
        token: Encoded JWT without the ``Bearer`` prefix.
        settings: Settings providing secret, issuer and audience.

    Returns:
        The validated claims.

    Raises:
        AuthenticationError: The token is expired, malformed, signed with
            another key, or lacks a UUID ``sub``.
    """
    settings = settings or get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[JWT_ALGORITHM],
            audience=settings.jwt_valid_audience,
            issuer=settings.jwt_valid_issuer,
            leeway=0,
            options={"require": ["exp", "sub"]},
        )
    except jwt.ExpiredSignatureError as e:
        raise AuthenticationError("Token has expired", error_code="TOKEN_EXPIRED") from e
    except jwt.InvalidTokenError as e:
        raise AuthenticationError("Invalid token", error_code="INVALID_TOKEN") from e

    try:
        user_id = uuid.UUID(str(payload["sub"]))
    except ValueError as e:
        raise AuthenticationError("Invalid user ID in token", error_code="INVALID_TOKEN") from e

    return TokenClaims(user_id=user_id, email=payload.get("email"), raw=payload)


class AuthMiddleware(BaseHTTPMiddleware):
    """Middleware that rejects requests without a valid bearer token."""

    def __init__(self, app: ASGIApp, settings: Settings | None = None):
        """Initialize authentication middleware.

        Args:
            app: FastAPI application
            settings: Settings with JWT parameters. If None, loads from get_settings().
        """
        super().__init__(app)
        self.settings = settings or get_settings()

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        if not self.settings.auth_enabled:
            return await call_next(request)

        if request.method == "OPTIONS" or is_exempt_path(request.url.path):
            return await call_next(request)

        authorization = request.headers.get("Authorization", "")
        scheme, _, token = authorization.partition(" ")
        if scheme.lower() != "bearer" or not token.strip():
            return build_error_response(
                error_code="AUTHENTICATION_REQUIRED",
                message="Bearer token required",
                status_code=401,
                request=request,
                headers={"WWW-Authenticate": "Bearer"},
            )

        try:
            claims = decode_access_token(token.strip(), self.settings)
        except AuthenticationError as e:
            logger.info(f"Rejected token for {request.method} {request.url.path}: {e.message}")
            return build_error_response(
                error_code=e.error_code,
                message=e.message,
                status_code=e.status_code,
                request=request,
                headers={"WWW-Authenticate": "Bearer"},
            )

        request.state.user_id = claims.user_id
        request.state.user_email = claims.email
        request.state.access_token = token.strip()
        request.state.token_claims = claims.raw
        return await call_next(request)
