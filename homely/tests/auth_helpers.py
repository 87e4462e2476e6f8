"""Helpers for minting Supabase-style access tokens in tests."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt

TEST_JWT_SECRET = "test-jwt-secret-with-at-least-32-bytes!!"
TEST_ISSUER = "http://supabase.test/auth/v1"
TEST_AUDIENCE = "authenticated"


def make_access_token(
    user_id: uuid.UUID | str | None = None,
    *,
    email: str | None = "anna@example.com",
    expires_in: timedelta = timedelta(hours=1),
    secret: str = TEST_JWT_SECRET,
    issuer: str = TEST_ISSUER,
    audience: str = TEST_AUDIENCE,
    app_metadata: dict[str, Any] | None = None,
    **extra: Any,
) -> str:
    """Encode an HS256 token shaped like the ones Supabase issues."""
    now = datetime.now(UTC)
    payload: dict[str, Any] = {
        "sub": str(user_id or uuid.uuid4()),
        "iss": issuer,
        "aud": audience,
        "iat": now,
        "exp": now + expires_in,
        "role": "authenticated",
        **extra,
    }
    if email is not None:
        payload["email"] = email
    if app_metadata is not None:
        payload["app_metadata"] = app_metadata
    return jwt.encode(payload, secret, algorithm="HS256")


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
