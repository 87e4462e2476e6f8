"""In-memory holder for the session tokens of one API client."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class TokenStore:
    """Current access and refresh tokens plus the signed-in user.

    Attributes:
        access_token: Bearer token attached to every request, if any.
        refresh_token: Token exchanged for a new session after a 401.
        user: User payload returned with the last session.
    """

    access_token: str | None = None
    refresh_token: str | None = None
    user: dict[str, Any] = field(default_factory=dict)

    @property
    def is_authenticated(self) -> bool:
        return bool(self.access_token)

    def save_session(self, session: dict[str, Any]) -> None:
        """Store a TokenResponse payload, keeping the old refresh token if none is issued."""
        self.access_token = session.get("access_token") or None
        self.refresh_token = session.get("refresh_token") or self.refresh_token
        self.user = session.get("user") or {}

    def clear(self) -> None:
        self.access_token = None
        self.refresh_token = None
        self.user = {}
