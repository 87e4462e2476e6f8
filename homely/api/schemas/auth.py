"""Pydantic schemas for authentication endpoints."""

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class LoginRequest(BaseModel):
    """Credentials for password sign-in."""

    model_config = ConfigDict(
        json_schema_extra={"example": {"email": "anna@example.com", "password": "s3cret-pass"}}
    )

    email: str = Field(..., min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(..., min_length=1, max_length=255)


class RefreshTokenRequest(BaseModel):
    """Refresh token exchange request."""

    refresh_token: str = Field(..., min_length=1)


class UserInfo(BaseModel):
    """Authenticated user as seen by the client."""

    id: UUID
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    avatar_url: str | None = None
    preferred_language: str | None = None
    timezone: str | None = None


class TokenResponse(BaseModel):
    """Session issued by the identity provider."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "access_token": "eyJhbGciOiJIUzI1NiIs...",
                "refresh_token": "v1.MRjR...",
                "expires_in": 3600,
                "token_type": "bearer",
                "user": {"id": "5a0f6c1e-6d6b-4d0c-9d7e-0e6e1f2b8a11", "email": "anna@example.com"},
            }
        }
    )

    access_token: str
    refresh_token: str = ""
    expires_in: int = Field(..., ge=0, description="Access token lifetime in seconds")
    token_type: str = "bearer"
    user: UserInfo
