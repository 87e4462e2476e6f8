"""Authentication endpoints.

Endpoints:
- POST /api/auth/login - Exchange email and password for tokens
- POST /api/auth/refresh - Exchange a refresh token for new tokens
- POST /api/auth/logout - Revoke the current session
- GET /api/auth/me - Profile of the authenticated user
"""

from uuid import UUID

from fastapi import APIRouter, Depends

from homely.api.dependencies import (
    get_access_token,
    get_auth_service,
    get_current_user_email,
    get_current_user_id,
)
from homely.api.schemas.auth import LoginRequest, RefreshTokenRequest, TokenResponse, UserInfo
from homely.api.schemas.common import SuccessResponse
from homely.services.auth_service import AuthService

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/login", response_model=TokenResponse)
async def login(
    request: LoginRequest,
    service: AuthService = Depends(get_auth_service),
) -> TokenResponse:
    """Sign in with email and password.

    Raises:
        AuthenticationError: 401 for invalid credentials
    """
    return await service.login(request.email, request.password)


@router.post("/refresh", response_model=TokenResponse)
async def refresh(
    request: RefreshTokenRequest,
    service: AuthService = Depends(get_auth_service),
) -> TokenResponse:
    return await service.refresh(request.refresh_token)


@router.post("/logout", response_model=SuccessResponse)
async def logout(
    access_token: str = Depends(get_access_token),
    service: AuthService = Depends(get_auth_service),
) -> SuccessResponse:
    await service.logout(access_token)
    return SuccessResponse(message="Logged out successfully")


@router.get("/me", response_model=UserInfo)
async def me(
    user_id: UUID = Depends(get_current_user_id),
    email: str | None = Depends(get_current_user_email),
    service: AuthService = Depends(get_auth_service),
) -> UserInfo:
    return await service.get_current_user(user_id, email)
