"""Reusable dependencies for FastAPI routes.

This module provides:

1. Request identity - the user id, email and access token that
   AuthMiddleware placed on ``request.state``.

2. Unit of work - one UnitOfWork per request over the request's session.

3. Service dependencies - factories for every service, so route tests can
   swap them through ``app.dependency_overrides``.

4. Access checks - household membership and system developer guards.

Usage:
    from homely.api.dependencies import get_current_user_id, get_task_service

    @router.get("/{task_id}")
    async def get_task(
        task_id: UUID,
        user_id: UUID = Depends(get_current_user_id),
        service: TaskService = Depends(get_task_service),
    ) -> TaskResponse:
        ...
"""

from __future__ import annotations

import uuid
from functools import lru_cache
from typing import Any

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from homely.core.database import get_db
from homely.core.exceptions import AuthenticationError, AuthorizationError
from homely.repositories.unit_of_work import UnitOfWork
from homely.services.auth_service import AuthService
from homely.services.category_service import CategoryService, CategoryTypeService
from homely.services.dashboard_service import DashboardService
from homely.services.event_service import EventService
from homely.services.household_service import HouseholdMemberService, HouseholdService
from homely.services.item_service import ItemService
from homely.services.supabase_auth import SupabaseAuthClient
from homely.services.system_households_service import SystemHouseholdsService
from homely.services.system_users_service import SystemUsersService
from homely.services.task_service import TaskService

SYSTEM_DEVELOPER_ROLE = "system_developer"

# =============================================================================
# Request identity
# =============================================================================


def get_current_user_id(request: Request) -> uuid.UUID:
    """Get the authenticated user's id.

    Raises:
        AuthenticationError: No authenticated user on the request.
    """
    user_id = getattr(request.state, "user_id", None)
    if user_id is None:
        raise AuthenticationError("User not authenticated")
    return user_id


def get_current_user_email(request: Request) -> str | None:
    return getattr(request.state, "user_email", None)


def get_access_token(request: Request) -> str:
    token = getattr(request.state, "access_token", None)
    if not token:
        raise AuthenticationError("User not authenticated")
    return token


def get_token_claims(request: Request) -> dict[str, Any]:
    return getattr(request.state, "token_claims", None) or {}


def require_system_developer(claims: dict[str, Any] = Depends(get_token_claims)) -> None:
    """Allow only tokens whose app_metadata grants the system developer role.

    Raises:
        AuthorizationError: The role is missing.
    """
    app_metadata = claims.get("app_metadata") or {}
    roles = app_metadata.get("roles") or []
    if app_metadata.get("role") != SYSTEM_DEVELOPER_ROLE and SYSTEM_DEVELOPER_ROLE not in roles:
        raise AuthorizationError("System developer role required")


# =============================================================================
# Unit of work and services
# =============================================================================


async def get_uow(db: AsyncSession = Depends(get_db)) -> UnitOfWork:
    return UnitOfWork(db)


@lru_cache
def get_supabase_client() -> SupabaseAuthClient:
    return SupabaseAuthClient()


async def get_auth_service(
    uow: UnitOfWork = Depends(get_uow),
    supabase: SupabaseAuthClient = Depends(get_supabase_client),
) -> AuthService:
    return AuthService(uow, supabase)


async def get_household_service(uow: UnitOfWork = Depends(get_uow)) -> HouseholdService:
    return HouseholdService(uow)


async def get_household_member_service(
    uow: UnitOfWork = Depends(get_uow),
) -> HouseholdMemberService:
    return HouseholdMemberService(uow)


async def get_category_type_service(uow: UnitOfWork = Depends(get_uow)) -> CategoryTypeService:
    return CategoryTypeService(uow)


async def get_category_service(uow: UnitOfWork = Depends(get_uow)) -> CategoryService:
    return CategoryService(uow)


async def get_event_service(uow: UnitOfWork = Depends(get_uow)) -> EventService:
    return EventService(uow)


async def get_task_service(uow: UnitOfWork = Depends(get_uow)) -> TaskService:
    return TaskService(uow)


async def get_item_service(uow: UnitOfWork = Depends(get_uow)) -> ItemService:
    return ItemService(uow)


async def get_dashboard_service(uow: UnitOfWork = Depends(get_uow)) -> DashboardService:
    return DashboardService(uow)


async def get_system_users_service(
    uow: UnitOfWork = Depends(get_uow),
    supabase: SupabaseAuthClient = Depends(get_supabase_client),
) -> SystemUsersService:
    return SystemUsersService(uow, supabase)


async def get_system_households_service(
    uow: UnitOfWork = Depends(get_uow),
) -> SystemHouseholdsService:
    return SystemHouseholdsService(uow)
