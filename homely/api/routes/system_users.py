"""System console endpoints for user administration.

All endpoints require the system developer role.

Endpoints:
- GET /api/system/users - Search users
- GET /api/system/users/{user_id} - User details
- GET /api/system/users/{user_id}/activity - Activity log
- POST /api/system/users - Create a user
- PUT /api/system/users/{user_id}/role - Change a household role
- POST /api/system/users/{user_id}/reset-password - Request a password reset
- POST /api/system/users/{user_id}/unlock - Unlock the account
- POST /api/system/users/{user_id}/move - Move to another household
- DELETE /api/system/users/{user_id} - Delete the user
- GET /api/system/users/{user_id}/households - Memberships
- POST /api/system/users/{user_id}/households - Add a membership
- DELETE /api/system/users/{user_id}/households/{household_id} - Remove a membership
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from homely.api.dependencies import get_system_users_service, require_system_developer
from homely.api.schemas.common import SuccessResponse
from homely.api.schemas.system import (
    AddUserHouseholdRequest,
    CreateUserRequest,
    MoveUserRequest,
    SystemUser,
    SystemUserDetails,
    UpdateUserRoleRequest,
    UserActivity,
    UserHousehold,
    UserSearchResponse,
)
from homely.core.exceptions import ConflictError, NotFoundError
from homely.services.system_users_service import SystemUsersService

router = APIRouter(
    prefix="/api/system/users",
    tags=["system-users"],
    dependencies=[Depends(require_system_developer)],
)


@router.get("", response_model=UserSearchResponse)
async def search_users(
    search_term: str | None = Query(None),
    role: str | None = Query(None),
    status_filter: str | None = Query(None, alias="status"),
    household_id: UUID | None = Query(None),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    service: SystemUsersService = Depends(get_system_users_service),
) -> UserSearchResponse:
    return await service.search_users(
        search_term=search_term,
        role=role,
        status=status_filter,
        household_id=household_id,
        page=page,
        page_size=page_size,
    )


@router.get("/{user_id}", response_model=SystemUserDetails)
async def get_user_details(
    user_id: UUID,
    service: SystemUsersService = Depends(get_system_users_service),
) -> SystemUserDetails:
    return await service.get_user_details(user_id)


@router.get("/{user_id}/activity", response_model=list[UserActivity])
async def get_user_activity(
    user_id: UUID,
    limit: int = Query(50, ge=1, le=500),
    service: SystemUsersService = Depends(get_system_users_service),
) -> list[UserActivity]:
    return await service.get_user_activity(user_id, limit)


@router.post("", response_model=SystemUser, status_code=status.HTTP_201_CREATED)
async def create_user(
    request: CreateUserRequest,
    service: SystemUsersService = Depends(get_system_users_service),
) -> SystemUser:
    """Create the auth account, profile and first membership.

    Raises:
        NotFoundError: 404 if the household does not exist
        ExternalServiceError: 502 if Supabase rejects the account
    """
    return await service.create_user(request)


@router.put("/{user_id}/role", response_model=SystemUser)
async def update_user_role(
    user_id: UUID,
    request: UpdateUserRoleRequest,
    service: SystemUsersService = Depends(get_system_users_service),
) -> SystemUser:
    return await service.update_user_role(user_id, request.household_id, request.role)


@router.post("/{user_id}/reset-password", response_model=SuccessResponse)
async def reset_password(
    user_id: UUID,
    send_email: bool = Query(True),
    service: SystemUsersService = Depends(get_system_users_service),
) -> SuccessResponse:
    await service.reset_password(user_id, send_email)
    return SuccessResponse(message="Password reset initiated")


@router.post("/{user_id}/unlock", response_model=SuccessResponse)
async def unlock_account(
    user_id: UUID,
    service: SystemUsersService = Depends(get_system_users_service),
) -> SuccessResponse:
    await service.unlock_account(user_id)
    return SuccessResponse(message="Account unlocked")


@router.post("/{user_id}/move", response_model=SystemUser)
async def move_user(
    user_id: UUID,
    request: MoveUserRequest,
    service: SystemUsersService = Depends(get_system_users_service),
) -> SystemUser:
    return await service.move_user_to_household(user_id, request.to_household_id)


@router.delete("/{user_id}", response_model=SuccessResponse)
async def delete_user(
    user_id: UUID,
    service: SystemUsersService = Depends(get_system_users_service),
) -> SuccessResponse:
    if not await service.delete_user(user_id):
        raise NotFoundError(resource="User", resource_id=user_id)
    return SuccessResponse(message="User deleted successfully")


@router.get("/{user_id}/households", response_model=list[UserHousehold])
async def get_user_households(
    user_id: UUID,
    service: SystemUsersService = Depends(get_system_users_service),
) -> list[UserHousehold]:
    return await service.get_user_households(user_id)


@router.post("/{user_id}/households", response_model=SuccessResponse)
async def add_user_to_household(
    user_id: UUID,
    request: AddUserHouseholdRequest,
    service: SystemUsersService = Depends(get_system_users_service),
) -> SuccessResponse:
    if not await service.add_user_to_household(user_id, request.household_id, request.role):
        raise ConflictError("User is already a member of this household")
    return SuccessResponse(message="User added to household successfully")


@router.delete("/{user_id}/households/{household_id}", response_model=SuccessResponse)
async def remove_user_from_household(
    user_id: UUID,
    household_id: UUID,
    service: SystemUsersService = Depends(get_system_users_service),
) -> SuccessResponse:
    if not await service.remove_user_from_household(user_id, household_id):
        raise NotFoundError("User is not a member of this household")
    return SuccessResponse(message="User removed from household successfully")
