"""Household endpoints for members of a household.

Endpoints:
- GET /api/households/my - Households of the authenticated user
- GET /api/households/{household_id} - One household
- GET /api/households/{household_id}/members - Its live members
- POST /api/households/{household_id}/members - Add a member (admin)
- PUT /api/households/{household_id}/members/{user_id}/role - Change a role (admin)
- DELETE /api/households/{household_id}/members/{user_id} - Remove a member (admin)
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from homely.api.dependencies import (
    get_current_user_id,
    get_household_member_service,
    get_household_service,
)
from homely.api.schemas.common import SuccessResponse
from homely.api.schemas.household import (
    HouseholdMemberAdd,
    HouseholdMemberResponse,
    HouseholdMemberRoleUpdate,
    HouseholdResponse,
)
from homely.core.exceptions import NotFoundError
from homely.services.household_service import (
    HouseholdMemberService,
    HouseholdService,
    member_to_response,
)

router = APIRouter(prefix="/api/households", tags=["households"])


@router.get("/my", response_model=list[HouseholdResponse])
async def my_households(
    user_id: UUID = Depends(get_current_user_id),
    service: HouseholdService = Depends(get_household_service),
) -> list[HouseholdResponse]:
    return await service.get_user_households(user_id)


@router.get("/{household_id}", response_model=HouseholdResponse)
async def get_household(
    household_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    service: HouseholdService = Depends(get_household_service),
) -> HouseholdResponse:
    """Get a household the user belongs to.

    Raises:
        AuthorizationError: 403 if the user is not a member
        NotFoundError: 404 if the household does not exist
    """
    await service.ensure_member(household_id, user_id)
    return await service.get_household(household_id)


@router.get("/{household_id}/members", response_model=list[HouseholdMemberResponse])
async def list_members(
    household_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    service: HouseholdService = Depends(get_household_service),
) -> list[HouseholdMemberResponse]:
    await service.ensure_member(household_id, user_id)
    return await service.get_household_members(household_id)


@router.post(
    "/{household_id}/members",
    response_model=HouseholdMemberResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_member(
    household_id: UUID,
    request: HouseholdMemberAdd,
    user_id: UUID = Depends(get_current_user_id),
    service: HouseholdService = Depends(get_household_service),
    members: HouseholdMemberService = Depends(get_household_member_service),
) -> HouseholdMemberResponse:
    """Add a user to the household.

    Raises:
        AuthorizationError: 403 unless the caller is a household admin
        ConflictError: 409 if the user is already a member
        PlanLimitExceededError: 400 if the plan's member limit is reached
    """
    await service.ensure_admin(household_id, user_id)
    member = await members.add_member(
        household_id, request.user_id, request.role, invited_by=user_id
    )
    return member_to_response(member)


@router.put(
    "/{household_id}/members/{member_user_id}/role",
    response_model=HouseholdMemberResponse,
)
async def update_member_role(
    household_id: UUID,
    member_user_id: UUID,
    request: HouseholdMemberRoleUpdate,
    user_id: UUID = Depends(get_current_user_id),
    service: HouseholdService = Depends(get_household_service),
    members: HouseholdMemberService = Depends(get_household_member_service),
) -> HouseholdMemberResponse:
    await service.ensure_admin(household_id, user_id)
    member = await members.update_member_role(household_id, member_user_id, request.role)
    return member_to_response(member)


@router.delete("/{household_id}/members/{member_user_id}", response_model=SuccessResponse)
async def remove_member(
    household_id: UUID,
    member_user_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    service: HouseholdService = Depends(get_household_service),
    members: HouseholdMemberService = Depends(get_household_member_service),
) -> SuccessResponse:
    await service.ensure_admin(household_id, user_id)
    if not await members.remove_member(household_id, member_user_id):
        raise NotFoundError(f"User {member_user_id} is not a member of household {household_id}")
    return SuccessResponse(message="Member removed from household")
