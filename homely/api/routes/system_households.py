"""System console endpoints for household administration.

All endpoints require the system developer role.

Endpoints:
- GET /api/system/households - Search households
- GET /api/system/households/stats - Global counters
- GET /api/system/households/{household_id} - Household with members
- POST /api/system/households - Create a household with an admin
- PUT /api/system/households/{household_id} - Partial update
- DELETE /api/system/households/{household_id} - Soft delete
- POST /api/system/households/{household_id}/assign-admin - Grant admin role
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from homely.api.dependencies import get_system_households_service, require_system_developer
from homely.api.schemas.common import SuccessResponse
from homely.api.schemas.system import (
    AssignAdminRequest,
    CreateHouseholdRequest,
    HouseholdSearchResponse,
    HouseholdStats,
    SystemHousehold,
    SystemHouseholdDetails,
    UpdateHouseholdRequest,
)
from homely.core.exceptions import NotFoundError
from homely.models.enums import SubscriptionStatus
from homely.services.system_households_service import SystemHouseholdsService

router = APIRouter(
    prefix="/api/system/households",
    tags=["system-households"],
    dependencies=[Depends(require_system_developer)],
)


@router.get("", response_model=HouseholdSearchResponse)
async def search_households(
    search_term: str | None = Query(None),
    plan_type_id: int | None = Query(None),
    subscription_status: SubscriptionStatus | None = Query(None),
    has_active_members: bool | None = Query(None),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    service: SystemHouseholdsService = Depends(get_system_households_service),
) -> HouseholdSearchResponse:
    return await service.search_households(
        search_term=search_term,
        plan_type_id=plan_type_id,
        subscription_status=subscription_status.value if subscription_status else None,
        has_active_members=has_active_members,
        page=page,
        page_size=page_size,
    )


@router.get("/stats", response_model=HouseholdStats)
async def get_household_stats(
    service: SystemHouseholdsService = Depends(get_system_households_service),
) -> HouseholdStats:
    return await service.get_household_stats()


@router.get("/{household_id}", response_model=SystemHouseholdDetails)
async def get_household_details(
    household_id: UUID,
    service: SystemHouseholdsService = Depends(get_system_households_service),
) -> SystemHouseholdDetails:
    return await service.get_household_details(household_id)


@router.post("", response_model=SystemHousehold, status_code=status.HTTP_201_CREATED)
async def create_household(
    request: CreateHouseholdRequest,
    service: SystemHouseholdsService = Depends(get_system_households_service),
) -> SystemHousehold:
    """Create a free household and make the given user its admin.

    Raises:
        NotFoundError: 404 if the admin user or plan type does not exist
    """
    return await service.create_household(request)


@router.put("/{household_id}", response_model=SystemHousehold)
async def update_household(
    household_id: UUID,
    request: UpdateHouseholdRequest,
    service: SystemHouseholdsService = Depends(get_system_households_service),
) -> SystemHousehold:
    return await service.update_household(household_id, request)


@router.delete("/{household_id}", response_model=SuccessResponse)
async def delete_household(
    household_id: UUID,
    service: SystemHouseholdsService = Depends(get_system_households_service),
) -> SuccessResponse:
    if not await service.delete_household(household_id):
        raise NotFoundError(resource="Household", resource_id=household_id)
    return SuccessResponse(message="Household deleted successfully")


@router.post("/{household_id}/assign-admin", response_model=SystemHousehold)
async def assign_admin(
    household_id: UUID,
    request: AssignAdminRequest,
    service: SystemHouseholdsService = Depends(get_system_households_service),
) -> SystemHousehold:
    return await service.assign_admin(household_id, request.user_id)
