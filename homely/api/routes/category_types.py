"""Category type endpoints.

Types without a household are shared by everyone. A type owned by a
household can only be created, changed or deleted by its members.

Endpoints:
- GET /api/category-types - Active types (all with include_inactive=true)
- GET /api/category-types/{category_type_id} - One type
- POST /api/category-types - Create a type
- PUT /api/category-types/{category_type_id} - Update a type
- DELETE /api/category-types/{category_type_id} - Soft delete a type
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from homely.api.dependencies import (
    get_category_type_service,
    get_current_user_id,
    get_household_service,
)
from homely.api.schemas.category import (
    CategoryTypeCreate,
    CategoryTypeResponse,
    CategoryTypeUpdate,
)
from homely.services.category_service import CategoryTypeService
from homely.services.household_service import HouseholdService

router = APIRouter(prefix="/api/category-types", tags=["category-types"])


async def _ensure_can_modify(
    category_type_id: int,
    user_id: UUID,
    service: CategoryTypeService,
    households: HouseholdService,
) -> None:
    household_id = await service.get_category_type_household_id(category_type_id)
    if household_id is not None:
        await households.ensure_member(household_id, user_id)


@router.get("", response_model=list[CategoryTypeResponse])
async def list_category_types(
    include_inactive: bool = Query(False, description="Include deactivated types"),
    service: CategoryTypeService = Depends(get_category_type_service),
) -> list[CategoryTypeResponse]:
    if include_inactive:
        return await service.get_all_category_types()
    return await service.get_active_category_types()


@router.get("/{category_type_id}", response_model=CategoryTypeResponse)
async def get_category_type(
    category_type_id: int,
    service: CategoryTypeService = Depends(get_category_type_service),
) -> CategoryTypeResponse:
    return await service.get_category_type(category_type_id)


@router.post("", response_model=CategoryTypeResponse, status_code=status.HTTP_201_CREATED)
async def create_category_type(
    request: CategoryTypeCreate,
    user_id: UUID = Depends(get_current_user_id),
    service: CategoryTypeService = Depends(get_category_type_service),
    households: HouseholdService = Depends(get_household_service),
) -> CategoryTypeResponse:
    """Create a category type.

    Raises:
        AuthorizationError: 403 if the owning household is not the caller's
        ConflictError: 409 if a type with the same name exists
    """
    if request.household_id is not None:
        await households.ensure_member(request.household_id, user_id)
    return await service.create_category_type(request)


@router.put("/{category_type_id}", response_model=CategoryTypeResponse)
async def update_category_type(
    category_type_id: int,
    request: CategoryTypeUpdate,
    user_id: UUID = Depends(get_current_user_id),
    service: CategoryTypeService = Depends(get_category_type_service),
    households: HouseholdService = Depends(get_household_service),
) -> CategoryTypeResponse:
    await _ensure_can_modify(category_type_id, user_id, service, households)
    return await service.update_category_type(category_type_id, request)


@router.delete("/{category_type_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category_type(
    category_type_id: int,
    user_id: UUID = Depends(get_current_user_id),
    service: CategoryTypeService = Depends(get_category_type_service),
    households: HouseholdService = Depends(get_household_service),
) -> None:
    await _ensure_can_modify(category_type_id, user_id, service, households)
    await service.delete_category_type(category_type_id)
