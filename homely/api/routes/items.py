"""Household item endpoints.

Endpoints:
- GET /api/items - Items of a household
- GET /api/items/{item_id} - One item
- POST /api/items - Create an item
- PUT /api/items/{item_id} - Update an item
- DELETE /api/items/{item_id} - Soft delete an item
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from homely.api.dependencies import get_current_user_id, get_household_service, get_item_service
from homely.api.schemas.item import ItemCreate, ItemResponse, ItemUpdate
from homely.services.household_service import HouseholdService
from homely.services.item_service import ItemService

router = APIRouter(prefix="/api/items", tags=["items"])


@router.get("", response_model=list[ItemResponse])
async def list_items(
    household_id: UUID = Query(...),
    active_only: bool = Query(True),
    user_id: UUID = Depends(get_current_user_id),
    service: ItemService = Depends(get_item_service),
    households: HouseholdService = Depends(get_household_service),
) -> list[ItemResponse]:
    await households.ensure_member(household_id, user_id)
    return await service.get_household_items(household_id, active_only=active_only)


@router.get("/{item_id}", response_model=ItemResponse)
async def get_item(
    item_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    service: ItemService = Depends(get_item_service),
    households: HouseholdService = Depends(get_household_service),
) -> ItemResponse:
    item = await service.get_item(item_id)
    await households.ensure_member(item.household_id, user_id)
    return item


@router.post("", response_model=ItemResponse, status_code=status.HTTP_201_CREATED)
async def create_item(
    request: ItemCreate,
    user_id: UUID = Depends(get_current_user_id),
    service: ItemService = Depends(get_item_service),
    households: HouseholdService = Depends(get_household_service),
) -> ItemResponse:
    """Create an item.

    Raises:
        PlanLimitExceededError: 400 if the household is at its items limit
    """
    await households.ensure_member(request.household_id, user_id)
    return await service.create_item(request, created_by=user_id)


@router.put("/{item_id}", response_model=ItemResponse)
async def update_item(
    item_id: UUID,
    request: ItemUpdate,
    user_id: UUID = Depends(get_current_user_id),
    service: ItemService = Depends(get_item_service),
    households: HouseholdService = Depends(get_household_service),
) -> ItemResponse:
    await households.ensure_member(await service.get_item_household_id(item_id), user_id)
    return await service.update_item(item_id, request)


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_item(
    item_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    service: ItemService = Depends(get_item_service),
    households: HouseholdService = Depends(get_household_service),
) -> None:
    await households.ensure_member(await service.get_item_household_id(item_id), user_id)
    await service.delete_item(item_id)
