"""Category endpoints.

Endpoints:
- GET /api/categories - All categories, or those of one type
- GET /api/categories/active - Active categories
- GET /api/categories/{category_id} - One category
- POST /api/categories - Create a category
- PUT /api/categories/{category_id} - Update a category
- DELETE /api/categories/{category_id} - Soft delete a category
- PATCH /api/categories/sort-order - Reorder categories in bulk
"""

from fastapi import APIRouter, Depends, Query, status

from homely.api.dependencies import get_category_service
from homely.api.schemas.category import (
    CategoryCreate,
    CategoryResponse,
    CategorySortOrderItem,
    CategoryUpdate,
)
from homely.api.schemas.common import SuccessResponse
from homely.services.category_service import CategoryService

router = APIRouter(prefix="/api/categories", tags=["categories"])


@router.get("", response_model=list[CategoryResponse])
async def list_categories(
    category_type_id: int | None = Query(None, description="Only categories of this type"),
    service: CategoryService = Depends(get_category_service),
) -> list[CategoryResponse]:
    if category_type_id is not None:
        return await service.get_categories_by_type(category_type_id)
    return await service.get_all_categories()


@router.get("/active", response_model=list[CategoryResponse])
async def list_active_categories(
    service: CategoryService = Depends(get_category_service),
) -> list[CategoryResponse]:
    return await service.get_active_categories()


@router.patch("/sort-order", response_model=SuccessResponse)
async def update_sort_order(
    items: list[CategorySortOrderItem],
    service: CategoryService = Depends(get_category_service),
) -> SuccessResponse:
    """Apply new sort orders; unknown ids are skipped."""
    updated = await service.update_sort_order(items)
    return SuccessResponse(message=f"Updated sort order for {updated} categories")


@router.get("/{category_id}", response_model=CategoryResponse)
async def get_category(
    category_id: int,
    service: CategoryService = Depends(get_category_service),
) -> CategoryResponse:
    return await service.get_category(category_id)


@router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(
    request: CategoryCreate,
    service: CategoryService = Depends(get_category_service),
) -> CategoryResponse:
    """Create a category.

    Raises:
        NotFoundError: 404 if the category type does not exist
    """
    return await service.create_category(request)


@router.put("/{category_id}", response_model=CategoryResponse)
async def update_category(
    category_id: int,
    request: CategoryUpdate,
    service: CategoryService = Depends(get_category_service),
) -> CategoryResponse:
    return await service.update_category(category_id, request)


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(
    category_id: int,
    service: CategoryService = Depends(get_category_service),
) -> None:
    await service.delete_category(category_id)
