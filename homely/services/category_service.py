"""Category type and category management."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from homely.api.schemas.category import (
    CategoryCreate,
    CategoryResponse,
    CategorySortOrderItem,
    CategoryTypeCreate,
    CategoryTypeResponse,
    CategoryTypeUpdate,
    CategoryUpdate,
)
from homely.core.exceptions import ConflictError, NotFoundError
from homely.core.logging import get_logger
from homely.models.category import Category, CategoryType

if TYPE_CHECKING:
    import uuid

    from homely.repositories.unit_of_work import UnitOfWork

logger = get_logger(__name__)


def category_to_response(category: Category) -> CategoryResponse:
    category_type = category.category_type
    return CategoryResponse(
        id=category.id,
        category_type_id=category.category_type_id,
        category_type_name=category_type.name if category_type is not None else None,
        name=category.name,
        description=category.description,
        sort_order=category.sort_order,
        is_active=category.is_active,
        created_at=category.created_at,
        updated_at=category.updated_at,
    )


class CategoryTypeService:
    """Service for category types.

    Names are unique among live category types, compared case-insensitively.
    """

    def __init__(self, uow: UnitOfWork) -> None:
        self.uow = uow

    async def _get_or_raise(self, category_type_id: int) -> CategoryType:
        category_type = await self.uow.category_types.get_by_id(category_type_id)
        if category_type is None:
            raise NotFoundError(resource="Category type", resource_id=category_type_id)
        return category_type

    async def _ensure_unique_name(self, name: str, exclude_id: int | None = None) -> None:
        if await self.uow.category_types.name_exists(name, exclude_id=exclude_id):
            raise ConflictError(
                f"Category type with name '{name}' already exists",
                details={"field": "name", "value": name},
            )

    async def get_active_category_types(self) -> list[CategoryTypeResponse]:
        types = await self.uow.category_types.get_active_ordered()
        return [CategoryTypeResponse.model_validate(t, from_attributes=True) for t in types]

    async def get_all_category_types(self) -> list[CategoryTypeResponse]:
        types = await self.uow.category_types.get_all_ordered()
        return [CategoryTypeResponse.model_validate(t, from_attributes=True) for t in types]

    async def get_category_type(self, category_type_id: int) -> CategoryTypeResponse:
        category_type = await self._get_or_raise(category_type_id)
        return CategoryTypeResponse.model_validate(category_type, from_attributes=True)

    async def get_category_type_household_id(self, category_type_id: int) -> uuid.UUID | None:
        """Owning household of a type; None for types shared by every household."""
        return (await self._get_or_raise(category_type_id)).household_id

    async def create_category_type(self, data: CategoryTypeCreate) -> CategoryTypeResponse:
        """Create a category type.

        Raises:
            ConflictError: A live category type already has this name.
        """
        name = data.name.strip()
        await self._ensure_unique_name(name)
        category_type = CategoryType(
            household_id=data.household_id,
            name=name,
            description=data.description,
            sort_order=data.sort_order,
            is_active=True,
        )
        category_type = await self.uow.category_types.create(category_type)
        logger.info(f"Category type created with ID {category_type.id}")
        return CategoryTypeResponse.model_validate(category_type, from_attributes=True)

    async def update_category_type(
        self, category_type_id: int, data: CategoryTypeUpdate
    ) -> CategoryTypeResponse:
        """Update a category type.

        Raises:
            NotFoundError: The category type does not exist.
            ConflictError: Another live category type already has the new name.
        """
        category_type = await self._get_or_raise(category_type_id)
        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        if "name" in changes:
            changes["name"] = changes["name"].strip()
            await self._ensure_unique_name(changes["name"], exclude_id=category_type_id)
        for field, value in changes.items():
            setattr(category_type, field, value)
        category_type = await self.uow.category_types.update(category_type)
        logger.info(f"Category type {category_type_id} updated successfully")
        return CategoryTypeResponse.model_validate(category_type, from_attributes=True)

    async def delete_category_type(self, category_type_id: int) -> None:
        category_type = await self._get_or_raise(category_type_id)
        await self.uow.category_types.soft_delete(category_type)
        logger.info(f"Category type {category_type_id} soft deleted successfully")


class CategoryService:
    """Service for categories, ordered by sort order then name."""

    def __init__(self, uow: UnitOfWork) -> None:
        self.uow = uow

    async def _get_or_raise(self, category_id: int) -> Category:
        category = await self.uow.categories.get_with_type(category_id)
        if category is None:
            raise NotFoundError(resource="Category", resource_id=category_id)
        return category

    async def _ensure_type_exists(self, category_type_id: int | None) -> None:
        if category_type_id is not None and not await self.uow.category_types.exists(
            category_type_id
        ):
            raise NotFoundError(resource="Category type", resource_id=category_type_id)

    @staticmethod
    def _to_responses(categories: Sequence[Category]) -> list[CategoryResponse]:
        return [category_to_response(c) for c in categories]

    async def get_active_categories(self) -> list[CategoryResponse]:
        return self._to_responses(await self.uow.categories.get_active())

    async def get_categories_by_type(self, category_type_id: int) -> list[CategoryResponse]:
        return self._to_responses(await self.uow.categories.get_by_type(category_type_id))

    async def get_all_categories(self) -> list[CategoryResponse]:
        return self._to_responses(await self.uow.categories.get_all_ordered())

    async def get_category(self, category_id: int) -> CategoryResponse:
        return category_to_response(await self._get_or_raise(category_id))

    async def create_category(self, data: CategoryCreate) -> CategoryResponse:
        """Create a category.

        Raises:
            NotFoundError: The referenced category type does not exist.
        """
        await self._ensure_type_exists(data.category_type_id)
        category = Category(
            category_type_id=data.category_type_id,
            name=data.name.strip(),
            description=data.description,
            sort_order=data.sort_order,
            is_active=True,
        )
        category = await self.uow.categories.create(category)
        logger.info(f"Category created with ID {category.id}")
        return category_to_response(category)

    async def update_category(self, category_id: int, data: CategoryUpdate) -> CategoryResponse:
        category = await self._get_or_raise(category_id)
        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        if "category_type_id" in changes:
            await self._ensure_type_exists(changes["category_type_id"])
        if "name" in changes:
            changes["name"] = changes["name"].strip()
        for field, value in changes.items():
            setattr(category, field, value)
        category = await self.uow.categories.update(category)
        logger.info(f"Category {category_id} updated successfully")
        return category_to_response(category)

    async def delete_category(self, category_id: int) -> None:
        category = await self._get_or_raise(category_id)
        await self.uow.categories.soft_delete(category)
        logger.info(f"Category {category_id} soft deleted successfully")

    async def update_sort_order(self, items: Sequence[CategorySortOrderItem]) -> int:
        """Apply new sort positions in one transaction.

        Unknown or deleted category ids are skipped.

        Returns:
            Number of categories updated.
        """

        async def _apply() -> int:
            categories = await self.uow.categories.get_many([item.id for item in items])
            by_id = {category.id: category for category in categories}
            updated = 0
            for item in items:
                category = by_id.get(item.id)
                if category is None:
                    logger.warning(f"Category {item.id} not found while updating sort order")
                    continue
                category.sort_order = item.sort_order
                updated += 1
            await self.uow.save_changes()
            return updated

        updated = await self.uow.execute_in_transaction(_apply)
        logger.info(f"Updated sort order for {updated} categories")
        return updated
