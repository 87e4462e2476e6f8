"""Repositories for category types and categories."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import func
from sqlalchemy.orm import selectinload

from homely.models.category import Category, CategoryType
from homely.repositories.base import Repository


class CategoryTypeRepository(Repository[CategoryType]):
    """Repository for CategoryType entities."""

    model_class = CategoryType

    async def get_active_ordered(self) -> Sequence[CategoryType]:
        """Get active category types ordered by sort order, then name."""
        return await self.find(
            CategoryType.is_active.is_(True),
            order_by=[CategoryType.sort_order, CategoryType.name],
        )

    async def get_all_ordered(self) -> Sequence[CategoryType]:
        """Get every live category type ordered by sort order, then name."""
        return await self.find(order_by=[CategoryType.sort_order, CategoryType.name])

    async def name_exists(self, name: str, *, exclude_id: int | None = None) -> bool:
        """Check whether a live category type already uses this name.

        Comparison is case-insensitive and ignores surrounding whitespace.

        Args:
            name: Candidate name.
            exclude_id: Ignore this row (used when renaming).
        """
        conditions = [func.lower(CategoryType.name) == name.strip().lower()]
        if exclude_id is not None:
            conditions.append(CategoryType.id != exclude_id)
        return await self.count_where(*conditions) > 0


class CategoryRepository(Repository[Category]):
    """Repository for Category entities."""

    model_class = Category

    _ORDER = (Category.sort_order, Category.name)

    def _with_type(self) -> list:
        return [selectinload(Category.category_type)]

    async def get_with_type(self, category_id: int) -> Category | None:
        return await self.find_one(Category.id == category_id, options=self._with_type())

    async def get_all_ordered(self) -> Sequence[Category]:
        return await self.find(order_by=self._ORDER, options=self._with_type())

    async def get_active(self) -> Sequence[Category]:
        """Get active categories ordered by sort order, then name."""
        return await self.find(
            Category.is_active.is_(True),
            order_by=self._ORDER,
            options=self._with_type(),
        )

    async def get_by_type(self, category_type_id: int) -> Sequence[Category]:
        """Get live categories of a category type."""
        return await self.find(
            Category.category_type_id == category_type_id,
            order_by=self._ORDER,
            options=self._with_type(),
        )
