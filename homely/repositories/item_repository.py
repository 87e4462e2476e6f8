"""Repository for household items."""

from __future__ import annotations

import uuid
from collections.abc import Sequence

from sqlalchemy.orm import selectinload

from homely.models.item import Item
from homely.repositories.base import Repository


class ItemRepository(Repository[Item]):
    """Repository for Item entities."""

    model_class = Item

    async def get_household_items(
        self, household_id: uuid.UUID, *, active_only: bool = True
    ) -> Sequence[Item]:
        """Get live items of a household with their category loaded."""
        conditions = [Item.household_id == household_id]
        if active_only:
            conditions.append(Item.is_active.is_(True))
        return await self.find(
            *conditions,
            options=[selectinload(Item.category)],
            order_by=[Item.name],
        )

    async def count_household_items(self, household_id: uuid.UUID) -> int:
        return await self.count_where(Item.household_id == household_id)
