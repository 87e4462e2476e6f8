"""Household item management."""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from homely.api.schemas.item import ItemCreate, ItemResponse, ItemUpdate
from homely.api.schemas.task import TaskInterval
from homely.core.exceptions import NotFoundError
from homely.core.logging import get_logger
from homely.models.enums import Priority, UsageType
from homely.models.item import Item
from homely.services.plan_usage_service import PlanUsageService

if TYPE_CHECKING:
    from homely.repositories.unit_of_work import UnitOfWork

logger = get_logger(__name__)


def item_to_response(item: Item) -> ItemResponse:
    interval = None
    if item.has_interval:
        years, months, weeks, days = item.interval_components
        interval = TaskInterval(years=years, months=months, weeks=weeks, days=days)
    return ItemResponse(
        id=item.id,
        household_id=item.household_id,
        category_id=item.category_id,
        category_name=item.category.name if item.category is not None else None,
        name=item.name,
        description=item.description,
        interval=interval,
        last_date=item.last_date,
        priority=Priority(item.priority),
        notes=item.notes,
        is_active=item.is_active,
        created_by=item.created_by,
        created_at=item.created_at,
    )


class ItemService:
    """Service for household items; creation counts towards the items plan limit."""

    def __init__(self, uow: UnitOfWork, plan_usage_service: PlanUsageService | None = None) -> None:
        self.uow = uow
        self.plan_usage_service = plan_usage_service or PlanUsageService(uow)

    async def _get_or_raise(self, item_id: uuid.UUID) -> Item:
        item = await self.uow.items.get_by_id(item_id)
        if item is None:
            raise NotFoundError(resource="Item", resource_id=item_id)
        return item

    async def get_household_items(
        self, household_id: uuid.UUID, active_only: bool = True
    ) -> list[ItemResponse]:
        items = await self.uow.items.get_household_items(household_id, active_only=active_only)
        return [item_to_response(item) for item in items]

    async def get_item(self, item_id: uuid.UUID) -> ItemResponse:
        return item_to_response(await self._get_or_raise(item_id))

    async def get_item_household_id(self, item_id: uuid.UUID) -> uuid.UUID:
        return (await self._get_or_raise(item_id)).household_id

    async def create_item(self, data: ItemCreate, created_by: uuid.UUID) -> ItemResponse:
        """Create an item.

        Raises:
            PlanLimitExceededError: The household is at its items limit.
        """
        await self.plan_usage_service.ensure_can_add(data.household_id, UsageType.ITEMS)
        interval = data.interval or TaskInterval()
        item = Item(
            household_id=data.household_id,
            category_id=data.category_id,
            name=data.name,
            description=data.description,
            years_value=interval.years,
            months_value=interval.months,
            weeks_value=interval.weeks,
            days_value=interval.days,
            last_date=data.last_date,
            priority=data.priority.value,
            notes=data.notes,
            is_active=True,
            created_by=created_by,
        )
        item = await self.uow.items.create(item)
        await self.plan_usage_service.update_items_usage(item.household_id)
        logger.info(f"Item created with ID {item.id} for household {item.household_id}")
        return item_to_response(item)

    async def update_item(self, item_id: uuid.UUID, data: ItemUpdate) -> ItemResponse:
        item = await self._get_or_raise(item_id)
        changes = data.model_dump(exclude_unset=True, exclude={"interval"})
        for field in ("name", "priority", "is_active"):
            if field in changes and changes[field] is None:
                del changes[field]
        if "priority" in changes:
            changes["priority"] = Priority(changes["priority"]).value
        for field, value in changes.items():
            setattr(item, field, value)
        if "interval" in data.model_fields_set:
            interval = data.interval or TaskInterval()
            item.years_value = interval.years
            item.months_value = interval.months
            item.weeks_value = interval.weeks
            item.days_value = interval.days
        item = await self.uow.items.update(item)
        logger.info(f"Item {item_id} updated successfully")
        return item_to_response(item)

    async def delete_item(self, item_id: uuid.UUID) -> None:
        item = await self._get_or_raise(item_id)
        await self.uow.items.soft_delete(item)
        await self.plan_usage_service.update_items_usage(item.household_id)
        logger.info(f"Item {item_id} soft deleted successfully")
