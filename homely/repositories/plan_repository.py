"""Repositories for subscription plans and metered plan usage."""

from __future__ import annotations

import uuid
from collections.abc import Sequence

from homely.models.plan import PlanType, PlanUsage
from homely.repositories.base import Repository


class PlanTypeRepository(Repository[PlanType]):
    """Repository for PlanType entities."""

    model_class = PlanType

    async def get_active_plans(self) -> Sequence[PlanType]:
        """Get plans that can currently be subscribed to, cheapest first."""
        return await self.find(
            PlanType.is_active.is_(True),
            order_by=[PlanType.price_monthly.asc().nulls_first(), PlanType.id],
        )

    async def get_by_name(self, name: str) -> PlanType | None:
        return await self.find_one(PlanType.name == name)


class PlanUsageRepository(Repository[PlanUsage]):
    """Repository for PlanUsage entities.

    There is at most one live usage row per (household, usage_type).
    """

    model_class = PlanUsage

    async def get_usage(self, household_id: uuid.UUID, usage_type: str) -> PlanUsage | None:
        """Get the live usage row for a household and usage type."""
        return await self.find_one(
            PlanUsage.household_id == household_id,
            PlanUsage.usage_type == str(usage_type),
        )

    async def get_household_usage(self, household_id: uuid.UUID) -> Sequence[PlanUsage]:
        """Get all live usage rows for a household."""
        return await self.find(
            PlanUsage.household_id == household_id,
            order_by=[PlanUsage.usage_type],
        )
