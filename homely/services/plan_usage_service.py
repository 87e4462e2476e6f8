"""Plan usage tracking and subscription limit checks.

Each household has at most one usage row per metered resource. The row
stores the current consumption and the plan maximum at the time it was
last refreshed; a null maximum, or no row at all, means unlimited.
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from homely.core.exceptions import PlanLimitExceededError
from homely.core.logging import get_logger
from homely.models.enums import UsageType
from homely.models.plan import PlanUsage
from homely.services.urgency import today_utc

if TYPE_CHECKING:
    from homely.repositories.unit_of_work import UnitOfWork

logger = get_logger(__name__)


class PlanUsageService:
    """Keeps plan usage rows in sync and enforces plan limits."""

    def __init__(self, uow: UnitOfWork) -> None:
        self.uow = uow

    async def _plan_limit(self, household_id: uuid.UUID, usage_type: UsageType) -> int | None:
        household = await self.uow.households.get_with_plan(household_id)
        if household is None or household.plan_type is None:
            return None
        return household.plan_type.limit_for(usage_type)

    async def _upsert(
        self, household_id: uuid.UUID, usage_type: UsageType, current_value: int
    ) -> PlanUsage:
        max_value = await self._plan_limit(household_id, usage_type)
        usage = await self.uow.plan_usage.get_usage(household_id, usage_type)
        if usage is None:
            usage = PlanUsage(
                household_id=household_id,
                usage_type=usage_type.value,
                current_value=current_value,
                max_value=max_value,
                usage_date=today_utc(),
            )
            return await self.uow.plan_usage.create(usage)

        usage.current_value = current_value
        usage.max_value = max_value
        usage.usage_date = today_utc()
        return await self.uow.plan_usage.update(usage)

    async def update_tasks_usage(self, household_id: uuid.UUID) -> PlanUsage:
        """Recount live tasks and store the result with the plan maximum."""
        count = await self.uow.tasks.count_household_tasks(household_id)
        return await self._upsert(household_id, UsageType.TASKS, count)

    async def update_members_usage(self, household_id: uuid.UUID) -> PlanUsage:
        """Recount live members and store the result with the plan maximum."""
        count = await self.uow.household_members.count_household_members(household_id)
        return await self._upsert(household_id, UsageType.HOUSEHOLD_MEMBERS, count)

    async def update_items_usage(self, household_id: uuid.UUID) -> PlanUsage:
        count = await self.uow.items.count_household_items(household_id)
        return await self._upsert(household_id, UsageType.ITEMS, count)

    async def is_limit_exceeded(self, household_id: uuid.UUID, usage_type: UsageType) -> bool:
        """Whether current usage has already reached the maximum."""
        usage = await self.uow.plan_usage.get_usage(household_id, usage_type)
        if usage is None or usage.max_value is None:
            return False
        return usage.current_value >= usage.max_value

    async def would_exceed_limit(self, household_id: uuid.UUID, usage_type: UsageType) -> bool:
        """Whether adding one more unit would go over the maximum."""
        usage = await self.uow.plan_usage.get_usage(household_id, usage_type)
        if usage is None or usage.max_value is None:
            return False
        return usage.current_value + 1 > usage.max_value

    async def ensure_can_add(self, household_id: uuid.UUID, usage_type: UsageType) -> None:
        """Raise PlanLimitExceededError if one more unit would exceed the plan.

        Raises:
            PlanLimitExceededError: The household is at its plan limit.
        """
        if await self.would_exceed_limit(household_id, usage_type):
            usage = await self.uow.plan_usage.get_usage(household_id, usage_type)
            limit = usage.max_value if usage is not None else None
            logger.info(
                "Plan limit reached",
                extra={
                    "household_id": str(household_id),
                    "usage_type": usage_type.value,
                    "limit": limit,
                },
            )
            raise PlanLimitExceededError(
                f"Plan limit for {usage_type.value} reached ({limit}). "
                "Please upgrade to a premium plan.",
                usage_type=usage_type.value,
                limit=limit,
            )
