"""Household administration for the system console."""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from homely.api.schemas.system import (
    CreateHouseholdRequest,
    HouseholdSearchResponse,
    HouseholdStats,
    SystemHousehold,
    SystemHouseholdDetails,
    SystemHouseholdMember,
    UpdateHouseholdRequest,
)
from homely.core.exceptions import NotFoundError
from homely.core.logging import get_logger
from homely.models.enums import HouseholdRole, SubscriptionStatus
from homely.models.household import Household, HouseholdMember
from homely.models.mixins import utc_now

if TYPE_CHECKING:
    from homely.repositories.unit_of_work import UnitOfWork

logger = get_logger(__name__)


def to_system_household(household: Household) -> SystemHousehold:
    return SystemHousehold(
        id=household.id,
        name=household.name,
        address=household.address,
        plan_type_id=household.plan_type_id,
        plan_type_name=household.plan_type.name if household.plan_type else "Unknown",
        subscription_status=SubscriptionStatus(household.subscription_status),
        member_count=len(household.active_members),
        created_at=household.created_at,
    )


def to_system_member(member: HouseholdMember) -> SystemHouseholdMember:
    profile = member.user
    return SystemHouseholdMember(
        user_id=member.user_id,
        first_name=(profile.first_name if profile else None) or "Unknown",
        last_name=(profile.last_name if profile else None) or "User",
        role=HouseholdRole(member.role),
        joined_at=member.joined_at,
    )


class SystemHouseholdsService:
    """Console operations over households."""

    def __init__(self, uow: UnitOfWork) -> None:
        self.uow = uow

    async def _reload(self, household_id: uuid.UUID) -> SystemHousehold:
        household = await self.uow.households.get_with_members(household_id)
        if household is None:
            raise NotFoundError(resource="Household", resource_id=household_id)
        return to_system_household(household)

    async def search_households(
        self,
        *,
        search_term: str | None = None,
        plan_type_id: int | None = None,
        subscription_status: str | None = None,
        has_active_members: bool | None = None,
        page: int = 1,
        page_size: int = 20,
    ) -> HouseholdSearchResponse:
        result = await self.uow.households.search_households(
            search_term=search_term,
            plan_type_id=plan_type_id,
            subscription_status=subscription_status,
            has_active_members=has_active_members,
            page=page,
            page_size=page_size,
        )
        return HouseholdSearchResponse(
            households=[to_system_household(h) for h in result.items],
            total_count=result.total_count,
            page=result.page,
            page_size=result.page_size,
            total_pages=result.total_pages,
        )

    async def get_household_details(self, household_id: uuid.UUID) -> SystemHouseholdDetails:
        """Get a household with its live members.

        Raises:
            NotFoundError: The household does not exist.
        """
        household = await self.uow.households.get_with_members(household_id)
        if household is None:
            raise NotFoundError(resource="Household", resource_id=household_id)
        return SystemHouseholdDetails(
            **to_system_household(household).model_dump(),
            members=[to_system_member(m) for m in household.active_members],
        )

    async def get_household_stats(self) -> HouseholdStats:
        households = self.uow.households
        return HouseholdStats(
            total_households=await households.count(),
            active_households=await households.count_with_active_members(),
            free_households=await households.count_by_status(SubscriptionStatus.FREE),
            premium_households=await households.count_by_status(SubscriptionStatus.ACTIVE),
            total_members=await self.uow.household_members.count(),
            total_items=await self.uow.items.count(),
            total_tasks=await self.uow.tasks.count(),
        )

    async def create_household(self, data: CreateHouseholdRequest) -> SystemHousehold:
        """Create a free-tier household with its first admin.

        Raises:
            NotFoundError: The admin user or plan type does not exist.
        """
        if await self.uow.user_profiles.get_by_id(data.admin_user_id) is None:
            raise NotFoundError(resource="User", resource_id=data.admin_user_id)
        if await self.uow.plan_types.get_by_id(data.plan_type_id) is None:
            raise NotFoundError(resource="Plan type", resource_id=data.plan_type_id)

        async def _create() -> Household:
            household = await self.uow.households.create(
                Household(
                    name=data.name,
                    address=data.address,
                    plan_type_id=data.plan_type_id,
                    subscription_status=SubscriptionStatus.FREE.value,
                )
            )
            await self.uow.household_members.create(
                HouseholdMember(
                    household_id=household.id,
                    user_id=data.admin_user_id,
                    role=HouseholdRole.ADMIN.value,
                    joined_at=utc_now(),
                )
            )
            return household

        household = await self.uow.execute_in_transaction(_create)
        logger.info(f"Created household {household.id} with admin {data.admin_user_id}")
        return await self._reload(household.id)

    async def update_household(
        self, household_id: uuid.UUID, data: UpdateHouseholdRequest
    ) -> SystemHousehold:
        """Apply the non-empty fields of a partial update.

        Raises:
            NotFoundError: The household does not exist.
        """
        household = await self.uow.households.get_by_id(household_id)
        if household is None:
            raise NotFoundError(resource="Household", resource_id=household_id)

        if data.name and data.name.strip():
            household.name = data.name
        if data.address is not None:
            household.address = data.address
        if data.plan_type_id is not None:
            household.plan_type_id = data.plan_type_id
        if data.subscription_status is not None:
            household.subscription_status = data.subscription_status.value

        await self.uow.households.update(household)
        logger.info(f"Updated household {household_id}")
        return await self._reload(household_id)

    async def delete_household(self, household_id: uuid.UUID) -> bool:
        """Soft-delete a household; False when it does not exist."""
        household = await self.uow.households.get_by_id(household_id)
        if household is None:
            return False
        await self.uow.households.soft_delete(household)
        logger.info(f"Soft deleted household {household_id}")
        return True

    async def assign_admin(self, household_id: uuid.UUID, user_id: uuid.UUID) -> SystemHousehold:
        """Make the user an admin, adding a membership if needed.

        Raises:
            NotFoundError: The household or the user does not exist.
        """
        if await self.uow.households.get_by_id(household_id) is None:
            raise NotFoundError(resource="Household", resource_id=household_id)
        if await self.uow.user_profiles.get_by_id(user_id) is None:
            raise NotFoundError(resource="User", resource_id=user_id)

        member = await self.uow.household_members.get_membership(household_id, user_id)
        if member is not None:
            member.role = HouseholdRole.ADMIN.value
            await self.uow.household_members.update(member)
        else:
            await self.uow.household_members.create(
                HouseholdMember(
                    household_id=household_id,
                    user_id=user_id,
                    role=HouseholdRole.ADMIN.value,
                    joined_at=utc_now(),
                )
            )
        logger.info(f"Assigned user {user_id} as admin of household {household_id}")
        return await self._reload(household_id)
