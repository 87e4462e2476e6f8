"""Repositories for households and household memberships."""

from __future__ import annotations

import uuid
from collections.abc import Sequence

from sqlalchemy import or_, select
from sqlalchemy.orm import selectinload

from homely.models.enums import HouseholdRole, SubscriptionStatus
from homely.models.household import Household, HouseholdMember
from homely.repositories.base import Repository
from homely.repositories.pagination import PagedResult, page_offset

_LIVE_MEMBER = HouseholdMember.deleted_at.is_(None)


class HouseholdRepository(Repository[Household]):
    """Repository for Household entities.

    Example:
        uow = UnitOfWork(session)
        repo = uow.households
        households = await repo.get_user_households(user_id)
    """

    model_class = Household

    def _details(self) -> list:
        return [
            selectinload(Household.plan_type),
            selectinload(Household.members).selectinload(HouseholdMember.user),
        ]

    async def get_user_households(self, user_id: uuid.UUID) -> Sequence[Household]:
        """Get live households the user has a live membership in."""
        return await self.find(
            Household.members.any((HouseholdMember.user_id == user_id) & _LIVE_MEMBER),
            options=self._details(),
            order_by=[Household.name],
        )

    async def get_with_members(self, household_id: uuid.UUID) -> Household | None:
        """Get a live household with plan type and memberships loaded."""
        return await self.find_one(Household.id == household_id, options=self._details())

    async def get_all_ids(self) -> Sequence[uuid.UUID]:
        """Get ids of every live household."""
        stmt = select(Household.id).where(Household.deleted_at.is_(None))
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def search_households(
        self,
        *,
        search_term: str | None = None,
        plan_type_id: int | None = None,
        subscription_status: str | None = None,
        has_active_members: bool | None = None,
        page: int = 1,
        page_size: int = 20,
    ) -> PagedResult[Household]:
        """Search households for the admin console.

        Args:
            search_term: Case-insensitive substring of name or address.
            plan_type_id: Exact plan type.
            subscription_status: Exact subscription status.
            has_active_members: When True, only households with a live member.
            page: 1-based page number.
            page_size: Rows per page.

        Returns:
            A PagedResult ordered by newest first.
        """
        conditions = []
        if search_term and search_term.strip():
            term = f"%{search_term.strip()}%"
            conditions.append(or_(Household.name.ilike(term), Household.address.ilike(term)))
        if plan_type_id is not None:
            conditions.append(Household.plan_type_id == plan_type_id)
        if subscription_status:
            conditions.append(Household.subscription_status == subscription_status)
        if has_active_members:
            conditions.append(Household.members.any(_LIVE_MEMBER))

        total = await self.count_where(*conditions)

        stmt = (
            self.query()
            .where(*conditions)
            .options(*self._details())
            .order_by(Household.created_at.desc())
            .offset(page_offset(page, page_size))
            .limit(page_size)
        )
        result = await self.session.execute(stmt)
        return PagedResult(
            items=result.scalars().all(),
            total_count=total,
            page=page,
            page_size=page_size,
        )

    async def get_with_plan(self, household_id: uuid.UUID) -> Household | None:
        return await self.find_one(
            Household.id == household_id,
            options=[selectinload(Household.plan_type)],
        )

    async def is_premium(self, household_id: uuid.UUID) -> bool:
        """Whether the household's plan includes premium features."""
        household = await self.get_with_plan(household_id)
        if household is None or household.plan_type is None:
            return False
        return household.plan_type.is_premium

    async def count_with_active_members(self) -> int:
        return await self.count_where(Household.members.any(_LIVE_MEMBER))

    async def count_by_status(self, status: SubscriptionStatus | str) -> int:
        return await self.count_where(Household.subscription_status == str(status))


class HouseholdMemberRepository(Repository[HouseholdMember]):
    """Repository for HouseholdMember entities."""

    model_class = HouseholdMember

    async def get_membership(
        self, household_id: uuid.UUID, user_id: uuid.UUID, *, include_deleted: bool = False
    ) -> HouseholdMember | None:
        """Get the membership of a user in a household.

        Args:
            household_id: Household to look in.
            user_id: Member's user id.
            include_deleted: Also return a soft-deleted membership so it can be restored.
        """
        stmt = select(HouseholdMember).where(
            HouseholdMember.household_id == household_id,
            HouseholdMember.user_id == user_id,
        )
        if not include_deleted:
            stmt = stmt.where(_LIVE_MEMBER)
        stmt = stmt.order_by(HouseholdMember.deleted_at.is_not(None), HouseholdMember.created_at)
        result = await self.session.execute(stmt.limit(1))
        return result.scalars().first()

    async def get_household_members(self, household_id: uuid.UUID) -> Sequence[HouseholdMember]:
        """Get live memberships of a household with user profiles loaded."""
        return await self.find(
            HouseholdMember.household_id == household_id,
            options=[selectinload(HouseholdMember.user)],
            order_by=[HouseholdMember.joined_at],
        )

    async def get_user_memberships(self, user_id: uuid.UUID) -> Sequence[HouseholdMember]:
        """Get live memberships of a user, oldest first, with households loaded."""
        return await self.find(
            HouseholdMember.user_id == user_id,
            options=[selectinload(HouseholdMember.household)],
            order_by=[HouseholdMember.joined_at, HouseholdMember.created_at],
        )

    async def is_member(self, household_id: uuid.UUID, user_id: uuid.UUID) -> bool:
        count = await self.count_where(
            HouseholdMember.household_id == household_id,
            HouseholdMember.user_id == user_id,
        )
        return count > 0

    async def is_admin(self, household_id: uuid.UUID, user_id: uuid.UUID) -> bool:
        count = await self.count_where(
            HouseholdMember.household_id == household_id,
            HouseholdMember.user_id == user_id,
            HouseholdMember.role == HouseholdRole.ADMIN.value,
        )
        return count > 0

    async def count_household_members(self, household_id: uuid.UUID) -> int:
        return await self.count_where(HouseholdMember.household_id == household_id)
