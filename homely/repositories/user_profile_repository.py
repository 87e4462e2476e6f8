"""User profile repository for profile lookup and admin search."""

from __future__ import annotations

import uuid
from collections.abc import Sequence

from sqlalchemy import func, or_, select
from sqlalchemy.orm import selectinload

from homely.models.household import HouseholdMember
from homely.models.mixins import utc_now
from homely.models.user_profile import UserProfile
from homely.repositories.base import Repository
from homely.repositories.pagination import PagedResult, page_offset


class UserProfileRepository(Repository[UserProfile]):
    """Repository for UserProfile entities.

    Example:
        uow = UnitOfWork(session)
        repo = uow.user_profiles
        profile = await repo.get_with_households(user_id)
    """

    model_class = UserProfile

    def _with_memberships(self) -> list:
        return [selectinload(UserProfile.memberships).selectinload(HouseholdMember.household)]

    async def get_with_households(self, user_id: uuid.UUID) -> UserProfile | None:
        """Get a live profile with its memberships and their households loaded."""
        return await self.find_one(
            UserProfile.user_id == user_id,
            options=self._with_memberships(),
        )

    async def search_users(
        self,
        *,
        search_term: str | None = None,
        role: str | None = None,
        household_id: uuid.UUID | None = None,
        page: int = 1,
        page_size: int = 20,
    ) -> PagedResult[UserProfile]:
        """Search profiles by name, membership role and household.

        Args:
            search_term: Case-insensitive substring of first or last name.
            role: Only users holding this role in some live membership.
            household_id: Only users with a live membership in this household.
            page: 1-based page number.
            page_size: Rows per page.

        Returns:
            A PagedResult ordered by first name, then last name.
        """
        conditions = []
        if search_term and search_term.strip():
            term = f"%{search_term.strip().lower()}%"
            conditions.append(
                or_(
                    func.lower(UserProfile.first_name).like(term),
                    func.lower(UserProfile.last_name).like(term),
                )
            )
        if role:
            conditions.append(
                UserProfile.memberships.any(
                    (HouseholdMember.role == role) & HouseholdMember.deleted_at.is_(None)
                )
            )
        if household_id is not None:
            conditions.append(
                UserProfile.memberships.any(
                    (HouseholdMember.household_id == household_id)
                    & HouseholdMember.deleted_at.is_(None)
                )
            )

        total = await self.count_where(*conditions)

        stmt = (
            self.query()
            .where(*conditions)
            .options(*self._with_memberships())
            .order_by(UserProfile.first_name, UserProfile.last_name)
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

    async def get_users_by_household(self, household_id: uuid.UUID) -> Sequence[UserProfile]:
        """Get live profiles with a live membership in the household."""
        return await self.find(
            UserProfile.memberships.any(
                (HouseholdMember.household_id == household_id)
                & HouseholdMember.deleted_at.is_(None)
            ),
            options=self._with_memberships(),
        )

    async def get_names(self, user_ids: Sequence[uuid.UUID]) -> dict[uuid.UUID, str]:
        """Map user ids to display names for the given profiles."""
        ids = [user_id for user_id in set(user_ids) if user_id is not None]
        if not ids:
            return {}
        stmt = select(UserProfile).where(UserProfile.user_id.in_(ids))
        result = await self.session.execute(stmt)
        return {profile.user_id: profile.full_name for profile in result.scalars().all()}

    async def update_last_active(self, user_id: uuid.UUID) -> None:
        """Stamp last_active_at for the user, if the profile exists."""
        profile = await self.get_by_id(user_id)
        if profile is not None:
            profile.last_active_at = utc_now()
            await self.update(profile)
