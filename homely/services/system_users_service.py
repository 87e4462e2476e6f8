"""User administration for the system console.

Accounts live in two places: the Supabase auth user (credentials) and the
application profile with its household memberships. Creation writes the
auth user first; deletion soft-deletes the profile first and then removes
the auth user.
"""

from __future__ import annotations

import uuid
from collections.abc import Sequence
from typing import TYPE_CHECKING

from homely.api.schemas.system import (
    CreateUserRequest,
    SystemUser,
    SystemUserDetails,
    UserActivity,
    UserHousehold,
    UserSearchResponse,
)
from homely.core.exceptions import NotFoundError, ValidationError
from homely.core.logging import get_logger
from homely.models.enums import HouseholdRole
from homely.models.household import HouseholdMember
from homely.models.mixins import utc_now
from homely.models.user_profile import UserProfile
from homely.services.household_service import validate_role
from homely.services.supabase_auth import SupabaseAuthClient

if TYPE_CHECKING:
    from homely.repositories.unit_of_work import UnitOfWork

logger = get_logger(__name__)

DEFAULT_LANGUAGE = "pl"
DEFAULT_TIMEZONE = "Europe/Warsaw"


def _live(memberships: Sequence[HouseholdMember]) -> list[HouseholdMember]:
    return [m for m in memberships if m.deleted_at is None]


def to_system_user(profile: UserProfile, memberships: Sequence[HouseholdMember]) -> SystemUser:
    """Map a profile to its console row; role and household come from the first live membership."""
    live = _live(memberships)
    primary = live[0] if live else None
    household = primary.household if primary is not None else None
    return SystemUser(
        id=profile.user_id,
        first_name=profile.first_name,
        last_name=profile.last_name,
        avatar_url=profile.avatar_url,
        role=HouseholdRole(primary.role) if primary is not None else HouseholdRole.MEMBER,
        household_id=primary.household_id if primary is not None else None,
        household_name=household.name if household is not None else "No Household",
        last_active_at=profile.last_active_at,
        created_at=profile.created_at,
    )


def to_user_household(member: HouseholdMember) -> UserHousehold:
    return UserHousehold(
        household_id=member.household_id,
        household_name=member.household.name if member.household is not None else "Unknown",
        role=HouseholdRole(member.role),
        joined_at=member.joined_at,
    )


class SystemUsersService:
    """Console operations over user profiles and their memberships."""

    def __init__(self, uow: UnitOfWork, supabase: SupabaseAuthClient | None = None) -> None:
        self.uow = uow
        self.supabase = supabase or SupabaseAuthClient()

    async def _get_profile_or_raise(self, user_id: uuid.UUID) -> UserProfile:
        profile = await self.uow.user_profiles.get_by_id(user_id)
        if profile is None:
            raise NotFoundError(resource="User", resource_id=user_id)
        return profile

    async def _reload(self, user_id: uuid.UUID) -> SystemUser:
        profile = await self._get_profile_or_raise(user_id)
        memberships = await self.uow.household_members.get_user_memberships(user_id)
        return to_system_user(profile, memberships)

    async def search_users(
        self,
        *,
        search_term: str | None = None,
        role: str | None = None,
        status: str | None = None,
        household_id: uuid.UUID | None = None,
        page: int = 1,
        page_size: int = 20,
    ) -> UserSearchResponse:
        """Search users by name, role and household.

        Account status is held by Supabase, so ``status`` is accepted but
        not applied.
        """
        if status:
            logger.debug(f"Ignoring user status filter '{status}'")
        result = await self.uow.user_profiles.search_users(
            search_term=search_term,
            role=role,
            household_id=household_id,
            page=page,
            page_size=page_size,
        )
        return UserSearchResponse(
            users=[to_system_user(p, p.memberships) for p in result.items],
            total_count=result.total_count,
            page=result.page,
            page_size=result.page_size,
            total_pages=result.total_pages,
        )

    async def get_user_details(self, user_id: uuid.UUID) -> SystemUserDetails:
        """Get a user with all live memberships.

        Raises:
            NotFoundError: No live profile exists for the user.
        """
        profile = await self._get_profile_or_raise(user_id)
        memberships = await self.uow.household_members.get_user_memberships(user_id)
        summary = to_system_user(profile, memberships)
        return SystemUserDetails(
            **summary.model_dump(),
            phone=profile.phone,
            preferred_language=profile.preferred_language,
            timezone=profile.timezone,
            households=[to_user_household(m) for m in memberships],
        )

    async def get_user_activity(self, user_id: uuid.UUID, limit: int = 50) -> list[UserActivity]:
        # No activity log table exists yet.
        logger.debug(f"Activity requested for user {user_id} (limit {limit}); none recorded")
        return []

    async def create_user(self, data: CreateUserRequest) -> SystemUser:
        """Create the auth user, its profile and its first membership.

        Raises:
            NotFoundError: The target household does not exist.
            ExternalServiceError: Supabase rejected the new account.
        """
        if await self.uow.households.get_by_id(data.household_id) is None:
            raise NotFoundError(resource="Household", resource_id=data.household_id)

        user_id = await self.supabase.admin_create_user(
            data.email,
            data.password,
            email_confirm=True,
            user_metadata={"first_name": data.first_name, "last_name": data.last_name},
        )

        async def _create() -> None:
            await self.uow.user_profiles.create(
                UserProfile(
                    user_id=user_id,
                    first_name=data.first_name,
                    last_name=data.last_name,
                    preferred_language=DEFAULT_LANGUAGE,
                    timezone=DEFAULT_TIMEZONE,
                )
            )
            await self.uow.household_members.create(
                HouseholdMember(
                    household_id=data.household_id,
                    user_id=user_id,
                    role=data.role.value,
                    joined_at=utc_now(),
                )
            )

        await self.uow.execute_in_transaction(_create)
        logger.info(f"Created user {user_id} in household {data.household_id}")
        return await self._reload(user_id)

    async def update_user_role(
        self, user_id: uuid.UUID, household_id: uuid.UUID, role: str | HouseholdRole
    ) -> SystemUser:
        """Change the user's role in one household.

        Raises:
            InvalidInputError: Unknown role.
            NotFoundError: The user is not a live member of the household.
        """
        household_role = validate_role(role)
        member = await self.uow.household_members.get_membership(household_id, user_id)
        if member is None:
            raise NotFoundError(f"User {user_id} is not a member of household {household_id}")
        member.role = household_role.value
        await self.uow.household_members.update(member)
        logger.info(f"Role of user {user_id} in household {household_id} set to {household_role}")
        return await self._reload(user_id)

    async def reset_password(self, user_id: uuid.UUID, send_email: bool = True) -> bool:
        await self._get_profile_or_raise(user_id)
        logger.info(f"Password reset requested for user {user_id}, send_email={send_email}")
        return True

    async def unlock_account(self, user_id: uuid.UUID) -> bool:
        await self._get_profile_or_raise(user_id)
        logger.info(f"Account unlock requested for user {user_id}")
        return True

    async def move_user_to_household(
        self, user_id: uuid.UUID, new_household_id: uuid.UUID
    ) -> SystemUser:
        """Move the user's primary membership to another household, keeping the role.

        Raises:
            NotFoundError: The user or the target household does not exist.
            ValidationError: The user has no live membership, or already
                belongs to the target household.
        """
        await self._get_profile_or_raise(user_id)
        if await self.uow.households.get_by_id(new_household_id) is None:
            raise NotFoundError(resource="Household", resource_id=new_household_id)

        memberships = await self.uow.household_members.get_user_memberships(user_id)
        if not memberships:
            raise ValidationError(f"User {user_id} has no active household membership")
        if any(m.household_id == new_household_id for m in memberships):
            raise ValidationError(
                f"User {user_id} is already a member of household {new_household_id}"
            )
        current = memberships[0]

        async def _move() -> None:
            await self.uow.household_members.soft_delete(current)
            await self.uow.household_members.create(
                HouseholdMember(
                    household_id=new_household_id,
                    user_id=user_id,
                    role=current.role,
                    joined_at=utc_now(),
                )
            )

        await self.uow.execute_in_transaction(_move)
        logger.info(
            f"Moved user {user_id} from household {current.household_id} to {new_household_id}"
        )
        return await self._reload(user_id)

    async def delete_user(self, user_id: uuid.UUID) -> bool:
        """Soft-delete the profile and memberships, then remove the auth user.

        Returns:
            False when no live profile exists.
        """
        profile = await self.uow.user_profiles.get_by_id(user_id)
        if profile is None:
            logger.warning(f"User {user_id} not found in database")
            return False

        memberships = await self.uow.household_members.get_user_memberships(user_id)

        async def _delete() -> None:
            for membership in memberships:
                await self.uow.household_members.soft_delete(membership)
            await self.uow.user_profiles.soft_delete(profile)

        await self.uow.execute_in_transaction(_delete)

        if not await self.supabase.admin_delete_user(user_id):
            logger.warning(
                f"Failed to delete user {user_id} from Supabase Auth, but profile was soft deleted"
            )
        logger.info(f"User {user_id} deleted successfully")
        return True

    # -------------------------------------------------------------------------
    # Memberships
    # -------------------------------------------------------------------------

    async def get_user_households(self, user_id: uuid.UUID) -> list[UserHousehold]:
        """List the user's live memberships.

        Raises:
            NotFoundError: No live profile exists for the user.
        """
        await self._get_profile_or_raise(user_id)
        memberships = await self.uow.household_members.get_user_memberships(user_id)
        return [to_user_household(m) for m in memberships]

    async def add_user_to_household(
        self, user_id: uuid.UUID, household_id: uuid.UUID, role: str | HouseholdRole
    ) -> bool:
        """Add a membership.

        Returns:
            False when the user already belongs to the household.

        Raises:
            NotFoundError: The user or household does not exist.
        """
        household_role = validate_role(role)
        await self._get_profile_or_raise(user_id)
        if await self.uow.households.get_by_id(household_id) is None:
            raise NotFoundError(resource="Household", resource_id=household_id)
        if await self.uow.household_members.is_member(household_id, user_id):
            return False
        await self.uow.household_members.create(
            HouseholdMember(
                household_id=household_id,
                user_id=user_id,
                role=household_role.value,
                joined_at=utc_now(),
            )
        )
        logger.info(f"Added user {user_id} to household {household_id} as {household_role}")
        return True

    async def remove_user_from_household(
        self, user_id: uuid.UUID, household_id: uuid.UUID
    ) -> bool:
        """Soft-delete a membership; False when there was none."""
        member = await self.uow.household_members.get_membership(household_id, user_id)
        if member is None:
            return False
        await self.uow.household_members.soft_delete(member)
        logger.info(f"Removed user {user_id} from household {household_id}")
        return True
