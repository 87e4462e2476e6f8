"""Household access and membership management.

HouseholdService answers "which households can this user see" and maps
households to DTOs. HouseholdMemberService adds, removes and re-roles
members, keeping the household_members plan usage in sync.
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from homely.api.schemas.household import HouseholdMemberResponse, HouseholdResponse
from homely.core.exceptions import (
    AuthorizationError,
    ConflictError,
    InvalidInputError,
    NotFoundError,
)
from homely.core.logging import get_logger
from homely.models.enums import HouseholdRole, SubscriptionStatus, UsageType
from homely.models.household import Household, HouseholdMember
from homely.models.mixins import utc_now
from homely.services.plan_usage_service import PlanUsageService

if TYPE_CHECKING:
    from homely.repositories.unit_of_work import UnitOfWork

logger = get_logger(__name__)


def validate_role(role: str | HouseholdRole) -> HouseholdRole:
    """Coerce a role value, rejecting anything outside admin/member/dashboard.

    Raises:
        InvalidInputError: The role is not a known household role.
    """
    try:
        return HouseholdRole(str(role))
    except ValueError:
        raise InvalidInputError(
            f"Invalid role: {role}. Must be one of: {', '.join(HouseholdRole.values())}",
            field="role",
            value=role,
        ) from None


def household_to_response(household: Household) -> HouseholdResponse:
    return HouseholdResponse(
        id=household.id,
        name=household.name,
        address=household.address,
        plan_type_id=household.plan_type_id,
        plan_type_name=household.plan_type.name if household.plan_type else "Unknown",
        subscription_status=SubscriptionStatus(household.subscription_status),
        subscription_start_date=household.subscription_start_date,
        subscription_end_date=household.subscription_end_date,
        member_count=len(household.active_members),
        created_at=household.created_at,
    )


def member_to_response(member: HouseholdMember) -> HouseholdMemberResponse:
    profile = member.user if member.user is not None and not member.user.is_deleted else None
    return HouseholdMemberResponse(
        id=member.id,
        user_id=member.user_id,
        first_name=(profile.first_name if profile else None) or "Unknown",
        last_name=(profile.last_name if profile else None) or "User",
        role=HouseholdRole(member.role),
        avatar_url=profile.avatar_url if profile else None,
        joined_at=member.joined_at,
    )


class HouseholdService:
    """Read access to households for their members."""

    def __init__(self, uow: UnitOfWork) -> None:
        self.uow = uow

    async def get_household(self, household_id: uuid.UUID) -> HouseholdResponse:
        """Get a household with its plan name and active member count.

        Raises:
            NotFoundError: The household does not exist.
        """
        household = await self.uow.households.get_with_members(household_id)
        if household is None:
            logger.warning(f"Household not found: {household_id}")
            raise NotFoundError(resource="Household", resource_id=household_id)
        return household_to_response(household)

    async def get_user_households(self, user_id: uuid.UUID) -> list[HouseholdResponse]:
        households = await self.uow.households.get_user_households(user_id)
        logger.debug(f"Found {len(households)} households for user: {user_id}")
        return [household_to_response(h) for h in households]

    async def get_user_household_ids(self, user_id: uuid.UUID) -> list[uuid.UUID]:
        memberships = await self.uow.household_members.get_user_memberships(user_id)
        return [m.household_id for m in memberships]

    async def get_household_members(
        self, household_id: uuid.UUID
    ) -> list[HouseholdMemberResponse]:
        members = await self.uow.household_members.get_household_members(household_id)
        return [member_to_response(m) for m in members]

    async def can_user_access(self, household_id: uuid.UUID, user_id: uuid.UUID) -> bool:
        return await self.uow.household_members.is_member(household_id, user_id)

    async def ensure_member(self, household_id: uuid.UUID, user_id: uuid.UUID) -> None:
        """Raise AuthorizationError unless the user belongs to the household."""
        if not await self.can_user_access(household_id, user_id):
            logger.warning(
                f"User {user_id} attempted to access household {household_id} without permission"
            )
            raise AuthorizationError("You do not have access to this household")

    async def ensure_admin(self, household_id: uuid.UUID, user_id: uuid.UUID) -> None:
        """Raise AuthorizationError unless the user is an admin of the household."""
        if not await self.uow.household_members.is_admin(household_id, user_id):
            raise AuthorizationError("Household admin role required")


class HouseholdMemberService:
    """Membership changes with plan limit enforcement."""

    def __init__(self, uow: UnitOfWork, plan_usage_service: PlanUsageService | None = None) -> None:
        self.uow = uow
        self.plan_usage_service = plan_usage_service or PlanUsageService(uow)

    async def add_member(
        self,
        household_id: uuid.UUID,
        user_id: uuid.UUID,
        role: str | HouseholdRole,
        invited_by: uuid.UUID | None = None,
    ) -> HouseholdMember:
        """Add a user to a household, restoring a previously removed membership.

        Raises:
            InvalidInputError: Unknown role.
            ConflictError: The user is already a live member.
            PlanLimitExceededError: The household is at its member limit.
        """
        household_role = validate_role(role)

        existing = await self.uow.household_members.get_membership(
            household_id, user_id, include_deleted=True
        )
        if existing is not None and not existing.is_deleted:
            raise ConflictError(f"User {user_id} is already a member of household {household_id}")

        await self.plan_usage_service.ensure_can_add(household_id, UsageType.HOUSEHOLD_MEMBERS)

        if existing is not None:
            existing.deleted_at = None
            existing.role = household_role.value
            existing.joined_at = utc_now()
            member = await self.uow.household_members.update(existing)
            logger.info(
                f"Restored member {user_id} to household {household_id} "
                f"with role {household_role.value}"
            )
        else:
            member = await self.uow.household_members.create(
                HouseholdMember(
                    household_id=household_id,
                    user_id=user_id,
                    role=household_role.value,
                    invited_by=invited_by,
                    joined_at=utc_now(),
                )
            )
            logger.info(
                f"Added member {user_id} to household {household_id} "
                f"with role {household_role.value}"
            )

        await self.plan_usage_service.update_members_usage(household_id)
        return member

    async def remove_member(self, household_id: uuid.UUID, user_id: uuid.UUID) -> bool:
        """Soft-delete a membership.

        Returns:
            False when the user was not a live member.
        """
        member = await self.uow.household_members.get_membership(household_id, user_id)
        if member is None:
            logger.warning(
                f"Cannot remove member: User {user_id} is not a member of household {household_id}"
            )
            return False
        await self.uow.household_members.soft_delete(member)
        await self.plan_usage_service.update_members_usage(household_id)
        logger.info(f"Removed member {user_id} from household {household_id}")
        return True

    async def update_member_role(
        self, household_id: uuid.UUID, user_id: uuid.UUID, role: str | HouseholdRole
    ) -> HouseholdMember:
        """Change a member's role.

        Raises:
            InvalidInputError: Unknown role.
            NotFoundError: The user is not a live member.
        """
        household_role = validate_role(role)
        member = await self.uow.household_members.get_membership(household_id, user_id)
        if member is None:
            raise NotFoundError(f"User {user_id} is not a member of household {household_id}")
        member.role = household_role.value
        member = await self.uow.household_members.update(member)
        logger.info(
            f"Updated role for member {user_id} in household {household_id} "
            f"to {household_role.value}"
        )
        return member
