"""Unit tests for household access and membership management."""

import uuid
from datetime import datetime
from unittest.mock import AsyncMock

import pytest

from homely.core.exceptions import (
    AuthorizationError,
    ConflictError,
    InvalidInputError,
    NotFoundError,
    PlanLimitExceededError,
)
from homely.models.enums import HouseholdRole, UsageType
from homely.services.household_service import (
    HouseholdMemberService,
    HouseholdService,
    member_to_response,
    validate_role,
)
from homely.tests.factories import (
    HouseholdFactory,
    HouseholdMemberFactory,
    UserProfileFactory,
    persisted,
)


@pytest.mark.parametrize("role", ["admin", "member", "dashboard", HouseholdRole.ADMIN])
def test_validate_role_accepts_known_roles(role):
    assert validate_role(role) == HouseholdRole(str(role))


def test_validate_role_rejects_unknown_role():
    with pytest.raises(InvalidInputError) as exc_info:
        validate_role("owner")
    assert exc_info.value.details == {"field": "role", "value": "owner"}
    assert "admin, member, dashboard" in exc_info.value.message


def test_member_response_falls_back_for_deleted_profile():
    member = HouseholdMemberFactory(user=UserProfileFactory(deleted_at=datetime(2025, 1, 2)))
    response = member_to_response(member)
    assert (response.first_name, response.last_name) == ("Unknown", "User")


class TestHouseholdService:
    @pytest.fixture
    def service(self, mock_uow) -> HouseholdService:
        return HouseholdService(mock_uow)

    @pytest.mark.asyncio
    async def test_member_count_ignores_removed_members(self, service, mock_uow):
        household = HouseholdFactory()
        household.members = [
            HouseholdMemberFactory(household=household),
            HouseholdMemberFactory(household=household),
            HouseholdMemberFactory(household=household, deleted_at=datetime(2025, 2, 1)),
        ]
        mock_uow.households.get_with_members.return_value = household

        response = await service.get_household(household.id)

        assert response.member_count == 2
        assert response.plan_type_name == "Darmowy"

    @pytest.mark.asyncio
    async def test_missing_household(self, service, mock_uow):
        mock_uow.households.get_with_members.return_value = None
        with pytest.raises(NotFoundError):
            await service.get_household(uuid.uuid4())

    @pytest.mark.asyncio
    async def test_ensure_member_denies_outsiders(self, service, mock_uow):
        mock_uow.household_members.is_member.return_value = False
        with pytest.raises(AuthorizationError):
            await service.ensure_member(uuid.uuid4(), uuid.uuid4())

    @pytest.mark.asyncio
    async def test_ensure_member_allows_members(self, service, mock_uow):
        mock_uow.household_members.is_member.return_value = True
        await service.ensure_member(uuid.uuid4(), uuid.uuid4())

    @pytest.mark.asyncio
    async def test_ensure_admin(self, service, mock_uow):
        mock_uow.household_members.is_admin.return_value = False
        with pytest.raises(AuthorizationError):
            await service.ensure_admin(uuid.uuid4(), uuid.uuid4())

    @pytest.mark.asyncio
    async def test_user_household_ids(self, service, mock_uow):
        memberships = [HouseholdMemberFactory(), HouseholdMemberFactory()]
        mock_uow.household_members.get_user_memberships.return_value = memberships

        ids = await service.get_user_household_ids(uuid.uuid4())

        assert ids == [m.household_id for m in memberships]


class TestHouseholdMemberService:
    @pytest.fixture
    def plan_usage_service(self) -> AsyncMock:
        return AsyncMock()

    @pytest.fixture
    def service(self, mock_uow, plan_usage_service) -> HouseholdMemberService:
        mock_uow.household_members.create.side_effect = persisted
        mock_uow.household_members.update.side_effect = lambda member: member
        return HouseholdMemberService(mock_uow, plan_usage_service=plan_usage_service)

    @pytest.mark.asyncio
    async def test_add_new_member(self, service, mock_uow, plan_usage_service):
        household_id, user_id, inviter = uuid.uuid4(), uuid.uuid4(), uuid.uuid4()
        mock_uow.household_members.get_membership.return_value = None

        member = await service.add_member(household_id, user_id, "member", invited_by=inviter)

        assert member.role == "member"
        assert member.invited_by == inviter
        plan_usage_service.ensure_can_add.assert_awaited_once_with(
            household_id, UsageType.HOUSEHOLD_MEMBERS
        )
        plan_usage_service.update_members_usage.assert_awaited_once_with(household_id)

    @pytest.mark.asyncio
    async def test_add_restores_removed_member(self, service, mock_uow):
        removed = HouseholdMemberFactory(role="member", deleted_at=datetime(2025, 1, 5))
        mock_uow.household_members.get_membership.return_value = removed

        member = await service.add_member(removed.household_id, removed.user_id, "admin")

        assert member is removed
        assert member.deleted_at is None
        assert member.role == "admin"
        mock_uow.household_members.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_add_existing_member_conflicts(self, service, mock_uow, plan_usage_service):
        existing = HouseholdMemberFactory()
        mock_uow.household_members.get_membership.return_value = existing

        with pytest.raises(ConflictError):
            await service.add_member(existing.household_id, existing.user_id, "member")
        plan_usage_service.ensure_can_add.assert_not_called()

    @pytest.mark.asyncio
    async def test_add_over_plan_limit(self, service, mock_uow, plan_usage_service):
        mock_uow.household_members.get_membership.return_value = None
        plan_usage_service.ensure_can_add.side_effect = PlanLimitExceededError(limit=3)

        with pytest.raises(PlanLimitExceededError):
            await service.add_member(uuid.uuid4(), uuid.uuid4(), "member")
        mock_uow.household_members.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_add_with_invalid_role(self, service, mock_uow):
        with pytest.raises(InvalidInputError):
            await service.add_member(uuid.uuid4(), uuid.uuid4(), "guest")
        mock_uow.household_members.get_membership.assert_not_called()

    @pytest.mark.asyncio
    async def test_remove_member(self, service, mock_uow, plan_usage_service):
        member = HouseholdMemberFactory()
        mock_uow.household_members.get_membership.return_value = member

        assert await service.remove_member(member.household_id, member.user_id) is True
        mock_uow.household_members.soft_delete.assert_awaited_once_with(member)
        plan_usage_service.update_members_usage.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_remove_non_member(self, service, mock_uow, plan_usage_service):
        mock_uow.household_members.get_membership.return_value = None

        assert await service.remove_member(uuid.uuid4(), uuid.uuid4()) is False
        plan_usage_service.update_members_usage.assert_not_called()

    @pytest.mark.asyncio
    async def test_update_role(self, service, mock_uow):
        member = HouseholdMemberFactory(role="member")
        mock_uow.household_members.get_membership.return_value = member

        updated = await service.update_member_role(member.household_id, member.user_id, "dashboard")

        assert updated.role == "dashboard"

    @pytest.mark.asyncio
    async def test_update_role_of_non_member(self, service, mock_uow):
        mock_uow.household_members.get_membership.return_value = None
        with pytest.raises(NotFoundError):
            await service.update_member_role(uuid.uuid4(), uuid.uuid4(), "admin")
