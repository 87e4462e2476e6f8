"""Unit tests for household, auth and dashboard API routes."""

import uuid
from datetime import UTC, datetime
from unittest.mock import AsyncMock

import pytest

from homely.api.dependencies import (
    get_access_token,
    get_auth_service,
    get_dashboard_service,
    get_household_member_service,
    get_household_service,
)
from homely.api.routes import auth, dashboard, households
from homely.api.schemas.auth import TokenResponse, UserInfo
from homely.api.schemas.dashboard import (
    DashboardStatistics,
    EventStatistics,
    PlanUsageStatistics,
    TaskStatistics,
    UpcomingEventsResponse,
    UpcomingEventsSummary,
)
from homely.api.schemas.household import HouseholdResponse
from homely.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    PlanLimitExceededError,
)
from homely.models.enums import SubscriptionStatus
from homely.tests.factories import HouseholdMemberFactory, UserProfileFactory

USER_ID = uuid.UUID("5a0f6c1e-6d6b-4d0c-9d7e-0e6e1f2b8a11")
HOUSEHOLD_ID = uuid.UUID("0b7c1c0e-3f3a-4a4e-8f1d-2f0a9c6e2d10")


@pytest.fixture
def household_service() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def member_service() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def auth_service() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def dashboard_service() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def client(route_client, household_service, member_service, auth_service, dashboard_service):
    return route_client(
        households.router,
        auth.router,
        dashboard.router,
        user_id=USER_ID,
        overrides={
            get_household_service: lambda: household_service,
            get_household_member_service: lambda: member_service,
            get_auth_service: lambda: auth_service,
            get_dashboard_service: lambda: dashboard_service,
            get_access_token: lambda: "access-1",
        },
    )


# =============================================================================
# Households
# =============================================================================


class TestHouseholdRoutes:
    def test_my_households(self, client, household_service):
        household_service.get_user_households.return_value = [
            HouseholdResponse(
                id=HOUSEHOLD_ID,
                name="Dom",
                plan_type_id=1,
                plan_type_name="Darmowy",
                subscription_status=SubscriptionStatus.FREE,
                member_count=2,
            )
        ]

        response = client.get("/api/households/my")

        assert response.status_code == 200
        assert response.json()[0]["plan_type_name"] == "Darmowy"
        household_service.get_user_households.assert_awaited_once_with(USER_ID)

    def test_get_household_of_other_user(self, client, household_service):
        household_service.ensure_member.side_effect = AuthorizationError(
            "You do not have access to this household"
        )
        response = client.get(f"/api/households/{HOUSEHOLD_ID}")
        assert response.status_code == 403
        household_service.get_household.assert_not_called()

    def test_add_member_requires_admin(self, client, household_service, member_service):
        household_service.ensure_admin.side_effect = AuthorizationError(
            "Household admin role required"
        )

        response = client.post(
            f"/api/households/{HOUSEHOLD_ID}/members", json={"user_id": str(uuid.uuid4())}
        )

        assert response.status_code == 403
        member_service.add_member.assert_not_called()

    def test_add_member(self, client, member_service):
        new_user = UserProfileFactory(first_name="Ola", last_name="Nowak")
        member_service.add_member.return_value = HouseholdMemberFactory(
            user=new_user, role="dashboard"
        )

        response = client.post(
            f"/api/households/{HOUSEHOLD_ID}/members",
            json={"user_id": str(new_user.user_id), "role": "dashboard"},
        )

        assert response.status_code == 201
        body = response.json()
        assert (body["first_name"], body["role"]) == ("Ola", "dashboard")
        assert member_service.add_member.await_args.kwargs == {"invited_by": USER_ID}

    @pytest.mark.parametrize(
        ("error", "status_code"),
        [(ConflictError("already a member"), 409), (PlanLimitExceededError(limit=3), 400)],
    )
    def test_add_member_errors(self, client, member_service, error, status_code):
        member_service.add_member.side_effect = error
        response = client.post(
            f"/api/households/{HOUSEHOLD_ID}/members", json={"user_id": str(uuid.uuid4())}
        )
        assert response.status_code == status_code

    def test_invalid_role_is_422(self, client, member_service):
        response = client.put(
            f"/api/households/{HOUSEHOLD_ID}/members/{uuid.uuid4()}/role", json={"role": "owner"}
        )
        assert response.status_code == 422
        member_service.update_member_role.assert_not_called()

    def test_remove_non_member_is_404(self, client, member_service):
        member_service.remove_member.return_value = False
        response = client.delete(f"/api/households/{HOUSEHOLD_ID}/members/{uuid.uuid4()}")
        assert response.status_code == 404


# =============================================================================
# Auth
# =============================================================================


class TestAuthRoutes:
    def test_login(self, client, auth_service):
        auth_service.login.return_value = TokenResponse(
            access_token="access-1",
            refresh_token="refresh-1",
            expires_in=3600,
            user=UserInfo(id=USER_ID, email="anna@example.com"),
        )

        response = client.post(
            "/api/auth/login", json={"email": "anna@example.com", "password": "pw"}
        )

        assert response.status_code == 200
        assert response.json()["token_type"] == "bearer"
        auth_service.login.assert_awaited_once_with("anna@example.com", "pw")

    def test_login_rejected(self, client, auth_service):
        auth_service.login.side_effect = AuthenticationError(
            "Invalid email or password", error_code="INVALID_CREDENTIALS"
        )
        response = client.post(
            "/api/auth/login", json={"email": "anna@example.com", "password": "bad"}
        )
        assert response.status_code == 401
        assert response.json()["error"]["code"] == "INVALID_CREDENTIALS"

    def test_login_with_malformed_email(self, client, auth_service):
        response = client.post("/api/auth/login", json={"email": "anna", "password": "pw"})
        assert response.status_code == 422
        auth_service.login.assert_not_called()

    def test_refresh_requires_token(self, client):
        response = client.post("/api/auth/refresh", json={"refresh_token": ""})
        assert response.status_code == 422

    def test_logout(self, client, auth_service):
        response = client.post("/api/auth/logout")
        assert response.json()["success"] is True
        auth_service.logout.assert_awaited_once_with("access-1")

    def test_me(self, client, auth_service):
        auth_service.get_current_user.return_value = UserInfo(id=USER_ID, first_name="Anna")
        response = client.get("/api/auth/me")
        assert response.json()["first_name"] == "Anna"


# =============================================================================
# Dashboard
# =============================================================================


class TestDashboardRoutes:
    def test_upcoming_events(self, client, dashboard_service):
        dashboard_service.get_upcoming_events.return_value = UpcomingEventsResponse(
            data=[], summary=UpcomingEventsSummary(overdue=1)
        )

        response = client.get("/api/dashboard/upcoming-events", params={"days": 14})

        assert response.json()["summary"] == {"overdue": 1, "today": 0, "this_week": 0}
        dashboard_service.get_upcoming_events.assert_awaited_once_with(
            USER_ID, household_id=None, days=14
        )

    def test_statistics_checks_membership(self, client, dashboard_service, household_service):
        dashboard_service.get_statistics.return_value = DashboardStatistics(
            events=EventStatistics(pending=3),
            tasks=TaskStatistics(total=2, by_category={"Auto": 2}),
            plan_usage=PlanUsageStatistics(tasks_used=2),
        )

        response = client.get(
            "/api/dashboard/statistics", params={"household_id": str(HOUSEHOLD_ID)}
        )

        assert response.json()["plan_usage"]["tasks_limit"] == 5
        household_service.ensure_member.assert_awaited_once_with(HOUSEHOLD_ID, USER_ID)


def test_timestamps_are_serialized(client, household_service):
    household_service.get_household.return_value = HouseholdResponse(
        id=HOUSEHOLD_ID,
        name="Dom",
        plan_type_id=1,
        subscription_status=SubscriptionStatus.ACTIVE,
        created_at=datetime(2025, 1, 1, 12, 0, tzinfo=UTC),
    )
    response = client.get(f"/api/households/{HOUSEHOLD_ID}")
    assert response.json()["created_at"].startswith("2025-01-01T12:00:00")
