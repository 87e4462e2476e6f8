"""Unit tests for event and maintenance API routes.

Tests cover:
- GET /api/events - Status filter precedence over the date range
- POST /api/events/{event_id}/complete|postpone|cancel - Lifecycle actions
- POST /api/maintenance/refill-events - Per-household refill
- POST /api/maintenance/refill-events/all - System developer only
"""

import uuid
from datetime import date
from unittest.mock import AsyncMock

import pytest

from homely.api.dependencies import (
    get_event_service,
    get_household_service,
    get_token_claims,
)
from homely.api.routes import events, maintenance
from homely.api.schemas.event import EventResponse
from homely.core.exceptions import InvalidStatusTransitionError, ValidationError
from homely.models.enums import Priority, TaskStatus, UrgencyStatus

USER_ID = uuid.UUID("5a0f6c1e-6d6b-4d0c-9d7e-0e6e1f2b8a11")
HOUSEHOLD_ID = uuid.UUID("0b7c1c0e-3f3a-4a4e-8f1d-2f0a9c6e2d10")


def event_response(**overrides) -> EventResponse:
    data = {
        "id": uuid.uuid4(),
        "household_id": HOUSEHOLD_ID,
        "due_date": date(2025, 3, 20),
        "title": "Oil change",
        "status": TaskStatus.PENDING,
        "priority": Priority.MEDIUM,
        "urgency_status": UrgencyStatus.THIS_WEEK,
        "days_until_due": 5,
    }
    data.update(overrides)
    return EventResponse(**data)


@pytest.fixture
def event_service() -> AsyncMock:
    service = AsyncMock()
    service.get_event_household_id.return_value = HOUSEHOLD_ID
    return service


@pytest.fixture
def household_service() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def client(route_client, event_service, household_service):
    return route_client(
        events.router,
        maintenance.router,
        user_id=USER_ID,
        overrides={
            get_event_service: lambda: event_service,
            get_household_service: lambda: household_service,
        },
    )


# =============================================================================
# Queries
# =============================================================================


class TestListEvents:
    def test_status_filter_wins(self, client, event_service):
        event_service.get_events_by_status.return_value = [event_response()]

        response = client.get(
            "/api/events",
            params={
                "household_id": str(HOUSEHOLD_ID),
                "status": "pending",
                "start_date": "2025-01-01",
            },
        )

        assert response.status_code == 200
        event_service.get_events_by_status.assert_awaited_once_with(
            HOUSEHOLD_ID, TaskStatus.PENDING
        )
        event_service.get_household_events.assert_not_called()

    def test_date_range(self, client, event_service):
        event_service.get_household_events.return_value = []

        client.get(
            "/api/events",
            params={
                "household_id": str(HOUSEHOLD_ID),
                "start_date": "2025-01-01",
                "end_date": "2025-01-31",
            },
        )

        event_service.get_household_events.assert_awaited_once_with(
            HOUSEHOLD_ID, date(2025, 1, 1), date(2025, 1, 31)
        )

    def test_unknown_status_rejected(self, client):
        response = client.get(
            "/api/events", params={"household_id": str(HOUSEHOLD_ID), "status": "done"}
        )
        assert response.status_code == 422

    def test_upcoming_window_bounds(self, client):
        response = client.get(
            "/api/events/upcoming", params={"household_id": str(HOUSEHOLD_ID), "days": 0}
        )
        assert response.status_code == 422

    def test_assigned_to_current_user(self, client, event_service):
        event_service.get_assigned_events.return_value = [event_response(assigned_to=USER_ID)]

        response = client.get("/api/events/assigned")

        assert response.json()[0]["assigned_to"] == str(USER_ID)
        event_service.get_assigned_events.assert_awaited_once_with(USER_ID)


# =============================================================================
# Lifecycle
# =============================================================================


class TestLifecycle:
    def test_complete(self, client, event_service, household_service):
        event_id = uuid.uuid4()
        event_service.complete_event.return_value = event_response(
            id=event_id, status=TaskStatus.COMPLETED, completion_date=date(2025, 3, 15)
        )

        response = client.post(
            f"/api/events/{event_id}/complete", json={"completion_notes": "Done"}
        )

        assert response.status_code == 200
        assert response.json()["status"] == "completed"
        household_service.ensure_member.assert_awaited_once_with(HOUSEHOLD_ID, USER_ID)
        request = event_service.complete_event.await_args.args[1]
        assert request.completion_notes == "Done"
        assert request.completion_date is None
        assert event_service.complete_event.await_args.kwargs == {"completed_by": USER_ID}

    def test_complete_twice(self, client, event_service):
        event_service.complete_event.side_effect = InvalidStatusTransitionError(
            "Event is already completed", current_status="completed", target_status="completed"
        )

        response = client.post(f"/api/events/{uuid.uuid4()}/complete", json={})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_STATUS_TRANSITION"

    def test_postpone_requires_reason(self, client, event_service):
        response = client.post(
            f"/api/events/{uuid.uuid4()}/postpone", json={"new_due_date": "2025-04-01"}
        )
        assert response.status_code == 422
        event_service.postpone_event.assert_not_called()

    def test_postpone_into_past(self, client, event_service):
        event_service.postpone_event.side_effect = ValidationError(
            "New due date must be in the future"
        )

        response = client.post(
            f"/api/events/{uuid.uuid4()}/postpone",
            json={"new_due_date": "2020-01-01", "reason": "Away"},
        )

        assert response.status_code == 400

    def test_cancel(self, client, event_service):
        event_id = uuid.uuid4()
        event_service.cancel_event.return_value = event_response(
            id=event_id, status=TaskStatus.CANCELLED, notes="[CANCELLED] Sold the car"
        )

        response = client.post(f"/api/events/{event_id}/cancel", json={"reason": "Sold the car"})

        assert response.json()["notes"] == "[CANCELLED] Sold the car"

    def test_delete(self, client, event_service):
        event_id = uuid.uuid4()
        response = client.delete(f"/api/events/{event_id}")
        assert response.status_code == 204
        event_service.delete_event.assert_awaited_once_with(event_id)


# =============================================================================
# Maintenance
# =============================================================================


class TestMaintenance:
    def test_refill_household(self, client, event_service, household_service):
        event_service.refill_household_events.return_value = 12

        response = client.post(
            "/api/maintenance/refill-events", params={"household_id": str(HOUSEHOLD_ID)}
        )

        assert response.json() == {
            "household_id": str(HOUSEHOLD_ID),
            "households_processed": 1,
            "events_created": 12,
        }
        household_service.ensure_member.assert_awaited_once_with(HOUSEHOLD_ID, USER_ID)

    def test_refill_all_requires_system_developer(self, client, event_service):
        response = client.post("/api/maintenance/refill-events/all")

        assert response.status_code == 403
        event_service.refill_all_households.assert_not_called()

    def test_refill_all(self, client, event_service):
        client.app.dependency_overrides[get_token_claims] = lambda: {
            "app_metadata": {"roles": ["system_developer"]}
        }
        event_service.refill_all_households.return_value = (3, 40)

        response = client.post("/api/maintenance/refill-events/all")

        assert response.status_code == 200
        assert response.json() == {
            "household_id": None,
            "households_processed": 3,
            "events_created": 40,
        }
