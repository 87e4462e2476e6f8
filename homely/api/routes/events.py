"""Event (scheduled occurrence) endpoints.

Endpoints:
- GET /api/events - Events of a household, by date range or status
- GET /api/events/upcoming - Pending events due in the next days
- GET /api/events/overdue - Pending events past their due date
- GET /api/events/assigned - Events assigned to the authenticated user
- GET /api/events/{event_id} - One event
- POST /api/events - Schedule an event
- PUT /api/events/{event_id} - Update an event
- DELETE /api/events/{event_id} - Soft delete an event
- POST /api/events/{event_id}/complete - Mark completed
- POST /api/events/{event_id}/postpone - Move to a later date
- POST /api/events/{event_id}/cancel - Cancel with a reason
"""

from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from homely.api.dependencies import get_current_user_id, get_event_service, get_household_service
from homely.api.schemas.event import (
    CancelEventRequest,
    CompleteEventRequest,
    EventCreate,
    EventResponse,
    EventUpdate,
    PostponeEventRequest,
)
from homely.models.enums import TaskStatus
from homely.services.event_service import EventService
from homely.services.household_service import HouseholdService

router = APIRouter(prefix="/api/events", tags=["events"])


async def _ensure_event_access(
    event_id: UUID, user_id: UUID, events: EventService, households: HouseholdService
) -> None:
    household_id = await events.get_event_household_id(event_id)
    await households.ensure_member(household_id, user_id)


@router.get("", response_model=list[EventResponse])
async def list_events(
    household_id: UUID = Query(...),
    start_date: date | None = Query(None),
    end_date: date | None = Query(None),
    status_filter: TaskStatus | None = Query(None, alias="status"),
    user_id: UUID = Depends(get_current_user_id),
    service: EventService = Depends(get_event_service),
    households: HouseholdService = Depends(get_household_service),
) -> list[EventResponse]:
    """List events of a household.

    A status filter takes precedence over the date range.
    """
    await households.ensure_member(household_id, user_id)
    if status_filter is not None:
        return await service.get_events_by_status(household_id, status_filter)
    return await service.get_household_events(household_id, start_date, end_date)


@router.get("/upcoming", response_model=list[EventResponse])
async def list_upcoming_events(
    household_id: UUID = Query(...),
    days: int = Query(30, ge=1, le=365),
    user_id: UUID = Depends(get_current_user_id),
    service: EventService = Depends(get_event_service),
    households: HouseholdService = Depends(get_household_service),
) -> list[EventResponse]:
    await households.ensure_member(household_id, user_id)
    return await service.get_upcoming_events(household_id, days)


@router.get("/overdue", response_model=list[EventResponse])
async def list_overdue_events(
    household_id: UUID = Query(...),
    user_id: UUID = Depends(get_current_user_id),
    service: EventService = Depends(get_event_service),
    households: HouseholdService = Depends(get_household_service),
) -> list[EventResponse]:
    await households.ensure_member(household_id, user_id)
    return await service.get_overdue_events(household_id)


@router.get("/assigned", response_model=list[EventResponse])
async def list_assigned_events(
    user_id: UUID = Depends(get_current_user_id),
    service: EventService = Depends(get_event_service),
) -> list[EventResponse]:
    return await service.get_assigned_events(user_id)


@router.get("/{event_id}", response_model=EventResponse)
async def get_event(
    event_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    service: EventService = Depends(get_event_service),
    households: HouseholdService = Depends(get_household_service),
) -> EventResponse:
    event = await service.get_event(event_id)
    await households.ensure_member(event.household_id, user_id)
    return event


@router.post("", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
async def create_event(
    request: EventCreate,
    user_id: UUID = Depends(get_current_user_id),
    service: EventService = Depends(get_event_service),
    households: HouseholdService = Depends(get_household_service),
) -> EventResponse:
    await households.ensure_member(request.household_id, user_id)
    return await service.create_event(request, created_by=user_id)


@router.put("/{event_id}", response_model=EventResponse)
async def update_event(
    event_id: UUID,
    request: EventUpdate,
    user_id: UUID = Depends(get_current_user_id),
    service: EventService = Depends(get_event_service),
    households: HouseholdService = Depends(get_household_service),
) -> EventResponse:
    await _ensure_event_access(event_id, user_id, service, households)
    return await service.update_event(event_id, request)


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_event(
    event_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    service: EventService = Depends(get_event_service),
    households: HouseholdService = Depends(get_household_service),
) -> None:
    await _ensure_event_access(event_id, user_id, service, households)
    await service.delete_event(event_id)


@router.post("/{event_id}/complete", response_model=EventResponse)
async def complete_event(
    event_id: UUID,
    request: CompleteEventRequest,
    user_id: UUID = Depends(get_current_user_id),
    service: EventService = Depends(get_event_service),
    households: HouseholdService = Depends(get_household_service),
) -> EventResponse:
    """Mark an event completed.

    Raises:
        InvalidStatusTransitionError: 400 if the event is already completed
    """
    await _ensure_event_access(event_id, user_id, service, households)
    return await service.complete_event(event_id, request, completed_by=user_id)


@router.post("/{event_id}/postpone", response_model=EventResponse)
async def postpone_event(
    event_id: UUID,
    request: PostponeEventRequest,
    user_id: UUID = Depends(get_current_user_id),
    service: EventService = Depends(get_event_service),
    households: HouseholdService = Depends(get_household_service),
) -> EventResponse:
    """Postpone an event to a future date.

    Raises:
        InvalidStatusTransitionError: 400 if the event is completed
        ValidationError: 400 if the new date is not in the future
    """
    await _ensure_event_access(event_id, user_id, service, households)
    return await service.postpone_event(event_id, request)


@router.post("/{event_id}/cancel", response_model=EventResponse)
async def cancel_event(
    event_id: UUID,
    request: CancelEventRequest,
    user_id: UUID = Depends(get_current_user_id),
    service: EventService = Depends(get_event_service),
    households: HouseholdService = Depends(get_household_service),
) -> EventResponse:
    await _ensure_event_access(event_id, user_id, service, households)
    return await service.cancel_event(event_id, request)
