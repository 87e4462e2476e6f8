"""Maintenance endpoints for keeping event series filled.

Endpoints:
- POST /api/maintenance/refill-events?household_id=... - Refill one household
- POST /api/maintenance/refill-events/all - Refill every household
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query

from homely.api.dependencies import (
    get_current_user_id,
    get_event_service,
    get_household_service,
    require_system_developer,
)
from homely.api.schemas.health import RefillEventsResponse
from homely.core.logging import get_logger
from homely.services.event_service import EventService
from homely.services.household_service import HouseholdService

logger = get_logger(__name__)

router = APIRouter(prefix="/api/maintenance", tags=["maintenance"])


@router.post("/refill-events", response_model=RefillEventsResponse)
async def refill_household_events(
    household_id: UUID = Query(...),
    user_id: UUID = Depends(get_current_user_id),
    service: EventService = Depends(get_event_service),
    households: HouseholdService = Depends(get_household_service),
) -> RefillEventsResponse:
    """Extend recurring series whose last pending event is too close."""
    await households.ensure_member(household_id, user_id)
    logger.info(f"Starting event refill for household {household_id}")
    created = await service.refill_household_events(household_id)
    return RefillEventsResponse(household_id=household_id, events_created=created)


@router.post(
    "/refill-events/all",
    response_model=RefillEventsResponse,
    dependencies=[Depends(require_system_developer)],
)
async def refill_all_events(
    service: EventService = Depends(get_event_service),
) -> RefillEventsResponse:
    logger.info("Starting system-wide event refill")
    households_processed, created = await service.refill_all_households()
    return RefillEventsResponse(households_processed=households_processed, events_created=created)
