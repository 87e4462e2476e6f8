"""Dashboard endpoints.

Endpoints:
- GET /api/dashboard/upcoming-events - Pending events across the user's households
- GET /api/dashboard/statistics - Counters for one household
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query

from homely.api.dependencies import (
    get_current_user_id,
    get_dashboard_service,
    get_household_service,
)
from homely.api.schemas.dashboard import DashboardStatistics, UpcomingEventsResponse
from homely.services.dashboard_service import DashboardService
from homely.services.household_service import HouseholdService

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("/upcoming-events", response_model=UpcomingEventsResponse)
async def get_upcoming_events(
    household_id: UUID | None = Query(None, description="Restrict to one household"),
    days: int = Query(7, ge=1, le=365, description="Look-ahead window in days"),
    user_id: UUID = Depends(get_current_user_id),
    service: DashboardService = Depends(get_dashboard_service),
) -> UpcomingEventsResponse:
    """Pending events due within ``days``, overdue included, most pressing first."""
    return await service.get_upcoming_events(user_id, household_id=household_id, days=days)


@router.get("/statistics", response_model=DashboardStatistics)
async def get_statistics(
    household_id: UUID = Query(...),
    user_id: UUID = Depends(get_current_user_id),
    service: DashboardService = Depends(get_dashboard_service),
    households: HouseholdService = Depends(get_household_service),
) -> DashboardStatistics:
    await households.ensure_member(household_id, user_id)
    return await service.get_statistics(household_id)
