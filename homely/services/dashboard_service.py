"""Dashboard aggregation: upcoming events and household statistics."""

from __future__ import annotations

import uuid
from collections.abc import Callable
from datetime import date, timedelta
from typing import TYPE_CHECKING

from homely.api.schemas.dashboard import (
    DashboardEvent,
    DashboardStatistics,
    EventStatistics,
    PlanUsageStatistics,
    TaskStatistics,
    UpcomingEventsResponse,
    UpcomingEventsSummary,
)
from homely.core.exceptions import AuthorizationError
from homely.core.logging import get_logger
from homely.models.enums import Priority, TaskStatus
from homely.models.task import Event
from homely.services.urgency import (
    THIS_WEEK_DAYS,
    calculate_priority_score,
    calculate_urgency_status,
    days_until_due,
    today_utc,
)

if TYPE_CHECKING:
    from homely.repositories.unit_of_work import UnitOfWork

logger = get_logger(__name__)

DEFAULT_TASKS_LIMIT = 5
DEFAULT_MEMBERS_LIMIT = 3


class DashboardService:
    """Builds the dashboard views for an authenticated user."""

    def __init__(self, uow: UnitOfWork, today_provider: Callable[[], date] | None = None) -> None:
        self.uow = uow
        self._today = today_provider or today_utc

    def _to_dashboard_event(
        self,
        event: Event,
        today: date,
        household_names: dict[uuid.UUID, str],
        user_names: dict[uuid.UUID, str],
    ) -> DashboardEvent:
        task = event.task
        category = task.category if task is not None else None
        category_type = category.category_type if category is not None else None
        assigned_name = user_names.get(event.assigned_to) if event.assigned_to else None
        return DashboardEvent(
            id=event.id,
            due_date=event.due_date,
            title=event.title,
            status=TaskStatus(event.status),
            priority=Priority(event.priority),
            urgency_status=calculate_urgency_status(event.due_date, today),
            days_until_due=days_until_due(event.due_date, today),
            priority_score=calculate_priority_score(event.due_date, event.priority, today),
            household_id=event.household_id,
            household_name=household_names.get(event.household_id),
            task_name=task.name if task is not None else (event.title or "Unnamed Task"),
            category_name=category.name if category is not None else "Uncategorized",
            category_type_name=category_type.name if category_type is not None else "General",
            assigned_to=event.assigned_to,
            assigned_to_name=assigned_name or "Unassigned",
        )

    async def get_upcoming_events(
        self,
        user_id: uuid.UUID,
        household_id: uuid.UUID | None = None,
        days: int = 7,
    ) -> UpcomingEventsResponse:
        """Pending events due within ``days`` (overdue included), most pressing first.

        Args:
            user_id: Authenticated user; only their households are searched.
            household_id: Restrict to one of the user's households.
            days: Look-ahead window in days.

        Raises:
            AuthorizationError: household_id is not one of the user's households.
        """
        households = await self.uow.households.get_user_households(user_id)
        household_names = {h.id: h.name for h in households}
        if household_id is not None:
            if household_id not in household_names:
                raise AuthorizationError("You do not have access to this household")
            household_ids = [household_id]
        else:
            household_ids = list(household_names)

        today = self._today()
        events = await self.uow.events.get_pending_until(
            household_ids, today + timedelta(days=days)
        )
        user_names = await self.uow.user_profiles.get_names(
            [e.assigned_to for e in events if e.assigned_to]
        )

        items = [
            self._to_dashboard_event(event, today, household_names, user_names)
            for event in events
        ]
        items.sort(key=lambda item: (-item.priority_score, item.due_date))

        week_end = today + timedelta(days=THIS_WEEK_DAYS)
        summary = UpcomingEventsSummary(
            overdue=sum(1 for e in events if e.due_date < today),
            today=sum(1 for e in events if e.due_date == today),
            this_week=sum(1 for e in events if today <= e.due_date <= week_end),
        )
        logger.info(
            f"Dashboard summary for user {user_id} - Overdue: {summary.overdue}, "
            f"Today: {summary.today}, ThisWeek: {summary.this_week}"
        )
        return UpcomingEventsResponse(data=items, summary=summary)

    async def get_statistics(self, household_id: uuid.UUID) -> DashboardStatistics:
        """Event, task and plan usage counters for one household."""
        today = self._today()
        first_of_month = today.replace(day=1)

        events = EventStatistics(
            pending=await self.uow.events.count_pending(household_id),
            overdue=await self.uow.events.count_overdue(household_id, today),
            completed_this_month=await self.uow.events.count_completed_since(
                household_id, first_of_month
            ),
        )

        by_category: dict[str, int] = {}
        for name, count in (await self.uow.tasks.count_by_category(household_id)).items():
            key = name or "Uncategorized"
            by_category[key] = by_category.get(key, 0) + count
        total_tasks = sum(by_category.values())

        household = await self.uow.households.get_with_plan(household_id)
        plan = household.plan_type if household is not None else None
        tasks_limit = plan.max_tasks if plan is not None else None
        members_limit = plan.max_household_members if plan is not None else None

        statistics = DashboardStatistics(
            events=events,
            tasks=TaskStatistics(total=total_tasks, by_category=by_category),
            plan_usage=PlanUsageStatistics(
                tasks_used=total_tasks,
                tasks_limit=tasks_limit if tasks_limit is not None else DEFAULT_TASKS_LIMIT,
                members_used=await self.uow.household_members.count_household_members(
                    household_id
                ),
                members_limit=(
                    members_limit if members_limit is not None else DEFAULT_MEMBERS_LIMIT
                ),
            ),
        )
        logger.info(
            f"Dashboard statistics for household {household_id} - "
            f"Pending: {events.pending}, Overdue: {events.overdue}, "
            f"Completed: {events.completed_this_month}, Tasks: {total_tasks}"
        )
        return statistics
