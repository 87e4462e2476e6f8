"""Pydantic schemas for dashboard endpoints."""

from datetime import date
from uuid import UUID

from pydantic import BaseModel, Field

from homely.models.enums import Priority, TaskStatus, UrgencyStatus


class DashboardEvent(BaseModel):
    """Upcoming event enriched for the dashboard list."""

    id: UUID
    due_date: date
    title: str
    status: TaskStatus
    priority: Priority
    urgency_status: UrgencyStatus
    days_until_due: int
    priority_score: int
    household_id: UUID
    household_name: str | None = None
    task_name: str = "Unnamed Task"
    category_name: str = "Uncategorized"
    category_type_name: str = "General"
    assigned_to: UUID | None = None
    assigned_to_name: str = "Unassigned"


class UpcomingEventsSummary(BaseModel):
    overdue: int = 0
    today: int = 0
    this_week: int = 0


class UpcomingEventsResponse(BaseModel):
    data: list[DashboardEvent]
    summary: UpcomingEventsSummary


class EventStatistics(BaseModel):
    pending: int = 0
    overdue: int = 0
    completed_this_month: int = 0


class TaskStatistics(BaseModel):
    total: int = 0
    by_category: dict[str, int] = Field(default_factory=dict)


class PlanUsageStatistics(BaseModel):
    tasks_used: int = 0
    tasks_limit: int = 5
    members_used: int = 0
    members_limit: int = 3


class DashboardStatistics(BaseModel):
    events: EventStatistics
    tasks: TaskStatistics
    plan_usage: PlanUsageStatistics
