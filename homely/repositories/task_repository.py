"""Repositories for tasks, events and the completion history.

Tasks are templates; events are their dated occurrences. Read helpers
that feed API responses eager-load the category chain so DTO mapping
never triggers lazy loads on an async session.
"""

from __future__ import annotations

import uuid
from collections.abc import Sequence
from datetime import date

from sqlalchemy import and_, func, or_, select
from sqlalchemy.orm import selectinload

from homely.models.category import Category
from homely.models.enums import TaskStatus
from homely.models.household import HouseholdMember
from homely.models.task import Event, Task, TaskHistory
from homely.repositories.base import Repository

_HAS_INTERVAL = or_(
    Task.years_value > 0,
    Task.months_value > 0,
    Task.weeks_value > 0,
    Task.days_value > 0,
)
_NO_INTERVAL = and_(
    Task.years_value == 0,
    Task.months_value == 0,
    Task.weeks_value == 0,
    Task.days_value == 0,
)


def _task_details() -> list:
    return [selectinload(Task.category).selectinload(Category.category_type)]


def _event_details() -> list:
    return [
        selectinload(Event.task)
        .selectinload(Task.category)
        .selectinload(Category.category_type)
    ]


class TaskRepository(Repository[Task]):
    """Repository for Task entities."""

    model_class = Task

    _ORDER = (Task.name,)

    async def get_with_details(self, task_id: uuid.UUID) -> Task | None:
        """Get a live task with its category and category type loaded."""
        return await self.find_one(Task.id == task_id, options=_task_details())

    async def get_household_tasks(self, household_id: uuid.UUID) -> Sequence[Task]:
        return await self.find(
            Task.household_id == household_id,
            options=_task_details(),
            order_by=self._ORDER,
        )

    async def get_active_tasks(self, household_id: uuid.UUID) -> Sequence[Task]:
        return await self.find(
            Task.household_id == household_id,
            Task.is_active.is_(True),
            options=_task_details(),
            order_by=self._ORDER,
        )

    async def get_by_category(self, household_id: uuid.UUID, category_id: int) -> Sequence[Task]:
        return await self.find(
            Task.household_id == household_id,
            Task.category_id == category_id,
            options=_task_details(),
            order_by=self._ORDER,
        )

    async def get_recurring_tasks(self, household_id: uuid.UUID) -> Sequence[Task]:
        """Get live tasks with at least one positive interval component."""
        return await self.find(
            Task.household_id == household_id,
            _HAS_INTERVAL,
            options=_task_details(),
            order_by=self._ORDER,
        )

    async def get_one_time_tasks(self, household_id: uuid.UUID) -> Sequence[Task]:
        """Get live tasks whose interval components are all zero."""
        return await self.find(
            Task.household_id == household_id,
            _NO_INTERVAL,
            options=_task_details(),
            order_by=self._ORDER,
        )

    async def get_active_recurring_tasks(self, household_id: uuid.UUID) -> Sequence[Task]:
        """Get tasks eligible for event refills."""
        return await self.find(
            Task.household_id == household_id,
            Task.is_active.is_(True),
            _HAS_INTERVAL,
        )

    async def count_active_tasks(self, household_id: uuid.UUID) -> int:
        return await self.count_where(
            Task.household_id == household_id,
            Task.is_active.is_(True),
        )

    async def count_household_tasks(self, household_id: uuid.UUID) -> int:
        return await self.count_where(Task.household_id == household_id)

    async def count_by_category(self, household_id: uuid.UUID) -> dict[str | None, int]:
        """Count live tasks per category name; uncategorized tasks map to None."""
        stmt = (
            select(Category.name, func.count(Task.id))
            .select_from(Task)
            .outerjoin(Category, Task.category_id == Category.id)
            .where(Task.household_id == household_id, Task.deleted_at.is_(None))
            .group_by(Category.name)
        )
        result = await self.session.execute(stmt)
        return {name: count for name, count in result.all()}

    async def can_user_access(self, task_id: uuid.UUID, user_id: uuid.UUID) -> bool:
        """Whether the user has a live membership in the task's household."""
        stmt = (
            select(func.count())
            .select_from(Task)
            .join(HouseholdMember, HouseholdMember.household_id == Task.household_id)
            .where(
                Task.id == task_id,
                Task.deleted_at.is_(None),
                HouseholdMember.user_id == user_id,
                HouseholdMember.deleted_at.is_(None),
            )
        )
        result = await self.session.execute(stmt)
        return result.scalar_one() > 0


class EventRepository(Repository[Event]):
    """Repository for Event entities."""

    model_class = Event

    _ORDER = (Event.due_date, Event.title)

    async def get_with_details(self, event_id: uuid.UUID) -> Event | None:
        """Get a live event with its task and category chain loaded."""
        return await self.find_one(Event.id == event_id, options=_event_details())

    async def get_household_events(
        self,
        household_id: uuid.UUID,
        *,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> Sequence[Event]:
        """Get live events of a household, optionally within an inclusive date range."""
        conditions = [Event.household_id == household_id]
        if start_date is not None:
            conditions.append(Event.due_date >= start_date)
        if end_date is not None:
            conditions.append(Event.due_date <= end_date)
        return await self.find(*conditions, options=_event_details(), order_by=self._ORDER)

    async def get_assigned_events(self, user_id: uuid.UUID) -> Sequence[Event]:
        return await self.find(
            Event.assigned_to == user_id,
            options=_event_details(),
            order_by=self._ORDER,
        )

    async def get_by_status(self, household_id: uuid.UUID, status: str) -> Sequence[Event]:
        return await self.find(
            Event.household_id == household_id,
            Event.status == str(status),
            options=_event_details(),
            order_by=self._ORDER,
        )

    async def get_pending_until(
        self, household_ids: Sequence[uuid.UUID], end_date: date
    ) -> Sequence[Event]:
        """Get pending events due on or before end_date in any of the households."""
        if not household_ids:
            return []
        return await self.find(
            Event.household_id.in_(household_ids),
            Event.status == TaskStatus.PENDING.value,
            Event.due_date <= end_date,
            options=_event_details(),
            order_by=self._ORDER,
        )

    async def get_overdue_events(self, household_id: uuid.UUID, today: date) -> Sequence[Event]:
        return await self.find(
            Event.household_id == household_id,
            Event.status == TaskStatus.PENDING.value,
            Event.due_date < today,
            options=_event_details(),
            order_by=self._ORDER,
        )

    async def get_future_pending_for_task(
        self, task_id: uuid.UUID, from_date: date
    ) -> Sequence[Event]:
        """Get the task's pending events due on or after from_date."""
        return await self.find(
            Event.task_id == task_id,
            Event.status == TaskStatus.PENDING.value,
            Event.due_date >= from_date,
        )

    async def get_last_pending_for_task(self, task_id: uuid.UUID) -> Event | None:
        """Get the task's pending event with the furthest due date."""
        stmt = (
            self.query()
            .where(Event.task_id == task_id, Event.status == TaskStatus.PENDING.value)
            .order_by(Event.due_date.desc())
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def count_future_events(self, task_id: uuid.UUID, from_date: date) -> int:
        return await self.count_where(
            Event.task_id == task_id,
            Event.status == TaskStatus.PENDING.value,
            Event.due_date >= from_date,
        )

    async def count_pending(self, household_id: uuid.UUID) -> int:
        return await self.count_where(
            Event.household_id == household_id,
            Event.status == TaskStatus.PENDING.value,
        )

    async def count_overdue(self, household_id: uuid.UUID, today: date) -> int:
        return await self.count_where(
            Event.household_id == household_id,
            Event.status == TaskStatus.PENDING.value,
            Event.due_date < today,
        )

    async def count_completed_since(self, household_id: uuid.UUID, since: date) -> int:
        return await self.count_where(
            Event.household_id == household_id,
            Event.status == TaskStatus.COMPLETED.value,
            Event.completion_date >= since,
        )


class TaskHistoryRepository(Repository[TaskHistory]):
    """Repository for TaskHistory entities."""

    model_class = TaskHistory

    async def get_household_history(
        self, household_id: uuid.UUID, *, limit: int = 100
    ) -> Sequence[TaskHistory]:
        """Get the most recent completions for a household."""
        stmt = (
            self.query()
            .where(TaskHistory.household_id == household_id)
            .order_by(TaskHistory.completion_date.desc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return result.scalars().all()

