"""Task template management.

A task is a chore definition. Tasks with a recurrence interval are
expanded into pending events by EventService; creating a task or changing
its interval (re)generates that series.
"""

from __future__ import annotations

import uuid
from collections.abc import Sequence
from typing import TYPE_CHECKING

from homely.api.schemas.common import PaginationMetadata
from homely.api.schemas.task import (
    TaskCategoryInfo,
    TaskCreate,
    TaskInterval,
    TaskListResponse,
    TaskResponse,
    TaskUpdate,
    TaskUserInfo,
)
from homely.core.exceptions import NotFoundError, ValidationError
from homely.core.logging import get_logger
from homely.models.enums import Priority, UsageType
from homely.models.task import Task
from homely.services.event_service import EventService
from homely.services.plan_usage_service import PlanUsageService

if TYPE_CHECKING:
    from homely.repositories.unit_of_work import UnitOfWork

logger = get_logger(__name__)

MAX_PAGE_SIZE = 100


def task_interval(task: Task) -> TaskInterval | None:
    """Return the task's interval, or None for a one-time task."""
    if not task.has_interval:
        return None
    years, months, weeks, days = task.interval_components
    return TaskInterval(years=years, months=months, weeks=weeks, days=days)


class TaskService:
    """Service for task template CRUD and queries."""

    def __init__(
        self,
        uow: UnitOfWork,
        event_service: EventService | None = None,
        plan_usage_service: PlanUsageService | None = None,
    ) -> None:
        self.uow = uow
        self.event_service = event_service or EventService(uow)
        self.plan_usage_service = plan_usage_service or PlanUsageService(uow)

    async def _to_responses(self, tasks: Sequence[Task]) -> list[TaskResponse]:
        user_ids = [t.assigned_to for t in tasks if t.assigned_to] + [t.created_by for t in tasks]
        names = await self.uow.user_profiles.get_names(user_ids)

        def user_info(user_id: uuid.UUID | None) -> TaskUserInfo | None:
            if user_id is None:
                return None
            return TaskUserInfo(id=user_id, name=names.get(user_id))

        responses = []
        for task in tasks:
            category = None
            if task.category is not None:
                category_type = task.category.category_type
                category = TaskCategoryInfo(
                    id=task.category.id,
                    name=task.category.name,
                    category_type_id=task.category.category_type_id,
                    category_type_name=category_type.name if category_type else None,
                )
            responses.append(
                TaskResponse(
                    id=task.id,
                    household_id=task.household_id,
                    name=task.name,
                    description=task.description,
                    interval=task_interval(task),
                    last_date=task.last_date,
                    priority=Priority(task.priority),
                    notes=task.notes,
                    is_active=task.is_active,
                    category=category,
                    assigned_to=user_info(task.assigned_to),
                    created_by=user_info(task.created_by),
                    created_at=task.created_at,
                    updated_at=task.updated_at,
                )
            )
        return responses

    async def _to_response(self, task: Task) -> TaskResponse:
        return (await self._to_responses([task]))[0]

    async def _get_task_or_raise(self, task_id: uuid.UUID) -> Task:
        task = await self.uow.tasks.get_with_details(task_id)
        if task is None:
            raise NotFoundError(resource="Task", resource_id=task_id)
        return task

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    async def get_household_tasks(self, household_id: uuid.UUID) -> list[TaskResponse]:
        return await self._to_responses(await self.uow.tasks.get_household_tasks(household_id))

    async def get_active_tasks(self, household_id: uuid.UUID) -> list[TaskResponse]:
        return await self._to_responses(await self.uow.tasks.get_active_tasks(household_id))

    async def get_tasks_by_category(
        self, household_id: uuid.UUID, category_id: int
    ) -> list[TaskResponse]:
        tasks = await self.uow.tasks.get_by_category(household_id, category_id)
        return await self._to_responses(tasks)

    async def get_recurring_tasks(self, household_id: uuid.UUID) -> list[TaskResponse]:
        return await self._to_responses(await self.uow.tasks.get_recurring_tasks(household_id))

    async def get_one_time_tasks(self, household_id: uuid.UUID) -> list[TaskResponse]:
        return await self._to_responses(await self.uow.tasks.get_one_time_tasks(household_id))

    async def list_tasks(
        self,
        household_id: uuid.UUID,
        *,
        active_only: bool = True,
        category_id: int | None = None,
        recurring_only: bool = False,
        one_time_only: bool = False,
        page: int = 1,
        limit: int = 20,
    ) -> TaskListResponse:
        """List tasks with one filter applied, then paginate.

        Filters are exclusive and checked in order: recurring_only,
        one_time_only, category_id, active_only.

        Raises:
            ValidationError: Both recurring_only and one_time_only were set,
                or page/limit are out of range.
        """
        if recurring_only and one_time_only:
            raise ValidationError(
                "Cannot filter for both recurring and one-time tasks simultaneously"
            )
        if page < 1:
            raise ValidationError("Page must be greater than 0")
        if limit < 1 or limit > MAX_PAGE_SIZE:
            raise ValidationError(f"Limit must be between 1 and {MAX_PAGE_SIZE}")

        if recurring_only:
            tasks = await self.uow.tasks.get_recurring_tasks(household_id)
        elif one_time_only:
            tasks = await self.uow.tasks.get_one_time_tasks(household_id)
        elif category_id is not None:
            tasks = await self.uow.tasks.get_by_category(household_id, category_id)
        elif active_only:
            tasks = await self.uow.tasks.get_active_tasks(household_id)
        else:
            tasks = await self.uow.tasks.get_household_tasks(household_id)

        total = len(tasks)
        start = (page - 1) * limit
        page_items = list(tasks[start : start + limit])
        return TaskListResponse(
            data=await self._to_responses(page_items),
            pagination=PaginationMetadata.build(page=page, limit=limit, total_items=total),
        )

    async def get_task(self, task_id: uuid.UUID) -> TaskResponse:
        """Get one task.

        Raises:
            NotFoundError: The task does not exist or was deleted.
        """
        return await self._to_response(await self._get_task_or_raise(task_id))

    async def can_user_access_task(self, task_id: uuid.UUID, user_id: uuid.UUID) -> bool:
        return await self.uow.tasks.can_user_access(task_id, user_id)

    async def count_active_tasks(self, household_id: uuid.UUID) -> int:
        return await self.uow.tasks.count_active_tasks(household_id)

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    async def create_task(self, data: TaskCreate, created_by: uuid.UUID) -> TaskResponse:
        """Create a task and generate its event series from today.

        Args:
            data: Validated task payload.
            created_by: Authenticated user creating the task.

        Raises:
            ValidationError: The creator has no user profile.
            PlanLimitExceededError: The household is at its task limit.
        """
        if await self.uow.user_profiles.get_by_id(created_by) is None:
            raise ValidationError(
                f"User with ID {created_by} does not exist in user_profiles. "
                "Please ensure the user profile is created before creating tasks."
            )
        await self.plan_usage_service.ensure_can_add(data.household_id, UsageType.TASKS)

        interval = data.interval or TaskInterval()
        task = Task(
            household_id=data.household_id,
            category_id=data.category_id,
            name=data.name,
            description=data.description,
            years_value=interval.years,
            months_value=interval.months,
            weeks_value=interval.weeks,
            days_value=interval.days,
            last_date=data.last_date,
            priority=data.priority.value,
            notes=data.notes,
            is_active=True,
            assigned_to=data.assigned_to,
            created_by=created_by,
        )
        task = await self.uow.tasks.create(task)
        logger.info(f"Task created with ID {task.id} for household {task.household_id}")

        await self.plan_usage_service.update_tasks_usage(task.household_id)

        if task.has_interval:
            generated = await self.event_service.generate_event_series(
                task, self.event_service.today()
            )
            logger.info(f"Generated {generated} initial events for task {task.id}")

        return await self._to_response(task)

    async def update_task(self, task_id: uuid.UUID, data: TaskUpdate) -> TaskResponse:
        """Apply a partial update; a changed interval regenerates future events.

        The field changes and the regenerated series commit together, and a
        retried transaction re-applies both to a freshly loaded task.

        Raises:
            NotFoundError: The task does not exist.
        """
        changes = data.model_dump(exclude_unset=True, exclude={"interval"})
        for field in ("name", "priority", "is_active"):
            if field in changes and changes[field] is None:
                del changes[field]
        if "priority" in changes:
            changes["priority"] = Priority(changes["priority"]).value
        new_interval = None
        if "interval" in data.model_fields_set:
            new_interval = data.interval or TaskInterval()

        async def _update() -> Task:
            task = await self._get_task_or_raise(task_id)
            old_interval = task.interval_components

            for field, value in changes.items():
                setattr(task, field, value)
            if new_interval is not None:
                task.years_value = new_interval.years
                task.months_value = new_interval.months
                task.weeks_value = new_interval.weeks
                task.days_value = new_interval.days

            task = await self.uow.tasks.update(task)

            if task.interval_components != old_interval:
                logger.info(f"Interval changed for task {task_id}, regenerating events")
                generated = await self.event_service.replace_future_events(task)
                logger.info(f"Regenerated {generated} events for task {task_id} after interval change")
            return task

        task = await self.uow.execute_in_transaction(_update)
        logger.info(f"Task {task_id} updated successfully")
        return await self._to_response(task)

    async def delete_task(self, task_id: uuid.UUID) -> None:
        """Soft-delete a task and refresh the household's task usage.

        Raises:
            NotFoundError: The task does not exist.
        """
        task = await self._get_task_or_raise(task_id)
        await self.uow.tasks.soft_delete(task)
        await self.plan_usage_service.update_tasks_usage(task.household_id)
        logger.info(f"Task {task_id} soft deleted successfully")

    async def regenerate_events(self, task_id: uuid.UUID) -> int:
        """Rebuild the task's future event series.

        Raises:
            NotFoundError: The task does not exist.
        """
        return await self.event_service.regenerate_task_events(task_id)

    async def count_future_events(self, task_id: uuid.UUID) -> int:
        """Count the task's pending events due today or later."""
        return await self.event_service.count_future_events(task_id)
