"""Event management: scheduled occurrences of tasks and one-off events.

Recurring tasks are expanded into a series of pending events reaching
``event_future_years`` into the future. The series is extended by
``refill_household_events`` once the furthest pending event is closer
than ``event_min_future_months_threshold`` months.

Status transitions:
    pending   -> completed | postponed | cancelled
    postponed -> completed | postponed | cancelled
    cancelled -> completed | postponed | cancelled
    completed -> (terminal)

Example:
    uow = UnitOfWork(session)
    service = EventService(uow)
    created = await service.generate_event_series(task, start_date=today_utc())
"""

from __future__ import annotations

import uuid
from collections.abc import Callable, Sequence
from datetime import date, timedelta
from typing import TYPE_CHECKING

from dateutil.relativedelta import relativedelta

from homely.api.schemas.event import (
    CancelEventRequest,
    CompleteEventRequest,
    EventCreate,
    EventResponse,
    EventUpdate,
    PostponeEventRequest,
)
from homely.core.config import Settings, get_settings
from homely.core.exceptions import InvalidStatusTransitionError, NotFoundError, ValidationError
from homely.core.logging import get_logger
from homely.models.enums import Priority, TaskStatus
from homely.models.task import Event, Task, TaskHistory
from homely.services.urgency import calculate_urgency_status, days_until_due, today_utc

if TYPE_CHECKING:
    from homely.repositories.unit_of_work import UnitOfWork

logger = get_logger(__name__)

ONE_OFF_EVENT_TITLE = "One-off event"


def calculate_next_due_date(
    current: date, *, years: int = 0, months: int = 0, weeks: int = 0, days: int = 0
) -> date:
    """Advance a date by one recurrence interval.

    Components are applied in order: years, then months (clamped to the
    end of the month), then weeks and days.
    """
    next_date = current
    if years > 0:
        next_date = next_date + relativedelta(years=years)
    if months > 0:
        next_date = next_date + relativedelta(months=months)
    if weeks > 0:
        next_date = next_date + timedelta(days=weeks * 7)
    if days > 0:
        next_date = next_date + timedelta(days=days)
    return next_date


def event_to_response(event: Event, today: date) -> EventResponse:
    """Map an Event entity to its API representation."""
    task = event.task
    category = task.category if task is not None else None
    category_type = category.category_type if category is not None else None
    return EventResponse(
        id=event.id,
        task_id=event.task_id,
        task_name=task.name if task is not None else None,
        household_id=event.household_id,
        assigned_to=event.assigned_to,
        due_date=event.due_date,
        title=event.title,
        description=event.description,
        notes=event.notes,
        status=TaskStatus(event.status),
        priority=Priority(event.priority),
        urgency_status=calculate_urgency_status(event.due_date, today),
        days_until_due=days_until_due(event.due_date, today),
        completion_date=event.completion_date,
        completion_notes=event.completion_notes,
        postponed_from_date=event.postponed_from_date,
        postpone_reason=event.postpone_reason,
        is_recurring=event.is_recurring,
        category_name=category.name if category is not None else None,
        category_type_name=category_type.name if category_type is not None else None,
        created_by=event.created_by,
        created_at=event.created_at,
        updated_at=event.updated_at,
    )


class EventService:
    """Service for event scheduling and the event lifecycle.

    Attributes:
        uow: Unit of work providing repositories and the transaction.
        settings: Application settings (event horizon and refill threshold).
    """

    def __init__(
        self,
        uow: UnitOfWork,
        settings: Settings | None = None,
        today_provider: Callable[[], date] | None = None,
    ) -> None:
        self.uow = uow
        self.settings = settings or get_settings()
        self._today = today_provider or today_utc

    def today(self) -> date:
        return self._today()

    def _to_response(self, event: Event) -> EventResponse:
        return event_to_response(event, self.today())

    def _to_responses(self, events: Sequence[Event]) -> list[EventResponse]:
        today = self.today()
        return [event_to_response(event, today) for event in events]

    async def _get_event_or_raise(self, event_id: uuid.UUID) -> Event:
        event = await self.uow.events.get_with_details(event_id)
        if event is None:
            raise NotFoundError(resource="Event", resource_id=event_id)
        return event

    # -------------------------------------------------------------------------
    # Series generation
    # -------------------------------------------------------------------------

    async def generate_event_series(self, task: Task, start_date: date) -> int:
        """Create pending events for a recurring task up to the horizon.

        The first event falls one interval after ``start_date``; events are
        added until the next date would pass ``today + event_future_years``.

        Args:
            task: The task template to expand.
            start_date: Date the series continues from (not itself scheduled).

        Returns:
            Number of events created; 0 for a task without an interval.
        """
        if not task.has_interval:
            logger.debug(f"Task {task.id} has no interval, skipping event series generation")
            return 0

        years, months, weeks, days = task.interval_components
        end_date = self.today() + relativedelta(years=self.settings.event_future_years)

        events: list[Event] = []
        due_date = start_date
        while True:
            due_date = calculate_next_due_date(
                due_date, years=years, months=months, weeks=weeks, days=days
            )
            if due_date > end_date:
                break
            events.append(
                Event(
                    task_id=task.id,
                    household_id=task.household_id,
                    assigned_to=task.assigned_to,
                    due_date=due_date,
                    title=task.name,
                    status=TaskStatus.PENDING.value,
                    priority=task.priority,
                    is_recurring=True,
                    created_by=task.created_by,
                )
            )

        if events:
            await self.uow.events.create_many(events)
        logger.info(
            f"Generated {len(events)} events for task {task.id} "
            f"(from {start_date.isoformat()} to {end_date.isoformat()})"
        )
        return len(events)

    async def regenerate_task_events(self, task_id: uuid.UUID) -> int:
        """Replace a task's future pending events with a fresh series from today.

        Raises:
            NotFoundError: The task does not exist.
        """

        async def _regenerate() -> int:
            task = await self.uow.tasks.get_with_details(task_id)
            if task is None:
                raise NotFoundError(resource="Task", resource_id=task_id)
            return await self.replace_future_events(task)

        return await self.uow.execute_in_transaction(_regenerate)

    async def replace_future_events(self, task: Task) -> int:
        """Soft-delete pending events due from today and generate a new series.

        Runs in the caller's transaction.

        Returns:
            Number of events created.
        """
        today = self.today()
        future_events = await self.uow.events.get_future_pending_for_task(task.id, today)
        for event in future_events:
            await self.uow.events.soft_delete(event)
        logger.info(f"Deleted {len(future_events)} future events for task {task.id}")

        return await self.generate_event_series(task, today)

    async def count_future_events(self, task_id: uuid.UUID) -> int:
        return await self.uow.events.count_future_events(task_id, self.today())

    async def refill_household_events(self, household_id: uuid.UUID) -> int:
        """Extend the event series of every active recurring task in a household.

        A task is refilled when it has no pending event, or when its furthest
        pending event is due before ``today + event_min_future_months_threshold``
        months. The new series continues from that event (or from today).

        Returns:
            Total number of events created.
        """
        today = self.today()
        threshold = today + relativedelta(months=self.settings.event_min_future_months_threshold)
        total = 0

        for task in await self.uow.tasks.get_active_tasks(household_id):
            if not task.has_interval:
                continue

            last_event = await self.uow.events.get_last_pending_for_task(task.id)
            if last_event is not None and last_event.due_date >= threshold:
                continue

            start_date = last_event.due_date if last_event is not None else today
            generated = await self.generate_event_series(task, start_date)
            total += generated
            last_label = last_event.due_date.isoformat() if last_event is not None else "none"
            logger.info(
                f"Refilled {generated} events for task {task.id} "
                f"(last event was: {last_label}, threshold: {threshold.isoformat()})"
            )

        logger.info(
            f"Refill complete for household {household_id}: {total} total events generated"
        )
        return total

    async def refill_all_households(self) -> tuple[int, int]:
        """Refill events for every live household.

        Returns:
            Tuple of (households processed, events created).
        """
        household_ids = await self.uow.households.get_all_ids()
        total = 0
        for household_id in household_ids:
            total += await self.refill_household_events(household_id)
        logger.info(
            f"Refill complete for {len(household_ids)} households: {total} total events generated"
        )
        return len(household_ids), total

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    async def get_household_events(
        self,
        household_id: uuid.UUID,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> list[EventResponse]:
        events = await self.uow.events.get_household_events(
            household_id, start_date=start_date, end_date=end_date
        )
        return self._to_responses(events)

    async def get_assigned_events(self, user_id: uuid.UUID) -> list[EventResponse]:
        return self._to_responses(await self.uow.events.get_assigned_events(user_id))

    async def get_events_by_status(
        self, household_id: uuid.UUID, status: TaskStatus
    ) -> list[EventResponse]:
        events = await self.uow.events.get_by_status(household_id, status.value)
        return self._to_responses(events)

    async def get_upcoming_events(
        self, household_id: uuid.UUID, days: int = 30
    ) -> list[EventResponse]:
        """Pending events due between today and ``today + days``."""
        today = self.today()
        events = await self.uow.events.get_household_events(
            household_id, start_date=today, end_date=today + timedelta(days=days)
        )
        pending = [e for e in events if e.status == TaskStatus.PENDING.value]
        return self._to_responses(sorted(pending, key=lambda e: e.due_date))

    async def get_overdue_events(self, household_id: uuid.UUID) -> list[EventResponse]:
        events = await self.uow.events.get_overdue_events(household_id, self.today())
        return self._to_responses(events)

    async def get_event(self, event_id: uuid.UUID) -> EventResponse:
        """Get one event.

        Raises:
            NotFoundError: The event does not exist or was deleted.
        """
        return self._to_response(await self._get_event_or_raise(event_id))

    async def get_event_household_id(self, event_id: uuid.UUID) -> uuid.UUID:
        return (await self._get_event_or_raise(event_id)).household_id

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    async def create_event(self, data: EventCreate, created_by: uuid.UUID) -> EventResponse:
        """Schedule a single event.

        With a ``task_id`` the task must exist in the same household; the
        event takes the task's name and priority unless given.

        Raises:
            NotFoundError: The referenced task does not exist in the household.
            ValidationError: A one-off event has no title.
        """
        task: Task | None = None
        if data.task_id is not None:
            task = await self.uow.tasks.get_with_details(data.task_id)
            if task is None or task.household_id != data.household_id:
                raise NotFoundError(resource="Task", resource_id=data.task_id)

        title = data.title or (task.name if task is not None else None)
        if not title:
            raise ValidationError("Title is required for an event without a task")

        if data.priority is not None:
            priority = data.priority.value
        elif task is not None:
            priority = task.priority
        else:
            priority = Priority.MEDIUM.value

        event = Event(
            task_id=data.task_id,
            household_id=data.household_id,
            assigned_to=data.assigned_to,
            due_date=data.due_date,
            title=title,
            description=data.description,
            notes=data.notes,
            status=TaskStatus.PENDING.value,
            priority=priority,
            is_recurring=False,
            created_by=created_by,
        )
        event = await self.uow.events.create(event)
        logger.info(
            f"Event created with ID {event.id} for task {data.task_id} "
            f"in household {data.household_id}"
        )
        return self._to_response(event)

    async def update_event(self, event_id: uuid.UUID, data: EventUpdate) -> EventResponse:
        """Apply a partial update to an event.

        Raises:
            NotFoundError: The event does not exist.
        """
        event = await self._get_event_or_raise(event_id)
        changes = data.model_dump(exclude_unset=True)
        if "priority" in changes and changes["priority"] is not None:
            changes["priority"] = Priority(changes["priority"]).value
        for field, value in changes.items():
            if field in ("title", "due_date", "priority") and value is None:
                continue
            setattr(event, field, value)
        event = await self.uow.events.update(event)
        logger.info(f"Event {event_id} updated successfully")
        return self._to_response(event)

    async def delete_event(self, event_id: uuid.UUID) -> None:
        """Soft-delete an event.

        Raises:
            NotFoundError: The event does not exist.
        """
        event = await self._get_event_or_raise(event_id)
        await self.uow.events.soft_delete(event)
        logger.info(f"Event {event_id} soft deleted successfully")

    async def complete_event(
        self,
        event_id: uuid.UUID,
        data: CompleteEventRequest,
        completed_by: uuid.UUID,
    ) -> EventResponse:
        """Mark an event completed and archive it for premium households.

        The status change and the history row are committed together.

        Raises:
            NotFoundError: The event does not exist.
            InvalidStatusTransitionError: The event is already completed.
        """

        async def _complete() -> EventResponse:
            event = await self._get_event_or_raise(event_id)
            if event.status == TaskStatus.COMPLETED.value:
                raise InvalidStatusTransitionError(
                    f"Event {event_id} is already completed",
                    current_status=event.status,
                    target_status=TaskStatus.COMPLETED.value,
                )

            event.status = TaskStatus.COMPLETED.value
            event.completion_date = data.completion_date or self.today()
            event.completion_notes = data.completion_notes
            event = await self.uow.events.update(event)
            logger.info(f"Event {event_id} marked as completed")

            await self._archive_if_premium(event, completed_by)
            return self._to_response(event)

        return await self.uow.execute_in_transaction(_complete)

    async def _archive_if_premium(self, event: Event, completed_by: uuid.UUID) -> None:
        if not await self.uow.households.is_premium(event.household_id):
            logger.debug(
                f"Skipping task history: household {event.household_id} is not on a premium plan"
            )
            return

        title = ONE_OFF_EVENT_TITLE
        if event.task_id is not None:
            task = await self.uow.tasks.get_by_id(event.task_id)
            if task is not None:
                title = task.name

        entry = TaskHistory(
            event_id=event.id,
            task_id=event.task_id,
            household_id=event.household_id,
            assigned_to=event.assigned_to,
            completed_by=completed_by,
            due_date=event.due_date,
            completion_date=event.completion_date or self.today(),
            title=title,
            completion_notes=event.completion_notes,
        )
        await self.uow.task_history.create(entry)
        logger.info(
            f"Created task history entry {entry.id} for event {event.id} "
            f"in premium household {event.household_id}"
        )

    async def postpone_event(
        self, event_id: uuid.UUID, data: PostponeEventRequest
    ) -> EventResponse:
        """Move an event to a later date.

        The original due date is kept in ``postponed_from_date`` the first
        time an event is postponed.

        Raises:
            NotFoundError: The event does not exist.
            InvalidStatusTransitionError: The event is completed.
            ValidationError: The new date is not after today.
        """
        event = await self._get_event_or_raise(event_id)
        if event.status == TaskStatus.COMPLETED.value:
            raise InvalidStatusTransitionError(
                f"Cannot postpone completed event {event_id}",
                current_status=event.status,
                target_status=TaskStatus.POSTPONED.value,
            )
        if data.new_due_date <= self.today():
            raise ValidationError("New due date must be in the future")

        if event.postponed_from_date is None:
            event.postponed_from_date = event.due_date
        event.due_date = data.new_due_date
        event.postpone_reason = data.reason
        event.status = TaskStatus.POSTPONED.value
        event = await self.uow.events.update(event)
        logger.info(f"Event {event_id} postponed to {data.new_due_date.isoformat()}")
        return self._to_response(event)

    async def cancel_event(self, event_id: uuid.UUID, data: CancelEventRequest) -> EventResponse:
        """Cancel an event, prefixing its notes with the reason.

        Raises:
            NotFoundError: The event does not exist.
            InvalidStatusTransitionError: The event is completed.
        """
        event = await self._get_event_or_raise(event_id)
        if event.status == TaskStatus.COMPLETED.value:
            raise InvalidStatusTransitionError(
                f"Cannot cancel completed event {event_id}",
                current_status=event.status,
                target_status=TaskStatus.CANCELLED.value,
            )

        notes = f"[CANCELLED] {data.reason}"
        if event.notes:
            notes += f"\n\nPrevious notes:\n{event.notes}"
        event.notes = notes
        event.status = TaskStatus.CANCELLED.value
        event = await self.uow.events.update(event)
        logger.info(f"Event {event_id} cancelled with reason: {data.reason}")
        return self._to_response(event)
