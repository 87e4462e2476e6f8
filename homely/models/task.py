"""Task templates, their scheduled events and the completion archive.

Models:
- Task: a chore definition with an optional recurrence interval
- Event: one concrete occurrence of a task (or a one-off event) with a due date
- TaskHistory: archived record of a completed event (premium plans only)
"""

from __future__ import annotations

import uuid
from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from homely.core.database import Base
from homely.models.enums import Priority, TaskStatus, sql_in_list
from homely.models.mixins import IntervalMixin, SoftDeleteMixin

if TYPE_CHECKING:
    from homely.models.category import Category


class Task(IntervalMixin, SoftDeleteMixin, Base):
    """A recurring or one-time chore template.

    Attributes:
        id: Unique identifier
        household_id: Owning household
        category_id: Optional category the task is filed under
        name: Short title; copied onto generated events
        description: Longer description
        years_value, months_value, weeks_value, days_value: Recurrence interval
        last_date: Date the task was last done before tracking started
        priority: low/medium/high; inherited by generated events
        notes: Free-form notes
        is_active: Inactive tasks are skipped by event refills
        assigned_to: Default assignee for generated events
        created_by: User who created the task
    """

    __tablename__ = "tasks"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    household_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("households.id", ondelete="CASCADE"), nullable=False
    )
    category_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("categories.id"), nullable=True
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    last_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    priority: Mapped[str] = mapped_column(
        String(10), nullable=False, default=Priority.MEDIUM.value
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    assigned_to: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    created_by: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)

    category: Mapped[Category | None] = relationship("Category", lazy="selectin")

    __table_args__ = (
        Index("idx_tasks_household_active", "household_id", "is_active"),
        CheckConstraint(f"priority IN ({sql_in_list(Priority)})", name="ck_tasks_priority"),
        CheckConstraint(
            "years_value >= 0 AND months_value >= 0 AND weeks_value >= 0 AND days_value >= 0",
            name="ck_tasks_interval_non_negative",
        ),
    )

    def __repr__(self) -> str:
        return f"<Task(id={self.id}, name={self.name!r}, household_id={self.household_id})>"


class Event(SoftDeleteMixin, Base):
    """A single scheduled occurrence with a due date and lifecycle status."""

    __tablename__ = "events"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    task_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("tasks.id", ondelete="SET NULL"), nullable=True
    )
    household_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("households.id", ondelete="CASCADE"), nullable=False
    )
    assigned_to: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    due_date: Mapped[date] = mapped_column(Date, nullable=False)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=TaskStatus.PENDING.value
    )
    priority: Mapped[str] = mapped_column(
        String(10), nullable=False, default=Priority.MEDIUM.value
    )
    completion_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    completion_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    postponed_from_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    postpone_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_recurring: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_by: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)

    task: Mapped[Task | None] = relationship("Task", lazy="selectin")

    __table_args__ = (
        Index("idx_events_household_due", "household_id", "due_date"),
        Index("idx_events_task_status", "task_id", "status"),
        CheckConstraint(f"status IN ({sql_in_list(TaskStatus)})", name="ck_events_status"),
        CheckConstraint(f"priority IN ({sql_in_list(Priority)})", name="ck_events_priority"),
    )

    def __repr__(self) -> str:
        return (
            f"<Event(id={self.id}, title={self.title!r}, due_date={self.due_date}, "
            f"status={self.status!r})>"
        )


class TaskHistory(SoftDeleteMixin, Base):
    """Archived completion of an event."""

    __tablename__ = "tasks_history"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    event_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("events.id", ondelete="SET NULL"), nullable=True
    )
    task_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("tasks.id", ondelete="SET NULL"), nullable=True
    )
    household_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("households.id", ondelete="CASCADE"), nullable=False
    )
    assigned_to: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    completed_by: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    due_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    completion_date: Mapped[date] = mapped_column(Date, nullable=False)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    completion_notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (Index("idx_tasks_history_household", "household_id", "completion_date"),)

    def __repr__(self) -> str:
        return f"<TaskHistory(id={self.id}, title={self.title!r}, completed={self.completion_date})>"
