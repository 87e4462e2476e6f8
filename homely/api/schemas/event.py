"""Pydantic schemas for event (task occurrence) endpoints."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from homely.models.enums import Priority, TaskStatus, UrgencyStatus


class EventCreate(BaseModel):
    """Schema for scheduling an event.

    Without ``task_id`` the event is a one-off; otherwise it inherits the
    task's priority unless one is given.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "household_id": "0b7c1c0e-3f3a-4a4e-8f1d-2f0a9c6e2d10",
                "task_id": "7d2d0a9e-7f43-4c38-9d0e-5a8c2b0f4e21",
                "due_date": "2025-03-01",
                "title": "Wymiana filtra w okapie",
            }
        }
    )

    household_id: UUID
    task_id: UUID | None = None
    assigned_to: UUID | None = None
    due_date: date
    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=2000)
    notes: str | None = Field(default=None, max_length=2000)
    priority: Priority | None = None


class EventUpdate(BaseModel):
    """Schema for editing an event. Omitted fields are left unchanged."""

    assigned_to: UUID | None = None
    due_date: date | None = None
    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=2000)
    notes: str | None = Field(default=None, max_length=2000)
    priority: Priority | None = None


class CompleteEventRequest(BaseModel):
    """Completion details; completion_date defaults to today."""

    completion_date: date | None = None
    completion_notes: str | None = Field(default=None, max_length=2000)


class PostponeEventRequest(BaseModel):
    new_due_date: date
    reason: str = Field(..., min_length=1, max_length=1000)


class CancelEventRequest(BaseModel):
    reason: str = Field(..., min_length=1, max_length=1000)


class EventResponse(BaseModel):
    """Event returned by the API."""

    id: UUID
    task_id: UUID | None = None
    task_name: str | None = None
    household_id: UUID
    assigned_to: UUID | None = None
    due_date: date
    title: str
    description: str | None = None
    notes: str | None = None
    status: TaskStatus
    priority: Priority
    urgency_status: UrgencyStatus
    days_until_due: int
    completion_date: date | None = None
    completion_notes: str | None = None
    postponed_from_date: date | None = None
    postpone_reason: str | None = None
    is_recurring: bool = False
    category_name: str | None = None
    category_type_name: str | None = None
    created_by: UUID | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
