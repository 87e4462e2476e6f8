"""Pydantic schemas for task template endpoints."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from homely.api.schemas.common import PaginationMetadata
from homely.models.enums import Priority


class TaskInterval(BaseModel):
    """Recurrence interval; all zero means a one-time task."""

    years: int = Field(default=0, ge=0, le=100)
    months: int = Field(default=0, ge=0, le=1200)
    weeks: int = Field(default=0, ge=0, le=5200)
    days: int = Field(default=0, ge=0, le=36500)

    @property
    def is_recurring(self) -> bool:
        return any(value > 0 for value in (self.years, self.months, self.weeks, self.days))


class TaskCreate(BaseModel):
    """Schema for creating a task template."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "household_id": "0b7c1c0e-3f3a-4a4e-8f1d-2f0a9c6e2d10",
                "category_id": 3,
                "name": "Wymiana filtra w okapie",
                "interval": {"months": 3},
                "priority": "medium",
            }
        }
    )

    household_id: UUID
    category_id: int | None = None
    name: str = Field(..., min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=2000)
    interval: TaskInterval | None = None
    last_date: date | None = None
    priority: Priority = Priority.MEDIUM
    notes: str | None = Field(default=None, max_length=2000)
    assigned_to: UUID | None = None


class TaskUpdate(BaseModel):
    """Schema for updating a task. Omitted fields are left unchanged."""

    category_id: int | None = None
    name: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=2000)
    interval: TaskInterval | None = None
    last_date: date | None = None
    priority: Priority | None = None
    notes: str | None = Field(default=None, max_length=2000)
    is_active: bool | None = None
    assigned_to: UUID | None = None


class TaskCategoryInfo(BaseModel):
    id: int
    name: str
    category_type_id: int | None = None
    category_type_name: str | None = None


class TaskUserInfo(BaseModel):
    id: UUID
    name: str | None = None


class TaskResponse(BaseModel):
    """Task template returned by the API."""

    id: UUID
    household_id: UUID
    name: str
    description: str | None = None
    interval: TaskInterval | None = None
    last_date: date | None = None
    priority: Priority
    notes: str | None = None
    is_active: bool
    category: TaskCategoryInfo | None = None
    assigned_to: TaskUserInfo | None = None
    created_by: TaskUserInfo | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class TaskListResponse(BaseModel):
    """Page of task templates."""

    data: list[TaskResponse]
    pagination: PaginationMetadata


class RegenerateEventsResponse(BaseModel):
    task_id: UUID
    events_created: int = Field(..., ge=0)
