"""Pydantic schemas for household item endpoints."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, Field

from homely.api.schemas.task import TaskInterval
from homely.models.enums import Priority


class ItemCreate(BaseModel):
    household_id: UUID
    category_id: int | None = None
    name: str = Field(..., min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=2000)
    interval: TaskInterval | None = None
    last_date: date | None = None
    priority: Priority = Priority.MEDIUM
    notes: str | None = Field(default=None, max_length=2000)


class ItemUpdate(BaseModel):
    category_id: int | None = None
    name: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=2000)
    interval: TaskInterval | None = None
    last_date: date | None = None
    priority: Priority | None = None
    notes: str | None = Field(default=None, max_length=2000)
    is_active: bool | None = None


class ItemResponse(BaseModel):
    id: UUID
    household_id: UUID
    category_id: int | None = None
    category_name: str | None = None
    name: str
    description: str | None = None
    interval: TaskInterval | None = None
    last_date: date | None = None
    priority: Priority
    notes: str | None = None
    is_active: bool
    created_by: UUID | None = None
    created_at: datetime | None = None
