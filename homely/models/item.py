"""Household item model."""

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
from homely.models.enums import Priority, sql_in_list
from homely.models.mixins import IntervalMixin, SoftDeleteMixin

if TYPE_CHECKING:
    from homely.models.category import Category


class Item(IntervalMixin, SoftDeleteMixin, Base):
    """A physical thing the household keeps track of (boiler, car, plants).

    Items carry their own service interval and count towards the
    ``items`` plan limit.
    """

    __tablename__ = "items"

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
    created_by: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)

    category: Mapped[Category | None] = relationship("Category", lazy="selectin")

    __table_args__ = (
        Index("idx_items_household", "household_id"),
        CheckConstraint(f"priority IN ({sql_in_list(Priority)})", name="ck_items_priority"),
    )

    def __repr__(self) -> str:
        return f"<Item(id={self.id}, name={self.name!r})>"
