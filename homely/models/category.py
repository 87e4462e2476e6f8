"""Category taxonomy models.

Category types group categories (e.g. "Vehicles" -> "Car", "Bike");
tasks and items are filed under a category.
"""

from __future__ import annotations

import uuid

from sqlalchemy import Boolean, ForeignKey, Index, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from homely.core.database import Base
from homely.models.mixins import SoftDeleteMixin


class CategoryType(SoftDeleteMixin, Base):
    """Top-level grouping of categories.

    A null household_id marks a system-wide type shared by all households.
    """

    __tablename__ = "category_types"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    household_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("households.id", ondelete="CASCADE"), nullable=True
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    categories: Mapped[list[Category]] = relationship(
        "Category", back_populates="category_type"
    )

    __table_args__ = (Index("idx_category_types_sort", "sort_order", "name"),)

    def __repr__(self) -> str:
        return f"<CategoryType(id={self.id}, name={self.name!r})>"


class Category(SoftDeleteMixin, Base):
    """A category inside a category type."""

    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    category_type_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("category_types.id"), nullable=True
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    category_type: Mapped[CategoryType | None] = relationship(
        "CategoryType", back_populates="categories", lazy="selectin"
    )

    __table_args__ = (
        Index("idx_categories_type", "category_type_id"),
        Index("idx_categories_sort", "sort_order", "name"),
    )

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, name={self.name!r}, type_id={self.category_type_id})>"
