"""Subscription plan models: plan tiers and metered usage."""

from __future__ import annotations

import uuid
from datetime import date
from decimal import Decimal
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Date,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column

from homely.core.database import Base
from homely.models.enums import UsageType, sql_in_list
from homely.models.mixins import SoftDeleteMixin, TimestampMixin


class PlanType(TimestampMixin, Base):
    """A subscription tier with its limits.

    A null ``max_*`` value means the resource is unlimited on this plan.
    """

    __tablename__ = "plan_types"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    max_household_members: Mapped[int | None] = mapped_column(Integer, nullable=True)
    max_items: Mapped[int | None] = mapped_column(Integer, nullable=True)
    max_tasks: Mapped[int | None] = mapped_column(Integer, nullable=True)
    price_monthly: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    price_yearly: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    features: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    @property
    def is_premium(self) -> bool:
        """Whether the plan unlocks premium features such as task history."""
        name = (self.name or "").lower()
        return "premium" in name or "rodzinny" in name

    def limit_for(self, usage_type: str) -> int | None:
        """Return the plan limit for a usage type, or None when unlimited."""
        return {
            UsageType.HOUSEHOLD_MEMBERS.value: self.max_household_members,
            UsageType.ITEMS.value: self.max_items,
            UsageType.TASKS.value: self.max_tasks,
        }.get(str(usage_type))

    def __repr__(self) -> str:
        return f"<PlanType(id={self.id}, name={self.name!r})>"


class PlanUsage(SoftDeleteMixin, Base):
    """Current consumption of a metered resource by a household."""

    __tablename__ = "plan_usage"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    household_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("households.id", ondelete="CASCADE"), nullable=False
    )
    usage_type: Mapped[str] = mapped_column(String(50), nullable=False)
    current_value: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    max_value: Mapped[int | None] = mapped_column(Integer, nullable=True)
    usage_date: Mapped[date] = mapped_column(Date, nullable=False, default=date.today)

    __table_args__ = (
        Index("idx_plan_usage_household_type", "household_id", "usage_type"),
        CheckConstraint(
            f"usage_type IN ({sql_in_list(UsageType)})",
            name="ck_plan_usage_usage_type",
        ),
        CheckConstraint("current_value >= 0", name="ck_plan_usage_current_value"),
    )

    def __repr__(self) -> str:
        return (
            f"<PlanUsage(household_id={self.household_id}, type={self.usage_type!r}, "
            f"current={self.current_value}, max={self.max_value})>"
        )
