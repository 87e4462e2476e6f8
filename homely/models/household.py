"""Household and membership models."""

from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, Date, DateTime, ForeignKey, Index, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from homely.core.database import Base
from homely.models.enums import HouseholdRole, SubscriptionStatus, sql_in_list
from homely.models.mixins import SoftDeleteMixin, utc_now

if TYPE_CHECKING:
    from homely.models.plan import PlanType
    from homely.models.user_profile import UserProfile


class Household(SoftDeleteMixin, Base):
    """A group of users sharing tasks and items under one subscription plan.

    Attributes:
        id: Unique identifier
        name: Display name
        address: Optional postal address
        plan_type_id: Subscription tier (1 is the free plan)
        subscription_status: One of free/active/cancelled/expired
        subscription_start_date: When the paid subscription began
        subscription_end_date: When the paid subscription ends
        plan_type: Related PlanType
        members: All memberships, including soft-deleted ones
    """

    __tablename__ = "households"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    address: Mapped[str | None] = mapped_column(String(500), nullable=True)
    plan_type_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("plan_types.id"), nullable=False, default=1
    )
    subscription_status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=SubscriptionStatus.FREE.value
    )
    subscription_start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    subscription_end_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    plan_type: Mapped[PlanType | None] = relationship("PlanType", lazy="selectin")
    members: Mapped[list[HouseholdMember]] = relationship(
        "HouseholdMember",
        back_populates="household",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index("idx_households_name", "name"),
        CheckConstraint(
            f"subscription_status IN ({sql_in_list(SubscriptionStatus)})",
            name="ck_households_subscription_status",
        ),
    )

    @property
    def active_members(self) -> list[HouseholdMember]:
        return [m for m in self.members if m.deleted_at is None]

    def __repr__(self) -> str:
        return f"<Household(id={self.id}, name={self.name!r})>"


class HouseholdMember(SoftDeleteMixin, Base):
    """Membership of a user in a household with a fixed role."""

    __tablename__ = "household_members"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    household_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("households.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("user_profiles.user_id", ondelete="CASCADE"), nullable=False
    )
    role: Mapped[str] = mapped_column(
        String(20), nullable=False, default=HouseholdRole.MEMBER.value
    )
    invited_by: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    invitation_token: Mapped[str | None] = mapped_column(String(255), nullable=True)
    invitation_expires_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    joined_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, default=utc_now
    )

    household: Mapped[Household] = relationship(
        "Household", back_populates="members", lazy="selectin"
    )
    user: Mapped[UserProfile | None] = relationship(
        "UserProfile", back_populates="memberships", foreign_keys=[user_id], lazy="selectin"
    )

    __table_args__ = (
        Index("idx_household_members_household", "household_id"),
        Index("idx_household_members_user", "user_id"),
        CheckConstraint(
            f"role IN ({sql_in_list(HouseholdRole)})",
            name="ck_household_members_role",
        ),
    )

    def __repr__(self) -> str:
        return (
            f"<HouseholdMember(household_id={self.household_id}, user_id={self.user_id}, "
            f"role={self.role!r})>"
        )
