"""User profile model.

Authentication identities live in Supabase; this table holds the
application-side profile keyed by the Supabase user id.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from homely.core.database import Base
from homely.models.mixins import SoftDeleteMixin

if TYPE_CHECKING:
    from homely.models.household import HouseholdMember


class UserProfile(SoftDeleteMixin, Base):
    """Profile data for an authenticated user.

    Attributes:
        user_id: Supabase auth user id (primary key)
        first_name: Given name
        last_name: Family name
        avatar_url: Optional avatar image URL
        phone: Optional phone number
        preferred_language: UI language code, defaults to Polish
        timezone: IANA timezone name
        last_active_at: Last time the user made an authenticated request
        memberships: Household memberships of this user
    """

    __tablename__ = "user_profiles"

    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    last_name: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    avatar_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(30), nullable=True)
    preferred_language: Mapped[str] = mapped_column(String(10), nullable=False, default="pl")
    timezone: Mapped[str] = mapped_column(String(50), nullable=False, default="Europe/Warsaw")
    last_active_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    memberships: Mapped[list[HouseholdMember]] = relationship(
        "HouseholdMember",
        back_populates="user",
        foreign_keys="HouseholdMember.user_id",
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def __repr__(self) -> str:
        return f"<UserProfile(user_id={self.user_id}, name={self.full_name!r})>"
