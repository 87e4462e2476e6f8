"""Column mixins shared by Homely models."""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import DateTime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func


def utc_now() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(UTC)


class TimestampMixin:
    """Adds created_at/updated_at columns maintained by the database."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        default=utc_now,
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        default=utc_now,
        onupdate=utc_now,
        nullable=False,
    )


class SoftDeleteMixin(TimestampMixin):
    """Adds a deleted_at marker; rows with a value are treated as removed."""

    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def soft_delete(self) -> None:
        """Mark the row as deleted without removing it."""
        now = utc_now()
        self.deleted_at = now
        self.updated_at = now


class IntervalMixin:
    """Recurrence interval split into calendar components.

    All components zero means the record does not repeat.
    """

    years_value: Mapped[int] = mapped_column(default=0, nullable=False)
    months_value: Mapped[int] = mapped_column(default=0, nullable=False)
    weeks_value: Mapped[int] = mapped_column(default=0, nullable=False)
    days_value: Mapped[int] = mapped_column(default=0, nullable=False)

    @property
    def interval_components(self) -> tuple[int, int, int, int]:
        return (
            self.years_value or 0,
            self.months_value or 0,
            self.weeks_value or 0,
            self.days_value or 0,
        )

    @property
    def has_interval(self) -> bool:
        return any(value > 0 for value in self.interval_components)
