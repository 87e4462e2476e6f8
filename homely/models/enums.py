"""Enumeration types for the Homely domain."""

from enum import Enum


class _StrEnum(str, Enum):
    def __str__(self) -> str:
        return self.value

    @classmethod
    def values(cls) -> list[str]:
        """Return all member values in declaration order."""
        return [member.value for member in cls]


class HouseholdRole(_StrEnum):
    """Role of a user inside a household.

    - ADMIN: manages members, categories and the subscription
    - MEMBER: regular participant who completes tasks
    - DASHBOARD: read-only display account (e.g. a kitchen tablet)
    """

    ADMIN = "admin"
    MEMBER = "member"
    DASHBOARD = "dashboard"


class SubscriptionStatus(_StrEnum):
    """Billing state of a household subscription."""

    FREE = "free"
    ACTIVE = "active"
    CANCELLED = "cancelled"
    EXPIRED = "expired"


class TaskStatus(_StrEnum):
    """Lifecycle status of a scheduled event occurrence."""

    PENDING = "pending"
    COMPLETED = "completed"
    POSTPONED = "postponed"
    CANCELLED = "cancelled"


class Priority(_StrEnum):
    """Priority of a task or event."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class UrgencyStatus(_StrEnum):
    """Label derived from how close an event's due date is."""

    OVERDUE = "overdue"
    TODAY = "today"
    THIS_WEEK = "this_week"
    THIS_MONTH = "this_month"
    UPCOMING = "upcoming"


class UsageType(_StrEnum):
    """Metered resources tracked per household for plan limits."""

    ITEMS = "items"
    HOUSEHOLD_MEMBERS = "household_members"
    TASKS = "tasks"
    STORAGE_MB = "storage_mb"


def sql_in_list(enum_cls: type[_StrEnum]) -> str:
    """Render enum values as a SQL ``IN`` list for CHECK constraints."""
    return ", ".join(f"'{value}'" for value in enum_cls.values())
