"""SQLAlchemy models for the Homely domain."""

from homely.core.database import Base
from homely.models.category import Category, CategoryType
from homely.models.enums import (
    HouseholdRole,
    Priority,
    SubscriptionStatus,
    TaskStatus,
    UrgencyStatus,
    UsageType,
)
from homely.models.household import Household, HouseholdMember
from homely.models.item import Item
from homely.models.plan import PlanType, PlanUsage
from homely.models.task import Event, Task, TaskHistory
from homely.models.user_profile import UserProfile

__all__ = [
    "Base",
    "Category",
    "CategoryType",
    "Event",
    "Household",
    "HouseholdMember",
    "HouseholdRole",
    "Item",
    "PlanType",
    "PlanUsage",
    "Priority",
    "SubscriptionStatus",
    "Task",
    "TaskHistory",
    "TaskStatus",
    "UrgencyStatus",
    "UsageType",
    "UserProfile",
]
