"""Test factories using factory_boy for generating model instances.

Factories build plain, unsaved model instances with every column set, so
services can map them to DTOs without a database.

Usage:
    from homely.tests.factories import EventFactory, TaskFactory

    task = TaskFactory(months_value=1)
    event = EventFactory(task=task, task_id=task.id, due_date=date(2025, 1, 31))
"""

from __future__ import annotations

import itertools
import uuid
from datetime import UTC, date, datetime

import factory
from factory import LazyAttribute, LazyFunction, Sequence

from homely.models.category import Category, CategoryType
from homely.models.enums import HouseholdRole, Priority, SubscriptionStatus, TaskStatus
from homely.models.household import Household, HouseholdMember
from homely.models.item import Item
from homely.models.plan import PlanType
from homely.models.task import Event, Task
from homely.models.user_profile import UserProfile


FIXED_TODAY = date(2025, 3, 15)

_serial_ids = itertools.count(1000)


def _now() -> datetime:
    return datetime(2025, 1, 1, 12, 0, tzinfo=UTC)


class PlanTypeFactory(factory.Factory):
    """Free plan by default: 3 members, 10 items, 5 tasks."""

    class Meta:
        model = PlanType

    id = Sequence(lambda n: n + 1)
    name = "Darmowy"
    description = None
    max_household_members = 3
    max_items = 10
    max_tasks = 5
    price_monthly = None
    price_yearly = None
    features = None
    is_active = True
    created_at = LazyFunction(_now)
    updated_at = LazyFunction(_now)


class UserProfileFactory(factory.Factory):
    class Meta:
        model = UserProfile

    user_id = LazyFunction(uuid.uuid4)
    first_name = Sequence(lambda n: f"User{n}")
    last_name = "Kowalski"
    avatar_url = None
    phone = None
    preferred_language = "pl"
    timezone = "Europe/Warsaw"
    last_active_at = None
    created_at = LazyFunction(_now)
    updated_at = LazyFunction(_now)
    deleted_at = None


class HouseholdFactory(factory.Factory):
    class Meta:
        model = Household

    id = LazyFunction(uuid.uuid4)
    name = Sequence(lambda n: f"Household {n}")
    address = None
    plan_type = factory.SubFactory(PlanTypeFactory)
    plan_type_id = LazyAttribute(lambda o: o.plan_type.id if o.plan_type else 1)
    subscription_status = SubscriptionStatus.FREE.value
    subscription_start_date = None
    subscription_end_date = None
    created_at = LazyFunction(_now)
    updated_at = LazyFunction(_now)
    deleted_at = None


class HouseholdMemberFactory(factory.Factory):
    class Meta:
        model = HouseholdMember

    id = LazyFunction(uuid.uuid4)
    household = factory.SubFactory(HouseholdFactory)
    household_id = LazyAttribute(lambda o: o.household.id)
    user = factory.SubFactory(UserProfileFactory)
    user_id = LazyAttribute(lambda o: o.user.user_id)
    role = HouseholdRole.MEMBER.value
    invited_by = None
    joined_at = LazyFunction(_now)
    created_at = LazyFunction(_now)
    updated_at = LazyFunction(_now)
    deleted_at = None


class CategoryTypeFactory(factory.Factory):
    class Meta:
        model = CategoryType

    id = Sequence(lambda n: n + 1)
    household_id = None
    name = Sequence(lambda n: f"Type {n}")
    description = None
    sort_order = 0
    is_active = True
    created_at = LazyFunction(_now)
    updated_at = LazyFunction(_now)
    deleted_at = None


class CategoryFactory(factory.Factory):
    class Meta:
        model = Category

    id = Sequence(lambda n: n + 1)
    category_type = factory.SubFactory(CategoryTypeFactory)
    category_type_id = LazyAttribute(lambda o: o.category_type.id if o.category_type else None)
    name = Sequence(lambda n: f"Category {n}")
    description = None
    sort_order = 0
    is_active = True
    created_at = LazyFunction(_now)
    updated_at = LazyFunction(_now)
    deleted_at = None


class TaskFactory(factory.Factory):
    """One-time task by default; pass interval components for a recurring one."""

    class Meta:
        model = Task

    id = LazyFunction(uuid.uuid4)
    household_id = LazyFunction(uuid.uuid4)
    category = None
    category_id = LazyAttribute(lambda o: o.category.id if o.category else None)
    name = Sequence(lambda n: f"Task {n}")
    description = None
    years_value = 0
    months_value = 0
    weeks_value = 0
    days_value = 0
    last_date = None
    priority = Priority.MEDIUM.value
    notes = None
    is_active = True
    assigned_to = None
    created_by = LazyFunction(uuid.uuid4)
    created_at = LazyFunction(_now)
    updated_at = LazyFunction(_now)
    deleted_at = None


class EventFactory(factory.Factory):
    class Meta:
        model = Event

    id = LazyFunction(uuid.uuid4)
    task = None
    task_id = LazyAttribute(lambda o: o.task.id if o.task else None)
    household_id = LazyFunction(uuid.uuid4)
    assigned_to = None
    due_date = date(2025, 3, 20)
    title = Sequence(lambda n: f"Event {n}")
    description = None
    notes = None
    status = TaskStatus.PENDING.value
    priority = Priority.MEDIUM.value
    completion_date = None
    completion_notes = None
    postponed_from_date = None
    postpone_reason = None
    is_recurring = False
    created_by = None
    created_at = LazyFunction(_now)
    updated_at = LazyFunction(_now)
    deleted_at = None


class ItemFactory(factory.Factory):
    class Meta:
        model = Item

    id = LazyFunction(uuid.uuid4)
    household_id = LazyFunction(uuid.uuid4)
    category = None
    category_id = LazyAttribute(lambda o: o.category.id if o.category else None)
    name = Sequence(lambda n: f"Item {n}")
    description = None
    years_value = 0
    months_value = 0
    weeks_value = 0
    days_value = 0
    last_date = None
    priority = Priority.MEDIUM.value
    notes = None
    is_active = True
    created_by = None
    created_at = LazyFunction(_now)
    updated_at = LazyFunction(_now)
    deleted_at = None


def persisted(entity):
    """Fill the values the database would assign on insert.

    Used as a ``side_effect`` for mocked ``create()`` calls.
    """
    table = type(entity).__table__
    if "id" in table.c and getattr(entity, "id", None) is None:
        entity.id = next(_serial_ids) if table.c.id.type.python_type is int else uuid.uuid4()
    for column in ("created_at", "updated_at"):
        if hasattr(type(entity), column) and getattr(entity, column) is None:
            setattr(entity, column, _now())
    return entity
