"""Repository pattern implementation for database access abstraction.

This module provides a clean interface for database operations, separating
data access logic from business logic and API routes.

Exports:
    Repository: Generic base class for all repositories
    UnitOfWork: Aggregation of all repositories over one session
    PagedResult: Page container returned by search methods
    One repository per entity (UserProfile, PlanType, PlanUsage, Household,
    HouseholdMember, CategoryType, Category, Item, Task, Event, TaskHistory)

Example:
    from homely.core import get_db
    from homely.repositories import UnitOfWork

    @router.get("/households")
    async def households(session: AsyncSession = Depends(get_db)):
        uow = UnitOfWork(session)
        households = await uow.households.get_user_households(user_id)
        tasks = await uow.tasks.get_active_tasks(households[0].id)
"""

from homely.repositories.base import Repository
from homely.repositories.category_repository import CategoryRepository, CategoryTypeRepository
from homely.repositories.household_repository import (
    HouseholdMemberRepository,
    HouseholdRepository,
)
from homely.repositories.item_repository import ItemRepository
from homely.repositories.pagination import PagedResult
from homely.repositories.plan_repository import PlanTypeRepository, PlanUsageRepository
from homely.repositories.task_repository import (
    EventRepository,
    TaskHistoryRepository,
    TaskRepository,
)
from homely.repositories.unit_of_work import UnitOfWork
from homely.repositories.user_profile_repository import UserProfileRepository

__all__ = [
    "CategoryRepository",
    "CategoryTypeRepository",
    "EventRepository",
    "HouseholdMemberRepository",
    "HouseholdRepository",
    "ItemRepository",
    "PagedResult",
    "PlanTypeRepository",
    "PlanUsageRepository",
    "Repository",
    "TaskHistoryRepository",
    "TaskRepository",
    "UnitOfWork",
    "UserProfileRepository",
]
