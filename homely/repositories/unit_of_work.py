"""Unit of Work aggregating every repository over one session.

All repositories created by a ``UnitOfWork`` share the same
``AsyncSession``, so changes made through any of them are committed or
rolled back together.

Example:
    async def reschedule(session: AsyncSession = Depends(get_db)):
        uow = UnitOfWork(session)
        household = await uow.households.get_by_id(household_id)
        await uow.execute_in_transaction(lambda: uow.events.create(event))
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, TypeVar

from sqlalchemy.exc import DBAPIError

from homely.core.config import get_settings
from homely.core.logging import get_logger, sanitize_error
from homely.repositories.category_repository import CategoryRepository, CategoryTypeRepository
from homely.repositories.household_repository import (
    HouseholdMemberRepository,
    HouseholdRepository,
)
from homely.repositories.item_repository import ItemRepository
from homely.repositories.plan_repository import PlanTypeRepository, PlanUsageRepository
from homely.repositories.task_repository import (
    EventRepository,
    TaskHistoryRepository,
    TaskRepository,
)
from homely.repositories.user_profile_repository import UserProfileRepository

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

R = TypeVar("R")


class UnitOfWork:
    """Aggregation of repositories sharing one transactional boundary.

    Attributes:
        session: The shared async session.
        user_profiles, plan_types, plan_usage, households, household_members,
        category_types, categories, items, tasks, events, task_history:
            Repositories bound to ``session``.
    """

    def __init__(self, session: AsyncSession, *, max_retries: int | None = None) -> None:
        """Initialize repositories over a shared session.

        Args:
            session: An async SQLAlchemy session, typically from get_db().
            max_retries: Retries for execute_in_transaction on dropped
                connections. Defaults to the ``database_max_retries`` setting.
        """
        self.session = session
        self.max_retries = (
            max_retries if max_retries is not None else get_settings().database_max_retries
        )

        self.user_profiles = UserProfileRepository(session)
        self.plan_types = PlanTypeRepository(session)
        self.plan_usage = PlanUsageRepository(session)
        self.households = HouseholdRepository(session)
        self.household_members = HouseholdMemberRepository(session)
        self.category_types = CategoryTypeRepository(session)
        self.categories = CategoryRepository(session)
        self.items = ItemRepository(session)
        self.tasks = TaskRepository(session)
        self.events = EventRepository(session)
        self.task_history = TaskHistoryRepository(session)

    async def save_changes(self) -> None:
        """Flush pending changes without ending the transaction."""
        await self.session.flush()

    async def commit(self) -> None:
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()

    async def execute_in_transaction(self, operation: Callable[[], Awaitable[R]]) -> R:
        """Run an operation and commit, rolling back if it raises.

        A failure caused by an invalidated connection is retried up to
        ``max_retries`` times; any other exception is re-raised after the
        rollback.

        Args:
            operation: Zero-argument coroutine factory doing the work.

        Returns:
            Whatever the operation returned.
        """
        attempt = 0
        while True:
            try:
                result = await operation()
                await self.session.commit()
                return result
            except DBAPIError as e:
                await self.session.rollback()
                if not e.connection_invalidated or attempt >= self.max_retries:
                    raise
                attempt += 1
                logger.warning(
                    f"Transient database failure, retrying ({attempt}/{self.max_retries}): "
                    f"{sanitize_error(e)}"
                )
            except Exception:
                await self.session.rollback()
                raise
