"""Generic Repository base class for database access abstraction.

This module provides a type-safe, async-first repository pattern implementation
that works with SQLAlchemy 2.0 models. The generic base class provides common
CRUD operations that can be extended by model-specific repositories.

Models that carry a ``deleted_at`` column are soft-deletable: every read
helper on this class hides rows whose ``deleted_at`` is set, and
``soft_delete()`` marks a row instead of removing it.

Example:
    from homely.repositories import Repository
    from homely.models import Category

    class CategoryRepository(Repository[Category]):
        model_class = Category

        async def get_by_type(self, category_type_id: int) -> Sequence[Category]:
            ...
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Generic, TypeVar

from sqlalchemy import Select, func, select

from homely.models.mixins import utc_now

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy.ext.asyncio import AsyncSession
    from sqlalchemy.sql import ColumnElement

    from homely.core.database import Base

# Type variable for the model class
# Bound to Base to ensure only SQLAlchemy models can be used
T = TypeVar("T", bound="Base")

# Requests exceeding this limit are silently capped to MAX_LIMIT
MAX_LIMIT = 1000


class Repository(Generic[T]):  # noqa: UP046
    """Generic repository base class providing common CRUD operations.

    Type Parameters:
        T: The SQLAlchemy model class this repository works with.

    Attributes:
        model_class: Class attribute that must be set to the SQLAlchemy model class.
        session: The async database session used for all operations.

    Example:
        class HouseholdRepository(Repository[Household]):
            model_class = Household

        uow = UnitOfWork(session)
        repo = uow.households
        household = await repo.get_by_id(household_id)
    """

    # Subclasses must set this to their model class
    model_class: type[T]

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository with a database session.

        Args:
            session: An async SQLAlchemy session for database operations.
                     Normally the request session from get_db(), shared via UnitOfWork.
        """
        self.session = session

    # =========================================================================
    # Query helpers
    # =========================================================================

    @property
    def is_soft_deletable(self) -> bool:
        return hasattr(self.model_class, "deleted_at")

    def _not_deleted(self) -> ColumnElement[bool] | None:
        if self.is_soft_deletable:
            return self.model_class.deleted_at.is_(None)  # type: ignore[attr-defined]
        return None

    def query(self) -> Select[tuple[T]]:
        """Return a SELECT over the model that already excludes soft-deleted rows."""
        stmt = select(self.model_class)
        condition = self._not_deleted()
        if condition is not None:
            stmt = stmt.where(condition)
        return stmt

    async def find(
        self,
        *conditions: ColumnElement[bool],
        order_by: Sequence[Any] | None = None,
        options: Sequence[Any] | None = None,
    ) -> Sequence[T]:
        """Retrieve live entities matching all conditions.

        Args:
            *conditions: SQLAlchemy boolean expressions combined with AND.
            order_by: Optional ORDER BY expressions.
            options: Optional loader options (e.g. selectinload()).

        Returns:
            A sequence of matching entities.
        """
        stmt = self.query().where(*conditions)
        if options:
            stmt = stmt.options(*options)
        if order_by:
            stmt = stmt.order_by(*order_by)
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def find_one(
        self,
        *conditions: ColumnElement[bool],
        options: Sequence[Any] | None = None,
    ) -> T | None:
        """Retrieve the first live entity matching all conditions, or None."""
        stmt = self.query().where(*conditions)
        if options:
            stmt = stmt.options(*options)
        result = await self.session.execute(stmt.limit(1))
        return result.scalars().first()

    async def count_where(self, *conditions: ColumnElement[bool]) -> int:
        """Count live entities matching all conditions."""
        stmt = select(func.count()).select_from(self.model_class)
        condition = self._not_deleted()
        if condition is not None:
            stmt = stmt.where(condition)
        if conditions:
            stmt = stmt.where(*conditions)
        result = await self.session.execute(stmt)
        return result.scalar_one()

    # =========================================================================
    # CRUD
    # =========================================================================

    async def get_by_id(self, entity_id: Any) -> T | None:
        """Retrieve an entity by its primary key.

        Args:
            entity_id: The primary key value of the entity to retrieve.

        Returns:
            The entity if found and not soft-deleted, None otherwise.
        """
        entity = await self.session.get(self.model_class, entity_id)
        if entity is not None and getattr(entity, "deleted_at", None) is not None:
            return None
        return entity

    async def get_all(self) -> Sequence[T]:
        """Retrieve all live entities of this type.

        Note:
            For large tables, consider using list_paginated() instead
            to avoid loading all records into memory.
        """
        result = await self.session.execute(self.query())
        return result.scalars().all()

    async def list_paginated(self, *, skip: int = 0, limit: int = 100) -> Sequence[T]:
        """Retrieve entities with pagination support.

        Args:
            skip: Number of records to skip (offset).
            limit: Maximum number of records to return. Silently capped to MAX_LIMIT.

        Returns:
            A sequence of entities within the specified range.
        """
        capped_limit = min(limit, MAX_LIMIT)
        stmt = self.query().offset(skip).limit(capped_limit)
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def get_many(self, entity_ids: Sequence[Any]) -> Sequence[T]:
        """Retrieve multiple entities by their primary keys.

        Args:
            entity_ids: A sequence of primary key values to retrieve.

        Returns:
            A sequence of found entities. May contain fewer items than
            entity_ids if some entities don't exist.
        """
        if not entity_ids:
            return []

        pk_column = list(self.model_class.__table__.primary_key.columns)[0]  # type: ignore[attr-defined]
        stmt = self.query().where(pk_column.in_(entity_ids))
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def create(self, entity: T) -> T:
        """Create a new entity in the database.

        Args:
            entity: The entity instance to persist.

        Returns:
            The persisted entity with any database-generated values.

        Note:
            The entity is flushed but not committed. Commit happens when the
            session context exits or when the unit of work commits.
        """
        self.session.add(entity)
        await self.session.flush()
        await self.session.refresh(entity)
        return entity

    async def create_many(self, entities: Sequence[T]) -> Sequence[T]:
        """Create multiple entities in a single batch operation.

        Args:
            entities: A sequence of entity instances to persist.

        Returns:
            The persisted entities.
        """
        if not entities:
            return []

        self.session.add_all(entities)
        await self.session.flush()
        return entities

    async def update(self, entity: T) -> T:
        """Flush pending changes on an attached entity.

        Args:
            entity: The entity instance with updated values.
                    Must already be attached to the session.

        Returns:
            The updated entity.
        """
        if hasattr(entity, "updated_at"):
            entity.updated_at = utc_now()  # type: ignore[attr-defined]
        await self.session.flush()
        await self.session.refresh(entity)
        return entity

    async def soft_delete(self, entity: T) -> None:
        """Mark an entity as deleted by setting ``deleted_at``.

        Falls back to a hard delete for models without the column.
        """
        if not self.is_soft_deletable:
            await self.delete(entity)
            return
        entity.soft_delete()  # type: ignore[attr-defined]
        await self.session.flush()

    async def delete(self, entity: T) -> None:
        """Delete an entity from the database.

        Args:
            entity: The entity instance to delete.
                    Must be attached to the session.
        """
        await self.session.delete(entity)
        await self.session.flush()

    async def delete_by_id(self, entity_id: Any) -> bool:
        """Soft-delete (or delete) an entity by its primary key.

        Args:
            entity_id: The primary key of the entity to delete.

        Returns:
            True if the entity was found and deleted, False if not found.
        """
        entity = await self.get_by_id(entity_id)
        if entity is None:
            return False
        await self.soft_delete(entity)
        return True

    async def exists(self, entity_id: Any) -> bool:
        """Check if a live entity with the given primary key exists.

        Args:
            entity_id: The primary key value to check.

        Returns:
            True if an entity with this ID exists, False otherwise.
        """
        pk_column = list(self.model_class.__table__.primary_key.columns)[0]  # type: ignore[attr-defined]
        return await self.count_where(pk_column == entity_id) > 0

    async def count(self) -> int:
        """Count the live entities of this type."""
        return await self.count_where()
