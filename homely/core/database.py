"""Async PostgreSQL access for the Homely API.

One engine per process, created by ``init_db`` during application startup.
Request handlers never open sessions themselves: ``get_db`` hands each
request a session that is committed when the handler returns and rolled
back when it raises, and the API wraps that session in a ``UnitOfWork``.
"""

import asyncio
from collections.abc import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from homely.core.config import Settings, get_settings, mask_connection_string
from homely.core.logging import get_logger, sanitize_error

logger = get_logger(__name__)

CONNECT_RETRY_DELAY_SECONDS = 1.0


class Base(DeclarativeBase):
    pass


_engine: AsyncEngine | None = None
_sessionmaker: async_sessionmaker[AsyncSession] | None = None


def get_engine() -> AsyncEngine:
    if _engine is None:
        raise RuntimeError("Database not initialized. Call init_db() first.")
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    if _sessionmaker is None:
        raise RuntimeError("Database not initialized. Call init_db() first.")
    return _sessionmaker


async def _ping(engine: AsyncEngine) -> None:
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))


async def wait_for_database(
    engine: AsyncEngine,
    max_retries: int,
    delay: float = CONNECT_RETRY_DELAY_SECONDS,
) -> None:
    """Block until the database answers, retrying ``max_retries`` times.

    The wait between attempts grows linearly (delay, 2*delay, ...), which
    covers PostgreSQL starting alongside the API in docker-compose.

    Raises:
        OSError | DBAPIError: The last connection error once retries run out.
    """
    attempt = 0
    while True:
        try:
            await _ping(engine)
            return
        except (OSError, DBAPIError) as e:
            if attempt >= max_retries:
                logger.error(f"Database unreachable after {attempt + 1} attempts: {sanitize_error(e)}")
                raise
            attempt += 1
            logger.warning(
                f"Database not ready ({attempt}/{max_retries}), retrying: {sanitize_error(e)}"
            )
            await asyncio.sleep(delay * attempt)


async def init_db(settings: Settings | None = None) -> None:
    """Create the engine, wait for PostgreSQL and create any missing tables."""
    global _engine, _sessionmaker  # noqa: PLW0603

    settings = settings or get_settings()
    logger.info(f"Connecting to {mask_connection_string(settings.database_url)}")

    engine = create_async_engine(
        settings.database_url,
        echo=settings.debug,
        pool_pre_ping=True,
        pool_size=5,
        max_overflow=10,
    )
    await wait_for_database(engine, settings.database_max_retries)

    import homely.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    _engine = engine
    _sessionmaker = async_sessionmaker(engine, expire_on_commit=False, autoflush=False)


async def close_db() -> None:
    global _engine, _sessionmaker  # noqa: PLW0603

    engine, _engine, _sessionmaker = _engine, None, None
    if engine is not None:
        await engine.dispose()


async def check_database_connection() -> bool:
    """Health probe: True when the initialized engine can run a query."""
    if _engine is None:
        return False
    try:
        await _ping(_engine)
    except (OSError, DBAPIError) as e:
        logger.warning(f"Database health check failed: {sanitize_error(e)}")
        return False
    return True


async def get_db() -> AsyncGenerator[AsyncSession]:
    """FastAPI dependency yielding the request's session.

    Commits after the handler returns, rolls back if it raises.
    """
    async with get_session_factory()() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
