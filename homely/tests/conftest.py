"""Pytest configuration and shared fixtures.

Unit tests never touch PostgreSQL or Supabase:
- mock_uow: UnitOfWork stand-in whose repositories are AsyncMocks
- test_settings: Settings with a known JWT secret, issuer and audience

Environment variables are set before any settings are loaded so the
cached ``get_settings()`` never reads a developer's ``.env`` values for
the JWT parameters.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING
from unittest.mock import AsyncMock, MagicMock

import pytest

from homely.tests.auth_helpers import TEST_AUDIENCE, TEST_ISSUER, TEST_JWT_SECRET

if TYPE_CHECKING:
    from collections.abc import Generator

    from homely.core.config import Settings

os.environ["JWT_SECRET"] = TEST_JWT_SECRET
os.environ["JWT_VALID_ISSUER"] = TEST_ISSUER
os.environ["JWT_VALID_AUDIENCE"] = TEST_AUDIENCE
os.environ["HOMELY_RUNTIME_ENV_PATH"] = str(Path(tempfile.gettempdir()) / "homely-missing.env")
os.environ.setdefault(
    "LOG_FILE_PATH", str(Path(tempfile.gettempdir()) / "homely-tests" / "homely.log")
)

REPOSITORY_NAMES = (
    "user_profiles",
    "plan_types",
    "plan_usage",
    "households",
    "household_members",
    "category_types",
    "categories",
    "items",
    "tasks",
    "events",
    "task_history",
)


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None]:
    """Reload settings from the environment for every test."""
    from homely.core.config import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """Settings with deterministic JWT and event generation parameters."""
    from homely.core.config import Settings

    return Settings(
        _env_file=None,
        jwt_secret=TEST_JWT_SECRET,
        jwt_valid_issuer=TEST_ISSUER,
        jwt_valid_audience=TEST_AUDIENCE,
        supabase_url="http://supabase.test",
        supabase_key="anon-key",
        supabase_service_role_key="service-role-key",
        event_future_years=2,
        event_min_future_months_threshold=6,
        log_file_path=str(tmp_path / "logs" / "homely.log"),
    )



@pytest.fixture
def mock_uow() -> MagicMock:
    """Create a UnitOfWork stand-in.

    Every repository is an AsyncMock, so any awaited repository call
    returns a MagicMock unless the test configures it. The transaction
    helper runs the operation it is given.
    """
    uow = MagicMock()
    for name in REPOSITORY_NAMES:
        setattr(uow, name, AsyncMock())

    async def run_operation(operation):
        return await operation()

    uow.execute_in_transaction = AsyncMock(side_effect=run_operation)
    uow.save_changes = AsyncMock()
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()
    return uow


@pytest.fixture
def route_client():
    """Factory for a TestClient over selected routers.

    The app has the exception handlers installed but no middleware;
    ``user_id`` stands in for the identity AuthMiddleware would set and
    ``overrides`` maps service dependencies to mocks.

    Usage:
        client = route_client(tasks.router, user_id=USER_ID,
                              overrides={get_task_service: lambda: task_service})
    """
    from fastapi import FastAPI
    from fastapi.testclient import TestClient

    from homely.api.dependencies import get_current_user_id
    from homely.api.exception_handlers import register_exception_handlers

    def _build(*routers, user_id=None, overrides=None) -> TestClient:
        app = FastAPI()
        register_exception_handlers(app)
        for router in routers:
            app.include_router(router)
        if user_id is not None:
            app.dependency_overrides[get_current_user_id] = lambda: user_id
        app.dependency_overrides.update(overrides or {})
        return TestClient(app, raise_server_exceptions=False)

    return _build
