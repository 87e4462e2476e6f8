"""Liveness endpoints, reachable without authentication.

Endpoints:
- GET / - Service banner
- GET /health - Database connectivity check (503 when disconnected)
"""

from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter, Response, status

from homely.api.schemas.health import HealthResponse
from homely.core.config import get_settings
from homely.core.database import check_database_connection

router = APIRouter(tags=["health"])


@router.get("/")
async def root() -> dict[str, Any]:
    settings = get_settings()
    return {"name": settings.app_name, "version": settings.app_version, "docs": "/docs"}


@router.get("/health", response_model=HealthResponse)
async def health(response: Response) -> HealthResponse:
    """Report whether the API can reach its database."""
    connected = await check_database_connection()
    if not connected:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return HealthResponse(
        status="healthy" if connected else "unhealthy",
        timestamp=datetime.now(UTC),
        environment=get_settings().environment_name,
        database="connected" if connected else "disconnected",
    )
