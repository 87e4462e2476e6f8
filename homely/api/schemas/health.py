"""Pydantic schemas for the health and maintenance endpoints."""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class HealthResponse(BaseModel):
    """Response schema for GET /health."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "status": "healthy",
                "timestamp": "2025-01-10T09:00:00Z",
                "environment": "Production",
                "database": "connected",
                "authentication": "Supabase + JWT",
            }
        }
    )

    status: Literal["healthy", "unhealthy"]
    timestamp: datetime
    environment: str
    database: Literal["connected", "disconnected"]
    authentication: str = "Supabase + JWT"


class RefillEventsResponse(BaseModel):
    """Result of an event refill run."""

    household_id: UUID | None = Field(default=None, description="Absent for a run over all households")
    households_processed: int = Field(default=1, ge=0)
    events_created: int = Field(..., ge=0)
