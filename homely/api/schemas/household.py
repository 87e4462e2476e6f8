"""Pydantic schemas for household and membership endpoints."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from homely.models.enums import HouseholdRole, SubscriptionStatus

# =============================================================================
# Household Schemas
# =============================================================================


class HouseholdResponse(BaseModel):
    """Household as returned to its members."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "0b7c1c0e-3f3a-4a4e-8f1d-2f0a9c6e2d10",
                "name": "Kowalski family",
                "address": "ul. Lipowa 5, Kraków",
                "plan_type_id": 1,
                "plan_type_name": "Darmowy",
                "subscription_status": "free",
                "member_count": 3,
                "created_at": "2025-01-10T09:00:00Z",
            }
        }
    )

    id: UUID
    name: str
    address: str | None = None
    plan_type_id: int
    plan_type_name: str = "Unknown"
    subscription_status: SubscriptionStatus
    subscription_start_date: date | None = None
    subscription_end_date: date | None = None
    member_count: int = 0
    created_at: datetime | None = None


# =============================================================================
# Household Member Schemas
# =============================================================================


class HouseholdMemberResponse(BaseModel):
    """Member of a household with profile data."""

    id: UUID
    user_id: UUID
    first_name: str = "Unknown"
    last_name: str = "User"
    role: HouseholdRole
    avatar_url: str | None = None
    joined_at: datetime | None = None


class HouseholdMemberAdd(BaseModel):
    """Request to add a user to a household."""

    user_id: UUID
    role: HouseholdRole = HouseholdRole.MEMBER


class HouseholdMemberRoleUpdate(BaseModel):
    """Request to change a member's role."""

    role: HouseholdRole = Field(..., description="admin, member or dashboard")
