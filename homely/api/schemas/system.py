"""Pydantic schemas for the system administration endpoints."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from homely.models.enums import HouseholdRole, SubscriptionStatus

# =============================================================================
# System Users
# =============================================================================


class SystemUser(BaseModel):
    """User row in the admin console."""

    id: UUID
    first_name: str
    last_name: str
    email: str | None = None
    avatar_url: str | None = None
    role: HouseholdRole = HouseholdRole.MEMBER
    household_id: UUID | None = None
    household_name: str = "No Household"
    last_active_at: datetime | None = None
    created_at: datetime | None = None


class UserHousehold(BaseModel):
    """A household membership of a user."""

    household_id: UUID
    household_name: str
    role: HouseholdRole
    joined_at: datetime | None = None


class SystemUserDetails(SystemUser):
    phone: str | None = None
    preferred_language: str | None = None
    timezone: str | None = None
    households: list[UserHousehold] = Field(default_factory=list)


class UserSearchResponse(BaseModel):
    users: list[SystemUser]
    total_count: int
    page: int
    page_size: int
    total_pages: int


class CreateUserRequest(BaseModel):
    """Create an auth user, its profile and its first membership."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "email": "jan@example.com",
                "password": "Str0ng-Passw0rd",
                "first_name": "Jan",
                "last_name": "Kowalski",
                "household_id": "0b7c1c0e-3f3a-4a4e-8f1d-2f0a9c6e2d10",
                "role": "member",
            }
        }
    )

    email: str = Field(..., pattern=r"^[^@\s]+@[^@\s]+$", max_length=255)
    password: str = Field(..., min_length=8, max_length=255)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    household_id: UUID
    role: HouseholdRole = HouseholdRole.MEMBER


class UpdateUserRoleRequest(BaseModel):
    household_id: UUID
    role: HouseholdRole


class MoveUserRequest(BaseModel):
    from_household_id: UUID
    to_household_id: UUID


class AddUserHouseholdRequest(BaseModel):
    household_id: UUID
    role: HouseholdRole = HouseholdRole.MEMBER


class UserActivity(BaseModel):
    timestamp: datetime
    action: str
    details: str | None = None


# =============================================================================
# System Households
# =============================================================================


class SystemHouseholdMember(BaseModel):
    user_id: UUID
    first_name: str = "Unknown"
    last_name: str = "User"
    role: HouseholdRole
    joined_at: datetime | None = None


class SystemHousehold(BaseModel):
    """Household row in the admin console."""

    id: UUID
    name: str
    address: str | None = None
    plan_type_id: int
    plan_type_name: str = "Unknown"
    subscription_status: SubscriptionStatus
    member_count: int = 0
    created_at: datetime | None = None


class SystemHouseholdDetails(SystemHousehold):
    members: list[SystemHouseholdMember] = Field(default_factory=list)


class HouseholdSearchResponse(BaseModel):
    households: list[SystemHousehold]
    total_count: int
    page: int
    page_size: int
    total_pages: int


class HouseholdStats(BaseModel):
    total_households: int = 0
    active_households: int = 0
    free_households: int = 0
    premium_households: int = 0
    total_members: int = 0
    total_items: int = 0
    total_tasks: int = 0


class CreateHouseholdRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    address: str | None = Field(default=None, max_length=500)
    plan_type_id: int = Field(default=1, ge=1)
    admin_user_id: UUID


class UpdateHouseholdRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    address: str | None = Field(default=None, max_length=500)
    plan_type_id: int | None = Field(default=None, ge=1)
    subscription_status: SubscriptionStatus | None = None


class AssignAdminRequest(BaseModel):
    user_id: UUID
