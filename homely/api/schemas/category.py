"""Pydantic schemas for category type and category endpoints."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

# =============================================================================
# Category Type Schemas
# =============================================================================


class CategoryTypeCreate(BaseModel):
    """Schema for creating a category type."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {"name": "Pojazdy", "description": "Cars, bikes and scooters", "sort_order": 1}
        }
    )

    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=1000)
    sort_order: int = Field(default=0, ge=0)
    household_id: UUID | None = Field(
        default=None, description="Owning household; omit for a shared type"
    )


class CategoryTypeUpdate(BaseModel):
    """Schema for updating a category type. Omitted fields are left unchanged."""

    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=1000)
    sort_order: int | None = Field(default=None, ge=0)
    is_active: bool | None = None


class CategoryTypeResponse(BaseModel):
    """Category type returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    household_id: UUID | None = None
    name: str
    description: str | None = None
    sort_order: int = 0
    is_active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None


# =============================================================================
# Category Schemas
# =============================================================================


class CategoryCreate(BaseModel):
    """Schema for creating a category."""

    model_config = ConfigDict(
        json_schema_extra={"example": {"category_type_id": 1, "name": "Samochód", "sort_order": 0}}
    )

    category_type_id: int | None = None
    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=1000)
    sort_order: int = Field(default=0, ge=0)


class CategoryUpdate(BaseModel):
    """Schema for updating a category. Omitted fields are left unchanged."""

    category_type_id: int | None = None
    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=1000)
    sort_order: int | None = Field(default=None, ge=0)
    is_active: bool | None = None


class CategoryResponse(BaseModel):
    """Category returned by the API, with its type's name."""

    id: int
    category_type_id: int | None = None
    category_type_name: str | None = None
    name: str
    description: str | None = None
    sort_order: int = 0
    is_active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None


class CategorySortOrderItem(BaseModel):
    """New position for one category."""

    id: int
    sort_order: int = Field(..., ge=0)
