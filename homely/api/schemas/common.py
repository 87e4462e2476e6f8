"""Shared response schemas."""

import math

from pydantic import BaseModel, Field


class PaginationMetadata(BaseModel):
    """Pagination block attached to list responses."""

    current_page: int = Field(..., ge=1, description="1-based page number")
    total_pages: int = Field(..., ge=0, description="Number of pages for the filtered set")
    total_items: int = Field(..., ge=0, description="Number of items across all pages")
    items_per_page: int = Field(..., ge=1, description="Requested page size")

    @classmethod
    def build(cls, *, page: int, limit: int, total_items: int) -> "PaginationMetadata":
        return cls(
            current_page=page,
            total_pages=math.ceil(total_items / limit) if limit else 0,
            total_items=total_items,
            items_per_page=limit,
        )


class CountResponse(BaseModel):
    """Single counter."""

    count: int = Field(..., ge=0)


class SuccessResponse(BaseModel):
    """Acknowledgement for actions that return no resource."""

    success: bool = True
    message: str | None = None
