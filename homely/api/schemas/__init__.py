"""API schemas for request/response validation."""

from .auth import LoginRequest, RefreshTokenRequest, TokenResponse, UserInfo
from .common import CountResponse, PaginationMetadata, SuccessResponse
from .event import EventCreate, EventResponse, EventUpdate
from .household import HouseholdMemberResponse, HouseholdResponse
from .task import TaskCreate, TaskInterval, TaskListResponse, TaskResponse, TaskUpdate

__all__ = [
    "CountResponse",
    "EventCreate",
    "EventResponse",
    "EventUpdate",
    "HouseholdMemberResponse",
    "HouseholdResponse",
    "LoginRequest",
    "PaginationMetadata",
    "RefreshTokenRequest",
    "SuccessResponse",
    "TaskCreate",
    "TaskInterval",
    "TaskListResponse",
    "TaskResponse",
    "TaskUpdate",
    "TokenResponse",
    "UserInfo",
]
