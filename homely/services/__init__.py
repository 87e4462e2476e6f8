"""Business logic services."""

from .auth_service import AuthService
from .category_service import CategoryService, CategoryTypeService
from .dashboard_service import DashboardService
from .event_service import EventService, calculate_next_due_date
from .household_service import HouseholdMemberService, HouseholdService, validate_role
from .item_service import ItemService
from .plan_usage_service import PlanUsageService
from .supabase_auth import SupabaseAuthClient
from .system_households_service import SystemHouseholdsService
from .system_users_service import SystemUsersService
from .task_service import TaskService
from .urgency import calculate_priority_score, calculate_urgency_status

__all__ = [
    "AuthService",
    "CategoryService",
    "CategoryTypeService",
    "DashboardService",
    "EventService",
    "HouseholdMemberService",
    "HouseholdService",
    "ItemService",
    "PlanUsageService",
    "SupabaseAuthClient",
    "SystemHouseholdsService",
    "SystemUsersService",
    "TaskService",
    "calculate_next_due_date",
    "calculate_priority_score",
    "calculate_urgency_status",
    "validate_role",
]
