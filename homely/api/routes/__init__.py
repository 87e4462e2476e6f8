"""API route modules."""

from . import (
    auth,
    categories,
    category_types,
    dashboard,
    events,
    health,
    households,
    items,
    maintenance,
    system_households,
    system_users,
    tasks,
)

ROUTERS = [
    health.router,
    auth.router,
    households.router,
    category_types.router,
    categories.router,
    items.router,
    tasks.router,
    events.router,
    dashboard.router,
    maintenance.router,
    system_users.router,
    system_households.router,
]

__all__ = ["ROUTERS"]
