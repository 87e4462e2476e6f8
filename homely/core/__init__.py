"""Core infrastructure: configuration, database, logging and errors."""

from homely.core.config import Settings, get_settings, mask_connection_string
from homely.core.database import (
    Base,
    close_db,
    get_db,
    get_engine,
    get_session_factory,
    init_db,
)
from homely.core.logging import get_logger, get_request_id, set_request_id, setup_logging

__all__ = [
    "Base",
    "Settings",
    "close_db",
    "get_db",
    "get_engine",
    "get_logger",
    "get_request_id",
    "get_session_factory",
    "get_settings",
    "init_db",
    "mask_connection_string",
    "set_request_id",
    "setup_logging",
]
