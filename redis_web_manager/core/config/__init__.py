"""
Configuration package for Redis Web Manager.

Centralized, type-safe configuration using Pydantic Settings plus the
system-wide constants.
"""

from .constants import (
    CURSOR_START,
    HEADER_REQUEST_ID,
    JSON_TYPES,
    KeyType,
    ListDirection,
)
from .settings import (
    Settings,
    get_settings,
    reload_settings,
)

__all__ = [
    "CURSOR_START",
    "HEADER_REQUEST_ID",
    "JSON_TYPES",
    "KeyType",
    "ListDirection",
    "Settings",
    "get_settings",
    "reload_settings",
]
