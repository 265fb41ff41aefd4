"""
Core Module

Foundational components: configuration, logging and exceptions.
"""

from .exceptions import (
    BackendCommandError,
    BackendUnreachableError,
    ConnectionNotFoundError,
    KeyRequiredError,
    ProfileStoreError,
    RedisManagerError,
    ValidationError,
)
from .logging import (
    clear_request_id,
    get_logger,
    set_request_id,
    setup_logging,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "set_request_id",
    "clear_request_id",
    "RedisManagerError",
    "ConnectionNotFoundError",
    "BackendUnreachableError",
    "ValidationError",
    "KeyRequiredError",
    "BackendCommandError",
    "ProfileStoreError",
]
