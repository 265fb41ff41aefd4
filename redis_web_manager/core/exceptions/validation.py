"""
Validation Exceptions

Raised before any backend call when a request payload is malformed.
"""

from redis_web_manager.core.exceptions.base import RedisManagerError


class ValidationError(RedisManagerError):
    """
    Raised when request validation fails.

    This is the base class for all validation-related errors.
    """

    def __init__(self, message: str, field: str | None = None, **details):
        if field is not None:
            details["field"] = field
        super().__init__(message, details=details)


class KeyRequiredError(ValidationError):
    """Raised when an operation is called without a key."""

    def __init__(self, message: str = "Key is required", field: str = "key"):
        super().__init__(message, field=field)
