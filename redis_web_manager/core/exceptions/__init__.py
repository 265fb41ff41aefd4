"""
Exception Module

Structured exception hierarchy for the Redis Web Manager backend.
All exceptions are organized by theme.

Module Structure:
-----------------
- **base.py**: RedisManagerError base class
- **connection.py**: Connection registry exceptions
- **validation.py**: Request validation exceptions
- **backend.py**: Store command rejections
- **storage.py**: Saved profile persistence exceptions

Usage:
------
```python
from redis_web_manager.core.exceptions import BackendUnreachableError, ValidationError
```
"""

from redis_web_manager.core.exceptions.backend import BackendCommandError
from redis_web_manager.core.exceptions.base import RedisManagerError
from redis_web_manager.core.exceptions.connection import (
    BackendUnreachableError,
    ConnectionNotFoundError,
    ConnectionRegistryError,
)
from redis_web_manager.core.exceptions.storage import ProfileStoreError
from redis_web_manager.core.exceptions.validation import KeyRequiredError, ValidationError

__all__ = [
    # Base
    "RedisManagerError",
    # Connection
    "ConnectionRegistryError",
    "ConnectionNotFoundError",
    "BackendUnreachableError",
    # Validation
    "ValidationError",
    "KeyRequiredError",
    # Backend
    "BackendCommandError",
    # Storage
    "ProfileStoreError",
]
