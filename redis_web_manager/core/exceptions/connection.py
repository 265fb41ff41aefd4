"""
Connection-Related Exceptions

Failures of the connection registry: resolving a saved profile and
establishing a backend session.
"""

from redis_web_manager.core.exceptions.base import RedisManagerError


class ConnectionRegistryError(RedisManagerError):
    """Base exception for connection registry errors."""
    pass


class ConnectionNotFoundError(ConnectionRegistryError):
    """
    Raised when a connection identifier does not resolve to a saved profile.
    """
    pass


class BackendUnreachableError(ConnectionRegistryError):
    """
    Raised when a session cannot be established or its socket dropped.

    Common causes:
    - Store is down or unreachable
    - Wrong host/port in the profile
    - Authentication failure
    - Connect retries exhausted
    """
    pass
