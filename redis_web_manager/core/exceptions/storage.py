"""
Profile Storage Exceptions
"""

from redis_web_manager.core.exceptions.base import RedisManagerError


class ProfileStoreError(RedisManagerError):
    """
    Raised when the saved connection profiles cannot be written.

    Reads never raise: an unreadable file is treated as an empty store.
    """
    pass
