"""
Backend Command Exceptions

Raised when the store accepted the connection but rejected a command,
e.g. WRONGTYPE or an index out of range.
"""

from redis_web_manager.core.exceptions.base import RedisManagerError


class BackendCommandError(RedisManagerError):
    """
    Raised when the store rejects a command.

    Common causes:
    - Operation against a key holding the wrong kind of value
    - LSET index out of range
    - Module command (JSON.*) not loaded on the server
    - RENAME of a missing key
    """
    pass
