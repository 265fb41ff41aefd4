"""
System Constants and Enumerations

Single source of truth for the native type names reported by the store,
the cursor sentinel used by every scan-style pagination, and the HTTP
header used for request correlation.
"""

from enum import Enum

# ============================================================================
# Native and reclassified key types
# ============================================================================


class KeyType(str, Enum):
    """
    Key types as reported by TYPE, plus the reclassified HyperLogLog type.

    HYPERLOGLOG is never reported by the store itself: it is stored as a plain
    string and only recognized by a successful PFCOUNT probe.
    """

    STRING = "string"
    HASH = "hash"
    LIST = "list"
    SET = "set"
    ZSET = "zset"
    STREAM = "stream"
    JSON = "json"
    REJSON = "ReJSON-RL"
    NONE = "none"
    HYPERLOGLOG = "hyperloglog"
    UNKNOWN = "unknown"


# Both names the RedisJSON module has used for its type across versions
JSON_TYPES = frozenset({KeyType.JSON.value, KeyType.REJSON.value})


class ListDirection(str, Enum):
    """End of a list that LPUSH/RPUSH writes to."""

    LEFT = "left"
    RIGHT = "right"


# ============================================================================
# Pagination
# ============================================================================

# "0" means both "start from the beginning" and "no more pages"
CURSOR_START = "0"

# Separator between the scan cursor and the in-step offset of a resume token
CURSOR_OFFSET_SEPARATOR = ":"

UNSUPPORTED_VALUE = "Unsupported type for viewing"

# Prefix of the sentinel written by delete-by-index before LREM
LIST_DELETE_MARKER_PREFIX = "__redis_ui_del__:"

# ============================================================================
# HTTP
# ============================================================================

HEADER_REQUEST_ID = "X-Request-ID"
