"""
Request Validators

Two kinds of checks, applied before any backend call:

- require_* functions fail fast with a ValidationError naming the problem
  ("Key is required", "Members must be a string array", ...).
- normalize_* functions never fail: out-of-range pagination parameters are
  silently replaced by a safe value.
"""

import math
import re
from typing import Any

from redis_web_manager.core.config.constants import CURSOR_OFFSET_SEPARATOR, CURSOR_START
from redis_web_manager.core.exceptions import KeyRequiredError, ValidationError

_CURSOR_PATTERN = re.compile(r"^\d+(:\d+)?$")


def _is_int(value: Any) -> bool:
    # bool is an int subclass but never a valid index/count
    return isinstance(value, int) and not isinstance(value, bool)


# =============================================================================
# Fail-fast checks
# =============================================================================


def require_key(key: Any, message: str = "Key is required", field: str = "key") -> str:
    if not isinstance(key, str) or not key:
        raise KeyRequiredError(message, field=field)
    return key


def require_string(value: Any, message: str, field: str = "value") -> str:
    if not isinstance(value, str):
        raise ValidationError(message, field=field)
    return value


def require_string_list(
    values: Any, message: str, field: str, allow_empty: bool = True
) -> list[str]:
    if not isinstance(values, list) or any(not isinstance(v, str) for v in values):
        raise ValidationError(message, field=field)
    if not allow_empty and not values:
        raise ValidationError(f"{field} must not be empty", field=field)
    return values


def require_int(value: Any, message: str, field: str) -> int:
    if _is_int(value):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    raise ValidationError(message, field=field)


def parse_ttl(ttl: Any) -> int | None:
    """
    Whole seconds to expire after a write, or None for no expiry.

    Absent, -1 and any non-positive value mean "no expiry".
    """
    if ttl is None:
        return None
    seconds = require_int(ttl, "TTL must be an integer number of seconds", field="ttl")
    return seconds if seconds > 0 else None


def parse_db(db: Any) -> int | None:
    """Database override: None, or a non-negative integer (digit strings accepted)."""
    if db is None or db == "":
        return None
    if isinstance(db, str) and db.strip().isdigit():
        return int(db.strip())
    if _is_int(db) and db >= 0:
        return db
    raise ValidationError("DB index must be a non-negative integer", field="db")


# =============================================================================
# Silent normalization
# =============================================================================


def normalize_preview_limit(raw: Any, default: int, maximum: int) -> int:
    """Clamp to [1, maximum]; anything that is not a finite number gives the default."""
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        return default
    if isinstance(raw, float) and not math.isfinite(raw):
        return default
    return max(1, min(int(math.floor(raw)), maximum))


def normalize_start(raw: Any) -> int:
    """List start offset: a non-negative integer, otherwise 0."""
    if _is_int(raw) and raw >= 0:
        return raw
    if isinstance(raw, float) and raw.is_integer() and raw >= 0:
        return int(raw)
    return 0


def normalize_cursor(raw: Any) -> str:
    """Resume token: "<scan cursor>" or "<scan cursor>:<offset>", otherwise "0"."""
    if _is_int(raw) and raw >= 0:
        return str(raw)
    if isinstance(raw, str) and _CURSOR_PATTERN.match(raw):
        return raw
    return CURSOR_START


def split_cursor(cursor: str) -> tuple[int, int]:
    """Split a normalized resume token into (scan cursor, offset within that scan step)."""
    scan_cursor, _, offset = cursor.partition(CURSOR_OFFSET_SEPARATOR)
    return int(scan_cursor), int(offset or 0)
