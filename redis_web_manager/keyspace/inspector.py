"""
Value Inspector

Reads one key and returns a bounded, type-aware preview with a uniform
metadata envelope.

Pagination by type:
- hash / set: one HSCAN / SSCAN step per request. The resume token is the
  scan cursor, or "<scan cursor>:<offset>" when a single step returned more
  than preview_limit items (the next request replays that step and skips
  the items already shown).
- list: LRANGE window [start, start + limit - 1].
- zset: returned in full as an interleaved member/score list.

HyperLogLog values are stored as plain strings. A string key whose PFCOUNT
succeeds is reported as "hyperloglog" instead. A string that happens to carry
the HLL header is misreported; this is accepted.
"""

from typing import Any

import orjson
from redis.exceptions import RedisError, ResponseError

from redis_web_manager.core.config.constants import (
    CURSOR_START,
    JSON_TYPES,
    UNSUPPORTED_VALUE,
    KeyType,
)
from redis_web_manager.core.config.settings import BrowserSettings, get_settings
from redis_web_manager.core.logging.logger import get_logger
from redis_web_manager.infrastructure.redis.session import Session
from redis_web_manager.keyspace.models import ValuePreview
from redis_web_manager.keyspace.validators import (
    normalize_cursor,
    normalize_preview_limit,
    normalize_start,
    require_key,
    split_cursor,
)

logger = get_logger(__name__)


class ValueInspector:
    """
    Usage:
        inspector = ValueInspector()
        preview = await inspector.inspect(session, "user:1", preview_limit=100)
        if preview.truncated:
            nxt = await inspector.inspect(session, "user:1", cursor=preview.meta["nextCursor"])
    """

    def __init__(self, settings: BrowserSettings | None = None):
        self._settings = settings or get_settings().browser
        self._readers = {
            KeyType.STRING.value: self._read_string,
            KeyType.HASH.value: self._read_hash,
            KeyType.LIST.value: self._read_list,
            KeyType.SET.value: self._read_set,
            KeyType.ZSET.value: self._read_zset,
        }
        for json_type in JSON_TYPES:
            self._readers[json_type] = self._read_json

    async def inspect(
        self,
        session: Session,
        key: str,
        preview_limit: Any = None,
        cursor: Any = CURSOR_START,
        start: Any = 0,
    ) -> ValuePreview:
        """
        Preview a key.

        Pagination inputs are normalized, never rejected: an out-of-range
        limit is clamped, an invalid start becomes 0 and an invalid cursor
        becomes "0".

        Raises:
            KeyRequiredError: empty key
            BackendCommandError: the store rejected a read
            BackendUnreachableError: the session was lost mid-read
        """
        require_key(key)
        limit = normalize_preview_limit(
            preview_limit,
            default=self._settings.PREVIEW_LIMIT_DEFAULT,
            maximum=self._settings.PREVIEW_LIMIT_MAX,
        )
        cursor = normalize_cursor(cursor)
        start = normalize_start(start)

        async with session.operation("INSPECT", key=key) as client:
            key_type = await client.type(key)
            ttl = await client.ttl(key)
            memory_bytes = await self._memory_usage(client, key)

            meta: dict[str, Any] = {"memoryBytes": memory_bytes}

            if key_type == KeyType.NONE.value:
                return ValuePreview(type=key_type, value=None, ttl=ttl, meta=meta)

            reader = self._readers.get(key_type)
            if reader is None:
                return ValuePreview(type=key_type, value=UNSUPPORTED_VALUE, ttl=ttl, meta=meta)

            preview_type, value, extra = await reader(
                client, key, key_type=key_type, limit=limit, cursor=cursor, start=start
            )

        meta.update(extra)
        return ValuePreview(type=preview_type, value=value, ttl=ttl, meta=meta)

    @staticmethod
    async def _memory_usage(client, key: str) -> int | None:
        try:
            usage = await client.memory_usage(key)
        except RedisError as e:
            logger.debug("Memory probe failed", key=key, error=str(e))
            return None
        return int(usage) if usage is not None else None

    # =========================================================================
    # Readers: each returns (reported type, value, extra meta)
    # =========================================================================

    async def _read_string(self, client, key: str, **_):
        # Probe first: an HLL register dump is binary and is never read as text
        try:
            count = await client.pfcount(key)
        except ResponseError:
            return KeyType.STRING.value, await client.get(key), {}

        hll_bytes = await client.strlen(key)
        return (
            KeyType.HYPERLOGLOG.value,
            None,
            {"count": count, "bytes": hll_bytes, "hllBytes": hll_bytes},
        )

    async def _read_hash(self, client, key: str, limit: int, cursor: str, **_):
        total = await client.hlen(key)
        scan_cursor, offset = split_cursor(cursor)
        next_scan, fields = await client.hscan(key, cursor=scan_cursor, count=limit)

        items = list(fields.items())[offset:]
        page = dict(items[:limit])
        next_cursor = self._next_cursor(scan_cursor, offset, limit, len(items), next_scan)
        return KeyType.HASH.value, page, self._scan_meta(total, len(page), cursor, next_cursor)

    async def _read_set(self, client, key: str, limit: int, cursor: str, **_):
        total = await client.scard(key)
        scan_cursor, offset = split_cursor(cursor)
        next_scan, members = await client.sscan(key, cursor=scan_cursor, count=limit)

        remaining = list(members)[offset:]
        page = remaining[:limit]
        next_cursor = self._next_cursor(scan_cursor, offset, limit, len(remaining), next_scan)
        return KeyType.SET.value, page, self._scan_meta(total, len(page), cursor, next_cursor)

    async def _read_list(self, client, key: str, limit: int, start: int, **_):
        total = await client.llen(key)
        items = await client.lrange(key, start, start + limit - 1)
        preview_count = len(items)
        return (
            KeyType.LIST.value,
            items,
            {
                "total": total,
                "previewCount": preview_count,
                "truncated": start + preview_count < total,
                "start": start,
                "end": start + preview_count - 1,
            },
        )

    async def _read_zset(self, client, key: str, **_):
        pairs = await client.zrange(key, 0, -1, withscores=True, score_cast_func=str)
        flat = [item for pair in pairs for item in pair]
        return KeyType.ZSET.value, flat, {"total": len(pairs)}

    async def _read_json(self, client, key: str, key_type: str, **_):
        raw = await client.execute_command("JSON.GET", key)
        if isinstance(raw, (str, bytes)):
            try:
                return key_type, orjson.loads(raw), {}
            except orjson.JSONDecodeError:
                pass
        return key_type, raw, {}

    # =========================================================================
    # Scan pagination helpers
    # =========================================================================

    @staticmethod
    def _next_cursor(
        scan_cursor: int, offset: int, limit: int, available: int, next_scan: int
    ) -> str:
        # The step returned more than one page: replay it and skip what was shown
        if available > limit:
            return f"{scan_cursor}:{offset + limit}"
        return str(next_scan)

    @staticmethod
    def _scan_meta(total: int, preview_count: int, cursor: str, next_cursor: str) -> dict:
        truncated = next_cursor != CURSOR_START or (
            cursor == CURSOR_START and total > preview_count
        )
        return {
            "total": total,
            "previewCount": preview_count,
            "truncated": truncated,
            "cursor": cursor,
            "nextCursor": next_cursor,
        }
