"""
Keyspace Scanner

Bounded, deduplicated enumeration of keys matching a pattern.

Algorithm:
1. SCAN cursor MATCH pattern COUNT page_size until the cursor returns to 0
   or hard_cap unique keys have been collected
2. Deduplicate (SCAN may return a key more than once)
3. One pipelined TYPE per key: O(1) round trips for classification

Reaching hard_cap is silent. Callers needing exhaustive enumeration must
narrow the pattern.
"""

from redis_web_manager.core.config.constants import KeyType
from redis_web_manager.core.config.settings import BrowserSettings, get_settings
from redis_web_manager.core.logging.logger import get_logger
from redis_web_manager.infrastructure.redis.session import Session
from redis_web_manager.keyspace.models import KeyInfo

logger = get_logger(__name__)


class KeyspaceScanner:
    """
    Usage:
        scanner = KeyspaceScanner()
        keys = await scanner.scan(session, "user:*")
    """

    def __init__(self, settings: BrowserSettings | None = None):
        self._settings = settings or get_settings().browser

    async def scan(
        self,
        session: Session,
        pattern: str | None = "*",
        hard_cap: int | None = None,
        page_size: int | None = None,
    ) -> list[KeyInfo]:
        pattern = pattern or "*"
        hard_cap = hard_cap or self._settings.SCAN_HARD_CAP
        page_size = page_size or self._settings.SCAN_PAGE_SIZE

        # dict as an insertion-ordered set
        found: dict[str, None] = {}
        steps = 0

        async with session.operation("SCAN", pattern=pattern) as client:
            cursor = 0
            while True:
                cursor, batch = await client.scan(cursor=cursor, match=pattern, count=page_size)
                steps += 1
                for key in batch:
                    found[key] = None
                    if len(found) >= hard_cap:
                        break
                if cursor == 0 or len(found) >= hard_cap:
                    break

            if not found:
                return []

            keys = list(found)
            types = await self._lookup_types(client, keys)

        logger.debug(
            "Keyspace scanned",
            display_key=session.display_key,
            pattern=pattern,
            keys=len(keys),
            steps=steps,
            capped=len(keys) >= hard_cap,
        )
        return [KeyInfo(key=key, type=key_type) for key, key_type in zip(keys, types)]

    @staticmethod
    async def _lookup_types(client, keys: list[str]) -> list[str]:
        """TYPE for every key in one pipeline; a failed lookup yields "unknown"."""
        pipe = client.pipeline(transaction=False)
        for key in keys:
            pipe.type(key)
        results = await pipe.execute(raise_on_error=False)

        return [
            KeyType.UNKNOWN.value if isinstance(result, Exception) or result is None else result
            for result in results
        ]
