"""
Mutation Layer

Type-specific writes addressed by a SessionTarget.

Every operation validates its payload before the session is acquired, so a
malformed request never reaches the store and never opens a socket. An
optional TTL is applied with a separate EXPIRE after the primary write;
the pair is not atomic.
"""

from typing import Any
from uuid import uuid4

import orjson

from redis_web_manager.core.config.constants import (
    JSON_TYPES,
    LIST_DELETE_MARKER_PREFIX,
    KeyType,
    ListDirection,
)
from redis_web_manager.core.exceptions import ValidationError
from redis_web_manager.core.logging.logger import get_logger
from redis_web_manager.infrastructure.redis.registry import ConnectionRegistry
from redis_web_manager.infrastructure.redis.session import Session
from redis_web_manager.keyspace.models import SessionTarget
from redis_web_manager.keyspace.validators import (
    parse_ttl,
    require_int,
    require_key,
    require_string,
    require_string_list,
)

logger = get_logger(__name__)


class MutationService:
    """
    Usage:
        mutations = MutationService(registry)
        await mutations.list_push(SessionTarget("local"), "queue", ["a", "b"], direction="left")
    """

    def __init__(self, registry: ConnectionRegistry):
        self._registry = registry

    async def _session(self, target: SessionTarget) -> Session:
        return await self._registry.acquire(target.connection_id, target.db)

    @staticmethod
    async def _apply_ttl(client, key: str, ttl: int | None) -> None:
        if ttl:
            await client.expire(key, ttl)

    # =========================================================================
    # Whole keys
    # =========================================================================

    async def set_value(
        self, target: SessionTarget, key: Any, key_type: Any, value: Any, ttl: Any = None
    ) -> None:
        """
        Write a whole value.

        string: SET. hash: HSET of every field (existing fields not named are
        kept). json / ReJSON-RL: JSON.SET at the root path; a string value is
        sent as JSON text, anything else is serialized first.
        """
        if not key or not key_type:
            raise ValidationError("Key and Type are required", field="key")
        require_key(key)
        ttl = parse_ttl(ttl)

        if key_type == KeyType.STRING.value:
            require_string(value, "Value must be string for string type")
            command = "SET"
        elif key_type == KeyType.HASH.value:
            mapping = self._hash_mapping(value)
            command = "HSET"
        elif key_type in JSON_TYPES:
            document = value if isinstance(value, str) else orjson.dumps(value).decode()
            command = "JSON.SET"
        else:
            raise ValidationError(f"Setting type {key_type} is not yet supported", field="type")

        session = await self._session(target)
        async with session.operation(command, key=key) as client:
            if command == "SET":
                await client.set(key, value)
            elif command == "HSET":
                await client.hset(key, mapping=mapping)
            else:
                await client.execute_command("JSON.SET", key, "$", document)
            await self._apply_ttl(client, key, ttl)

        logger.info("Value written", key=key, type=key_type, ttl=ttl)

    @staticmethod
    def _hash_mapping(value: Any) -> dict[str, str]:
        if not isinstance(value, dict):
            raise ValidationError("Value must be object for hash type", field="value")
        if not value:
            raise ValidationError("Hash value must contain at least one field", field="value")

        mapping = {}
        for name, item in value.items():
            if isinstance(item, (dict, list)) or item is None:
                raise ValidationError(
                    f"Hash field {name} must be a scalar value", field="value"
                )
            mapping[name] = str(item)
        return mapping

    async def delete_key(self, target: SessionTarget, key: Any) -> int:
        """Returns the number of keys removed (0 when already absent)."""
        require_key(key)
        session = await self._session(target)
        async with session.operation("DEL", key=key) as client:
            return await client.delete(key)

    async def rename_key(self, target: SessionTarget, old_key: Any, new_key: Any) -> None:
        if not isinstance(old_key, str) or not isinstance(new_key, str) or not old_key or not new_key:
            raise ValidationError("Old key and new key are required", field="newKey")

        session = await self._session(target)
        async with session.operation("RENAME", key=old_key, new_key=new_key) as client:
            await client.rename(old_key, new_key)

    # =========================================================================
    # Hash
    # =========================================================================

    async def hash_set_field(
        self, target: SessionTarget, key: Any, field: Any, value: Any, ttl: Any = None
    ) -> None:
        require_key(key)
        require_key(field, message="Field is required", field="field")
        require_string(value, "Value must be string")
        ttl = parse_ttl(ttl)

        session = await self._session(target)
        async with session.operation("HSET", key=key) as client:
            await client.hset(key, field, value)
            await self._apply_ttl(client, key, ttl)

    async def hash_delete_field(self, target: SessionTarget, key: Any, field: Any) -> None:
        require_key(key)
        require_key(field, message="Field is required", field="field")

        session = await self._session(target)
        async with session.operation("HDEL", key=key) as client:
            await client.hdel(key, field)

    # =========================================================================
    # List
    # =========================================================================

    async def list_push(
        self,
        target: SessionTarget,
        key: Any,
        values: Any,
        direction: Any = ListDirection.RIGHT.value,
        ttl: Any = None,
    ) -> int:
        """Append (right) or prepend (left). Returns the new list length."""
        require_key(key)
        require_string_list(values, "Values must be a string array", field="values", allow_empty=False)
        ttl = parse_ttl(ttl)
        left = direction == ListDirection.LEFT.value

        session = await self._session(target)
        async with session.operation("LPUSH" if left else "RPUSH", key=key) as client:
            length = await (client.lpush(key, *values) if left else client.rpush(key, *values))
            await self._apply_ttl(client, key, ttl)
        return length

    async def list_set_at(self, target: SessionTarget, key: Any, index: Any, value: Any) -> None:
        require_key(key)
        index = require_int(index, "Index must be integer", field="index")
        require_string(value, "Value must be string")

        session = await self._session(target)
        async with session.operation("LSET", key=key, index=index) as client:
            await client.lset(key, index, value)

    async def list_remove(self, target: SessionTarget, key: Any, value: Any, count: Any = 0) -> int:
        """
        LREM semantics: count > 0 from head, < 0 from tail, 0 all occurrences.

        A missing or non-integer count means 0.
        """
        require_key(key)
        require_string(value, "Value must be string")
        try:
            count = require_int(count, "Count must be integer", field="count")
        except ValidationError:
            count = 0

        session = await self._session(target)
        async with session.operation("LREM", key=key) as client:
            return await client.lrem(key, count, value)

    async def list_delete_at(self, target: SessionTarget, key: Any, index: Any) -> None:
        """
        Delete the element at an index.

        The store has no delete-by-index: the element is overwritten with a
        unique marker which is then removed with LREM 1. Not atomic; a
        concurrent writer may observe the marker.
        """
        require_key(key)
        index = require_int(index, "Index must be integer", field="index")
        marker = f"{LIST_DELETE_MARKER_PREFIX}{uuid4()}"

        session = await self._session(target)
        async with session.operation("LDELAT", key=key, index=index) as client:
            await client.lset(key, index, marker)
            await client.lrem(key, 1, marker)

    # =========================================================================
    # Set
    # =========================================================================

    async def set_add(self, target: SessionTarget, key: Any, members: Any, ttl: Any = None) -> int:
        require_key(key)
        require_string_list(members, "Members must be a string array", field="members", allow_empty=False)
        ttl = parse_ttl(ttl)

        session = await self._session(target)
        async with session.operation("SADD", key=key) as client:
            added = await client.sadd(key, *members)
            await self._apply_ttl(client, key, ttl)
        return added

    async def set_remove(self, target: SessionTarget, key: Any, members: Any) -> int:
        require_key(key)
        require_string_list(members, "Members must be a string array", field="members", allow_empty=False)

        session = await self._session(target)
        async with session.operation("SREM", key=key) as client:
            return await client.srem(key, *members)

    # =========================================================================
    # HyperLogLog
    # =========================================================================

    @staticmethod
    async def _hll_summary(client, key: str) -> dict[str, int]:
        count = await client.pfcount(key)
        size = await client.strlen(key)
        return {"count": count, "bytes": size}

    async def hll_add(
        self, target: SessionTarget, key: Any, elements: Any, ttl: Any = None
    ) -> dict[str, Any]:
        """PFADD. An empty element list only creates the key."""
        require_key(key)
        require_string_list(elements, "Elements must be a string array", field="elements")
        ttl = parse_ttl(ttl)

        session = await self._session(target)
        async with session.operation("PFADD", key=key) as client:
            changed = await client.pfadd(key, *elements)
            await self._apply_ttl(client, key, ttl)
            summary = await self._hll_summary(client, key)
        return {"changed": bool(changed), **summary}

    async def hll_count(self, target: SessionTarget, key: Any) -> dict[str, int]:
        require_key(key)
        session = await self._session(target)
        async with session.operation("PFCOUNT", key=key) as client:
            return await self._hll_summary(client, key)

    async def hll_reset(
        self, target: SessionTarget, key: Any, elements: Any = None, ttl: Any = None
    ) -> dict[str, int]:
        """Delete the key, then re-seed it with elements when any are given."""
        require_key(key)
        if elements is not None:
            require_string_list(elements, "Elements must be a string array", field="elements")
        ttl = parse_ttl(ttl)

        session = await self._session(target)
        async with session.operation("PFRESET", key=key) as client:
            await client.delete(key)
            if elements:
                await client.pfadd(key, *elements)
                await self._apply_ttl(client, key, ttl)
            return await self._hll_summary(client, key)

    async def hll_merge(
        self, target: SessionTarget, destination_key: Any, source_keys: Any, ttl: Any = None
    ) -> dict[str, int]:
        require_key(destination_key, message="Destination key is required", field="destinationKey")
        require_string_list(source_keys, "Source keys must be a string array", field="sourceKeys")
        if not source_keys:
            raise ValidationError("Source keys is empty", field="sourceKeys")
        ttl = parse_ttl(ttl)

        session = await self._session(target)
        async with session.operation("PFMERGE", key=destination_key) as client:
            await client.pfmerge(destination_key, *source_keys)
            await self._apply_ttl(client, destination_key, ttl)
            return await self._hll_summary(client, destination_key)
