"""
Unit Tests for ValueInspector

Tests every type branch, HyperLogLog reclassification, the metadata
envelope and termination of hash/set pagination.
"""

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import ResponseError

from redis_web_manager.core.config.constants import UNSUPPORTED_VALUE
from redis_web_manager.core.config.settings import BrowserSettings
from redis_web_manager.core.exceptions import (
    BackendCommandError,
    BackendUnreachableError,
    KeyRequiredError,
)
from redis_web_manager.infrastructure.redis.session import SessionState
from redis_web_manager.keyspace.inspector import ValueInspector
from tests.test_fixtures.backend_factory import BackendTestFactory

NOT_HLL = ResponseError("WRONGTYPE Key is not a valid HyperLogLog string value.")


@pytest.fixture
def inspector():
    return ValueInspector(BrowserSettings())


async def _read_all_pages(inspector, session, key, limit, max_pages=50):
    """Follow nextCursor until truncated is false; returns the pages' metas and values."""
    pages = []
    cursor = "0"
    for _ in range(max_pages):
        preview = await inspector.inspect(session, key, preview_limit=limit, cursor=cursor)
        pages.append(preview)
        if not preview.truncated:
            return pages
        cursor = preview.meta["nextCursor"]
    raise AssertionError("pagination did not terminate")


@pytest.mark.unit
class TestStringAndHyperLogLog:
    @pytest.mark.asyncio
    async def test_plain_string(self, inspector, session, mock_client):
        mock_client.type.return_value = "string"
        mock_client.get.return_value = "hello"
        mock_client.pfcount.side_effect = NOT_HLL

        preview = await inspector.inspect(session, "greeting")

        assert preview.to_dict() == {
            "type": "string",
            "value": "hello",
            "ttl": -1,
            "meta": {"memoryBytes": 64},
        }

    @pytest.mark.asyncio
    async def test_hyperloglog_reclassified(self, inspector, session, mock_client):
        mock_client.type.return_value = "string"
        mock_client.pfcount.return_value = 3
        mock_client.strlen.return_value = 90

        preview = await inspector.inspect(session, "visitors")

        assert preview.type == "hyperloglog"
        assert preview.value is None
        assert preview.meta == {"memoryBytes": 64, "count": 3, "bytes": 90, "hllBytes": 90}

    @pytest.mark.asyncio
    async def test_binary_hyperloglog_never_read_as_text(self, inspector, session, mock_client):
        mock_client.type.return_value = "string"
        mock_client.get.side_effect = UnicodeDecodeError(
            "utf-8", b"HYLL\x01\x00\x00\x00\x80", 8, 9, "invalid start byte"
        )
        mock_client.pfcount.return_value = 2
        mock_client.strlen.return_value = 21

        preview = await inspector.inspect(session, "visits:unique")

        assert preview.to_dict() == {
            "type": "hyperloglog",
            "value": None,
            "ttl": -1,
            "meta": {"memoryBytes": 64, "count": 2, "bytes": 21, "hllBytes": 21},
        }
        mock_client.get.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_plain_string_read_after_failed_probe(self, inspector, session, mock_client):
        mock_client.type.return_value = "string"
        mock_client.pfcount.side_effect = NOT_HLL
        mock_client.get.return_value = "hello"

        await inspector.inspect(session, "greeting")

        mock_client.pfcount.assert_awaited_once_with("greeting")
        mock_client.get.assert_awaited_once_with("greeting")

    @pytest.mark.asyncio
    async def test_memory_probe_failure_is_swallowed(self, inspector, session, mock_client):
        mock_client.type.return_value = "string"
        mock_client.get.return_value = "v"
        mock_client.pfcount.side_effect = NOT_HLL
        mock_client.memory_usage.side_effect = ResponseError("unknown command 'MEMORY'")

        preview = await inspector.inspect(session, "k")

        assert preview.meta["memoryBytes"] is None
        assert preview.value == "v"

    @pytest.mark.asyncio
    async def test_ttl_reported(self, inspector, session, mock_client):
        mock_client.type.return_value = "string"
        mock_client.ttl.return_value = 120
        mock_client.pfcount.side_effect = NOT_HLL

        assert (await inspector.inspect(session, "k")).ttl == 120


@pytest.mark.unit
class TestHashPagination:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("step", [1000, 70, 130])
    async def test_pages_terminate_and_cover_every_field(self, inspector, session, mock_client, step):
        fields = {f"f{i}": str(i) for i in range(250)}
        mock_client.type.return_value = "hash"
        mock_client.hlen.return_value = 250
        mock_client.hscan.side_effect = BackendTestFactory.paged_hscan(fields, step)

        pages = await _read_all_pages(inspector, session, "big", limit=100)

        seen = {}
        for page in pages:
            assert page.meta["previewCount"] <= 100
            assert page.meta["total"] == 250
            seen.update(page.value)
        assert seen == fields
        assert pages[-1].meta["nextCursor"] == "0"

    @pytest.mark.asyncio
    async def test_first_page_of_large_hash(self, inspector, session, mock_client):
        fields = {f"f{i}": str(i) for i in range(250)}
        mock_client.type.return_value = "hash"
        mock_client.hlen.return_value = 250
        mock_client.hscan.side_effect = BackendTestFactory.paged_hscan(fields, 1000)

        preview = await inspector.inspect(session, "big", preview_limit=100)

        assert len(preview.value) == 100
        assert preview.meta["truncated"] is True
        assert preview.meta["cursor"] == "0"
        assert preview.meta["nextCursor"] == "0:100"

    @pytest.mark.asyncio
    async def test_small_hash_not_truncated(self, inspector, session, mock_client):
        mock_client.type.return_value = "hash"
        mock_client.hlen.return_value = 2
        mock_client.hscan.return_value = (0, {"a": "1", "b": "2"})

        preview = await inspector.inspect(session, "small")

        assert preview.value == {"a": "1", "b": "2"}
        assert preview.meta["truncated"] is False
        assert preview.meta["nextCursor"] == "0"

    @pytest.mark.asyncio
    async def test_invalid_cursor_restarts(self, inspector, session, mock_client):
        mock_client.type.return_value = "hash"
        mock_client.hlen.return_value = 1
        mock_client.hscan.return_value = (0, {"a": "1"})

        preview = await inspector.inspect(session, "h", cursor="not-a-cursor")

        assert preview.meta["cursor"] == "0"
        assert mock_client.hscan.await_args.kwargs["cursor"] == 0


@pytest.mark.unit
class TestSetPagination:
    @pytest.mark.asyncio
    async def test_set_pages_cover_every_member(self, inspector, session, mock_client):
        members = [f"m{i}" for i in range(120)]
        mock_client.type.return_value = "set"
        mock_client.scard.return_value = 120
        mock_client.sscan.side_effect = BackendTestFactory.paged_sscan(members, 500)

        pages = await _read_all_pages(inspector, session, "s", limit=50)

        collected = [m for page in pages for m in page.value]
        assert sorted(collected) == sorted(members)
        assert len(pages) == 3


@pytest.mark.unit
class TestListWindow:
    @pytest.mark.asyncio
    async def test_window_metadata(self, inspector, session, mock_client):
        mock_client.type.return_value = "list"
        mock_client.llen.return_value = 10
        mock_client.lrange.return_value = ["i8", "i9"]

        preview = await inspector.inspect(session, "l", preview_limit=5, start=8)

        mock_client.lrange.assert_awaited_once_with("l", 8, 12)
        meta = preview.meta
        assert meta["start"] + meta["previewCount"] == meta["end"] + 1
        assert meta["truncated"] is False
        assert meta["end"] == 9

    @pytest.mark.asyncio
    async def test_truncated_when_more_remain(self, inspector, session, mock_client):
        mock_client.type.return_value = "list"
        mock_client.llen.return_value = 10
        mock_client.lrange.return_value = ["a", "b", "c"]

        preview = await inspector.inspect(session, "l", preview_limit=3)

        assert preview.meta["truncated"] is True
        assert preview.meta["end"] == 2

    @pytest.mark.asyncio
    async def test_negative_start_reset(self, inspector, session, mock_client):
        mock_client.type.return_value = "list"
        mock_client.llen.return_value = 0
        mock_client.lrange.return_value = []

        preview = await inspector.inspect(session, "l", start=-4)

        assert preview.meta["start"] == 0
        assert preview.meta["end"] == -1

    @pytest.mark.asyncio
    async def test_preview_limit_clamped(self, inspector, session, mock_client):
        mock_client.type.return_value = "list"
        mock_client.llen.return_value = 0
        mock_client.lrange.return_value = []

        await inspector.inspect(session, "l", preview_limit=50_000)

        mock_client.lrange.assert_awaited_once_with("l", 0, 999)


@pytest.mark.unit
class TestOtherTypes:
    @pytest.mark.asyncio
    async def test_zset_interleaved(self, inspector, session, mock_client):
        mock_client.type.return_value = "zset"
        mock_client.zrange.return_value = [("alice", "1"), ("bob", "2.5")]

        preview = await inspector.inspect(session, "z")

        assert preview.value == ["alice", "1", "bob", "2.5"]
        assert mock_client.zrange.await_args.kwargs["withscores"] is True

    @pytest.mark.asyncio
    async def test_json_document_parsed(self, inspector, session, mock_client):
        mock_client.type.return_value = "ReJSON-RL"
        mock_client.execute_command.return_value = '{"name": "x", "tags": [1, 2]}'

        preview = await inspector.inspect(session, "doc")

        mock_client.execute_command.assert_awaited_once_with("JSON.GET", "doc")
        assert preview.type == "ReJSON-RL"
        assert preview.value == {"name": "x", "tags": [1, 2]}

    @pytest.mark.asyncio
    async def test_unparseable_json_returned_raw(self, inspector, session, mock_client):
        mock_client.type.return_value = "ReJSON-RL"
        mock_client.execute_command.return_value = "{broken"

        preview = await inspector.inspect(session, "doc")

        assert preview.value == "{broken"

    @pytest.mark.asyncio
    async def test_missing_key(self, inspector, session, mock_client):
        mock_client.type.return_value = "none"
        mock_client.ttl.return_value = -2
        mock_client.memory_usage.return_value = None

        preview = await inspector.inspect(session, "gone")

        assert preview.to_dict() == {
            "type": "none",
            "value": None,
            "ttl": -2,
            "meta": {"memoryBytes": None},
        }

    @pytest.mark.asyncio
    async def test_unsupported_type(self, inspector, session, mock_client):
        mock_client.type.return_value = "stream"

        preview = await inspector.inspect(session, "events")

        assert preview.type == "stream"
        assert preview.value == UNSUPPORTED_VALUE
        assert "memoryBytes" in preview.meta


@pytest.mark.unit
class TestInspectorErrors:
    @pytest.mark.asyncio
    async def test_empty_key(self, inspector, session, mock_client):
        with pytest.raises(KeyRequiredError, match="Key is required"):
            await inspector.inspect(session, "")

        mock_client.type.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_rejected_read(self, inspector, session, mock_client):
        mock_client.type.return_value = "hash"
        mock_client.hlen.side_effect = ResponseError("NOPERM")

        with pytest.raises(BackendCommandError):
            await inspector.inspect(session, "h")

    @pytest.mark.asyncio
    async def test_connection_lost_marks_session(self, inspector, session, mock_client):
        mock_client.type.side_effect = RedisConnectionError("reset")

        with pytest.raises(BackendUnreachableError):
            await inspector.inspect(session, "h")

        assert session.state is SessionState.ERROR
