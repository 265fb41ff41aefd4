"""
Unit Tests for Session

Tests connect retries (tenacity), state transitions and the error
translation of `Session.operation()`.
"""

import pytest
from redis.exceptions import AuthenticationError, ResponseError
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import TimeoutError as RedisTimeoutError

from redis_web_manager.core.exceptions import BackendCommandError, BackendUnreachableError
from redis_web_manager.infrastructure.redis.session import ConnectionParams, Session, SessionState

# Sparse HyperLogLog header: "HYLL", encoding byte, 3 unused, cached cardinality with the invalid bit set
SPARSE_HLL_HEADER = b"HYLL\x01\x00\x00\x00\x80\x00\x00\x00\x00\x00\x00\x80"


@pytest.mark.unit
class TestConnectionParams:
    def test_composite_key_includes_credential(self):
        params = ConnectionParams(host="h", port=6379, password="pw", db=3)

        assert params.composite_key == "h:6379:3:pw"
        assert params.display_key == "h:6379:3"

    def test_with_db(self):
        params = ConnectionParams(host="h", port=6379, password="pw", db=3)

        assert params.with_db(0) == ConnectionParams(host="h", port=6379, password="pw", db=0)


@pytest.mark.unit
class TestSessionConnect:
    @pytest.mark.asyncio
    async def test_connect_marks_ready(self, session, mock_client):
        await session.connect()

        assert session.state is SessionState.READY
        mock_client.ping.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_transient_failures_retried(self, session, mock_client):
        mock_client.ping.side_effect = [RedisConnectionError("x"), RedisTimeoutError("y"), True]

        await session.connect()

        assert mock_client.ping.await_count == 3
        assert session.state is SessionState.READY

    @pytest.mark.asyncio
    async def test_retries_exhausted(self, session, mock_client):
        mock_client.ping.side_effect = RedisConnectionError("refused")

        with pytest.raises(RedisConnectionError):
            await session.connect()

        # first attempt + 2 retries
        assert mock_client.ping.await_count == 3
        assert session.state is SessionState.ERROR

    @pytest.mark.asyncio
    async def test_authentication_failure_not_retried(self, session, mock_client):
        mock_client.ping.side_effect = AuthenticationError("invalid password")

        with pytest.raises(AuthenticationError):
            await session.connect()

        assert mock_client.ping.await_count == 1

    @pytest.mark.asyncio
    async def test_listener_sees_transitions(self, session):
        seen = []
        session.add_listener(lambda s, state, error: seen.append(state))

        await session.connect()

        assert seen[-1] is SessionState.READY

    @pytest.mark.asyncio
    async def test_close(self, session, mock_client):
        await session.close()

        mock_client.aclose.assert_awaited_once()
        assert not session.is_usable


@pytest.mark.unit
class TestSessionOperation:
    @pytest.mark.asyncio
    async def test_response_error_translated(self, session, mock_client):
        await session.connect()
        mock_client.hlen.side_effect = ResponseError("WRONGTYPE")

        with pytest.raises(BackendCommandError, match="WRONGTYPE"):
            async with session.operation("HLEN", key="k") as client:
                await client.hlen("k")

        # a rejected command does not poison the session
        assert session.state is SessionState.READY

    @pytest.mark.asyncio
    async def test_connection_loss_marks_error(self, session, mock_client):
        await session.connect()
        mock_client.get.side_effect = RedisConnectionError("Connection reset by peer")

        with pytest.raises(BackendUnreachableError, match="Lost connection to 127.0.0.1:6379:0"):
            async with session.operation("GET", key="k") as client:
                await client.get("k")

        assert session.state is SessionState.ERROR
        assert not session.is_usable

    @pytest.mark.asyncio
    async def test_other_exceptions_propagate(self, session):
        with pytest.raises(KeyError):
            async with session.operation("GET"):
                raise KeyError("bug")


@pytest.mark.unit
class TestSessionDecoding:
    def test_binary_replies_decode_leniently(self, redis_settings):
        session = Session(ConnectionParams(host="127.0.0.1", port=6379), redis_settings)

        assert session.client.connection_pool.connection_kwargs["encoding_errors"] == "replace"

    def test_hll_payload_does_not_raise(self, redis_settings):
        session = Session(ConnectionParams(host="127.0.0.1", port=6379), redis_settings)
        encoder = session.client.connection_pool.get_encoder()

        decoded = encoder.decode(SPARSE_HLL_HEADER)

        assert decoded.startswith("HYLL")
        assert "\ufffd" in decoded
