"""
Backend Sessions

A Session is one live socket to a store endpoint, at one database index,
under one credential. Sessions are created, health-checked and closed only
by the ConnectionRegistry; every other component borrows them.

Lifecycle:
    CONNECTING --ping ok--> READY
    CONNECTING --retries exhausted--> ERROR
    READY --socket dropped / connection error during a command--> ERROR

The client is built lazily (redis-py does not open a socket on construction)
and uses a single dedicated connection instead of a pool, so one Session is
exactly one socket.
"""

from collections.abc import Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass
from enum import Enum

import redis.asyncio as redis
from redis.asyncio.retry import Retry
from redis.backoff import NoBackoff
from redis.exceptions import (
    AuthenticationError,
    ConnectionError,
    ResponseError,
    TimeoutError,
)
from tenacity import (
    retry,
    retry_if_exception_type,
    retry_if_not_exception_type,
    stop_after_attempt,
    wait_fixed,
)

from redis_web_manager.core.config.settings import RedisSettings, get_settings
from redis_web_manager.core.exceptions import BackendCommandError, BackendUnreachableError
from redis_web_manager.core.logging.logger import get_logger

logger = get_logger(__name__)


class SessionState(str, Enum):
    """Session lifecycle states."""

    CONNECTING = "connecting"
    READY = "ready"
    ERROR = "error"


@dataclass(frozen=True)
class ConnectionParams:
    """
    Physical connection parameters, already resolved to a target database.

    Two saved profiles with identical parameters share one Session.
    """

    host: str
    port: int
    password: str | None = None
    db: int = 0

    @property
    def composite_key(self) -> str:
        # Credential is part of the key so different passwords never share a socket
        return f"{self.host}:{self.port}:{self.db}:{self.password or ''}"

    @property
    def display_key(self) -> str:
        return f"{self.host}:{self.port}:{self.db}"

    def with_db(self, db: int) -> "ConnectionParams":
        return ConnectionParams(host=self.host, port=self.port, password=self.password, db=db)


StateListener = Callable[["Session", SessionState, BaseException | None], None]


class Session:
    """
    One backend socket plus its lifecycle state.

    Usage (inside a keyspace service):
        async with session.operation("HLEN", key=key) as client:
            total = await client.hlen(key)

    `operation()` translates redis-py failures into the service error
    taxonomy and flips the session to ERROR when the socket is lost, which
    makes the registry replace it on the next acquire.
    """

    def __init__(self, params: ConnectionParams, settings: RedisSettings | None = None):
        self.params = params
        self._settings = settings or get_settings().redis
        self._state = SessionState.CONNECTING
        self._listeners: list[StateListener] = []
        self.client = redis.Redis(
            host=params.host,
            port=params.port,
            db=params.db,
            password=params.password,
            socket_connect_timeout=self._settings.REDIS_SOCKET_CONNECT_TIMEOUT,
            socket_timeout=self._settings.REDIS_SOCKET_TIMEOUT,
            single_connection_client=True,
            # Connect retries are owned by connect(); commands are never retried
            retry=Retry(NoBackoff(), 0),
            decode_responses=True,
            # Binary values and key names decode with U+FFFD instead of failing the request
            encoding_errors="replace",
        )

    @property
    def composite_key(self) -> str:
        return self.params.composite_key

    @property
    def display_key(self) -> str:
        return self.params.display_key

    @property
    def db(self) -> int:
        return self.params.db

    @property
    def state(self) -> SessionState:
        """
        Current state.

        A READY session whose socket has been closed underneath it (server
        restart, idle kill) reports ERROR without a network round trip.
        """
        if self._state is SessionState.READY:
            connection = getattr(self.client, "connection", None)
            if connection is not None and not connection.is_connected:
                self._set_state(SessionState.ERROR)
        return self._state

    @property
    def is_usable(self) -> bool:
        return self.state in (SessionState.CONNECTING, SessionState.READY)

    def add_listener(self, listener: StateListener) -> None:
        """Observe state transitions. Register before calling connect()."""
        self._listeners.append(listener)

    def _set_state(self, state: SessionState, error: BaseException | None = None) -> None:
        if state is self._state and error is None:
            return
        self._state = state
        for listener in self._listeners:
            listener(self, state, error)

    def mark_error(self, error: BaseException | None = None) -> None:
        self._set_state(SessionState.ERROR, error)

    async def connect(self) -> None:
        """
        Open the socket and verify it with PING.

        Retries connection failures REDIS_CONNECT_RETRIES times with a fixed
        REDIS_CONNECT_RETRY_DELAY backoff. Authentication failures and
        command errors (e.g. a database index out of range) are not retried.

        Raises:
            redis.exceptions.RedisError: last failure once retries are exhausted
        """
        self._set_state(SessionState.CONNECTING)

        @retry(
            stop=stop_after_attempt(self._settings.REDIS_CONNECT_RETRIES + 1),
            wait=wait_fixed(self._settings.REDIS_CONNECT_RETRY_DELAY),
            retry=(
                retry_if_exception_type((ConnectionError, TimeoutError))
                & retry_if_not_exception_type(AuthenticationError)
            ),
            reraise=True,
        )
        async def _ping() -> None:
            await self.client.ping()

        try:
            await _ping()
        except Exception as e:
            self._set_state(SessionState.ERROR, e)
            raise

        self._set_state(SessionState.READY)

    async def close(self) -> None:
        """Disconnect the socket. The session is unusable afterwards."""
        self._state = SessionState.ERROR
        await self.client.aclose()

    @asynccontextmanager
    async def operation(self, name: str, **context):
        """
        Run backend commands with error translation.

        - ResponseError -> BackendCommandError (the store rejected a command)
        - ConnectionError / TimeoutError -> session marked ERROR,
          BackendUnreachableError raised
        """
        try:
            yield self.client
        except ResponseError as e:
            logger.warning(
                "Backend rejected command",
                operation=name,
                display_key=self.display_key,
                error=str(e),
                **context,
            )
            raise BackendCommandError.from_exception(e, operation=name, **context) from e
        except (ConnectionError, TimeoutError) as e:
            self.mark_error(e)
            raise BackendUnreachableError.from_exception(
                e,
                message=f"Lost connection to {self.display_key}: {e}",
                operation=name,
                **context,
            ) from e

    def __repr__(self) -> str:
        return f"Session(display_key='{self.display_key}', state='{self._state.value}')"
