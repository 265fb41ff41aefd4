"""
Connection Registry

Resolves a saved connection identifier (or literal connection parameters)
plus an optional database override into a live Session, sharing Sessions
across requests and across profiles whose physical parameters are identical.

Architecture:
    ConnectionRegistry
        ├── _sessions: composite key -> Session (live sessions)
        └── _pending:  composite key -> Task (in-flight connects, single-flight)

Invariant: at most one Session exists per composite key. Concurrent acquires
of a never-seen key share one connect task, so they observe the same Session
or the same failure.

Staleness is detected lazily: a Session in ERROR is evicted and replaced on
the next acquire for its key. There is no background sweep.
"""

import asyncio
from typing import Any

from redis.exceptions import RedisError

from redis_web_manager.core.config.settings import RedisSettings, get_settings
from redis_web_manager.core.exceptions import (
    BackendUnreachableError,
    ConnectionNotFoundError,
    ValidationError,
)
from redis_web_manager.core.logging.logger import get_logger
from redis_web_manager.infrastructure.redis.session import (
    ConnectionParams,
    Session,
    SessionState,
)
from redis_web_manager.infrastructure.storage.profile_store import ConnectionProfileStore

logger = get_logger(__name__)


class ConnectionRegistry:
    """
    Sole owner of Session lifecycle.

    Usage:
        registry = ConnectionRegistry(profile_store)
        session = await registry.acquire(connection_id, db_override=2)
        ...
        await registry.close_all()
    """

    def __init__(
        self,
        profile_store: ConnectionProfileStore,
        settings: RedisSettings | None = None,
        session_factory=Session,
    ):
        self._profiles = profile_store
        self._settings = settings or get_settings().redis
        self._session_factory = session_factory
        self._sessions: dict[str, Session] = {}
        self._pending: dict[str, asyncio.Task] = {}
        self._lock = asyncio.Lock()

    def resolve_params(
        self, target: str | ConnectionParams, db_override: int | None = None
    ) -> ConnectionParams:
        """
        Turn an identifier or literal parameters into target-db parameters.

        target_db = db_override, else the profile's db, else 0.

        Raises:
            ValidationError: empty identifier
            ConnectionNotFoundError: identifier unknown to the profile store
        """
        if isinstance(target, ConnectionParams):
            base = target
        else:
            if not target:
                raise ValidationError("Connection ID is required", field="connectionId")
            profile = self._profiles.resolve(target)
            if profile is None:
                raise ConnectionNotFoundError(
                    f"Connection with ID {target} not found",
                    details={"connection_id": target},
                )
            base = ConnectionParams(
                host=profile.host,
                port=profile.port,
                password=profile.password or None,
                db=profile.db or 0,
            )

        if db_override is not None:
            return base.with_db(db_override)
        return base

    async def acquire(
        self, target: str | ConnectionParams, db_override: int | None = None
    ) -> Session:
        """
        Return a live Session for the target, creating it on first use.

        Raises:
            ConnectionNotFoundError: unknown connection identifier
            BackendUnreachableError: the session could not be established
        """
        params = self.resolve_params(target, db_override)
        key = params.composite_key
        stale: Session | None = None

        async with self._lock:
            session = self._sessions.get(key)
            if session is not None:
                if session.is_usable:
                    return session
                stale = self._sessions.pop(key)

            task = self._pending.get(key)
            if task is None:
                task = asyncio.create_task(self._create(params))
                self._pending[key] = task

        if stale is not None:
            logger.info("Evicting failed session", display_key=stale.display_key)
            await self._discard(stale)

        # Shielded: a caller giving up must not cancel the connect other callers share
        return await asyncio.shield(task)

    async def _create(self, params: ConnectionParams) -> Session:
        key = params.composite_key
        session = self._session_factory(params, self._settings)
        session.add_listener(self._on_state_change)

        try:
            await session.connect()
        except (RedisError, OSError) as e:
            await self._discard(session)
            logger.error(
                "Failed to establish session",
                display_key=params.display_key,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise BackendUnreachableError(
                f"Failed to connect to {params.display_key}: {e}",
                details={
                    "host": params.host,
                    "port": params.port,
                    "db": params.db,
                    "original_error": type(e).__name__,
                },
            ) from e
        except BaseException:
            # Anything else (a bug, cancellation) still closes the client
            await self._discard(session)
            raise
        else:
            self._sessions[key] = session
            logger.info("Session established", display_key=params.display_key)
            return session
        finally:
            self._pending.pop(key, None)

    async def _discard(self, session: Session) -> None:
        """Best-effort close; close failures are logged and ignored."""
        try:
            await session.close()
        except Exception as e:
            logger.debug(
                "Ignoring session close failure",
                display_key=session.display_key,
                error=str(e),
            )

    def _on_state_change(
        self, session: Session, state: SessionState, error: BaseException | None
    ) -> None:
        if state is SessionState.ERROR:
            logger.warning(
                "Session error",
                display_key=session.display_key,
                error=str(error) if error else None,
            )
        else:
            logger.debug("Session state changed", display_key=session.display_key, state=state.value)

    async def close_all(self) -> None:
        """Disconnect every session (application shutdown)."""
        async with self._lock:
            sessions = list(self._sessions.values())
            self._sessions.clear()

        for session in sessions:
            await self._discard(session)

        logger.info("All sessions closed", count=len(sessions))

    def stats(self) -> dict[str, Any]:
        """Live sessions by display key, for the health endpoint."""
        return {
            "sessions": [
                {"endpoint": s.display_key, "state": s.state.value}
                for s in self._sessions.values()
            ],
            "pending": len(self._pending),
        }

    def __len__(self) -> int:
        return len(self._sessions)
