"""
Saved Connection Routes

CRUD over the connection profile store. Create and update only persist a
profile after the target answered PING on database 0; passwords are never
returned.
"""

from typing import Any
from uuid import uuid4

from fastapi import APIRouter

from redis_web_manager.application.api.dependencies import ProfileStoreDep, RegistryDep
from redis_web_manager.application.api.models import ERROR_RESPONSES, ConnectionProfileRequest, envelope
from redis_web_manager.core.exceptions import ConnectionNotFoundError, ValidationError
from redis_web_manager.core.logging.logger import get_logger
from redis_web_manager.infrastructure.redis.session import ConnectionParams
from redis_web_manager.infrastructure.storage.profile_store import ConnectionProfile
from redis_web_manager.keyspace.validators import parse_db

logger = get_logger(__name__)

router = APIRouter(prefix="/connections", tags=["Connections"], responses=ERROR_RESPONSES)


def _endpoint(body: ConnectionProfileRequest) -> tuple[str, int]:
    host, port = body.host, body.port
    if isinstance(port, str) and port.strip().isdigit():
        port = int(port.strip())
    if not isinstance(host, str) or not host or isinstance(port, bool) or not isinstance(port, int) or port <= 0:
        raise ValidationError("Invalid Redis Configuration", field="host")
    return host, port


async def _ping(registry, host: str, port: int, password: Any) -> None:
    session = await registry.acquire(
        ConnectionParams(host=host, port=port, password=password or None, db=0)
    )
    # acquire() hands back cached sessions without a round trip
    async with session.operation("PING") as client:
        await client.ping()


@router.get("")
async def list_connections(store: ProfileStoreDep):
    return envelope([profile.redacted() for profile in store.all()])


@router.post("")
async def create_connection(
    body: ConnectionProfileRequest, store: ProfileStoreDep, registry: RegistryDep
):
    host, port = _endpoint(body)
    password = body.password if isinstance(body.password, str) else None
    db = parse_db(body.db) or 0

    await _ping(registry, host, port, password)

    profile = ConnectionProfile(
        id=str(uuid4()),
        name=body.name if isinstance(body.name, str) else None,
        host=host,
        port=port,
        password=password,
        db=db,
    )
    store.add(profile)
    logger.info("Connection saved", connection_id=profile.id, endpoint=f"{host}:{port}")
    return envelope(profile.redacted())


@router.put("/{connection_id}")
async def update_connection(
    connection_id: str,
    body: ConnectionProfileRequest,
    store: ProfileStoreDep,
    registry: RegistryDep,
):
    host, port = _endpoint(body)
    existing = store.get(connection_id)
    if existing is None:
        raise ConnectionNotFoundError("Not found", details={"connection_id": connection_id})

    password = body.password if isinstance(body.password, str) else existing.password
    db = parse_db(body.db)

    updated = existing.model_copy(
        update={
            "name": body.name if isinstance(body.name, str) else existing.name,
            "host": host,
            "port": port,
            "password": password,
            "db": existing.db if db is None else db,
        }
    )

    await _ping(registry, host, port, password)

    store.update(updated)
    logger.info("Connection updated", connection_id=connection_id)
    return envelope(updated.redacted())


@router.delete("/{connection_id}")
async def delete_connection(connection_id: str, store: ProfileStoreDep):
    store.remove(connection_id)
    logger.info("Connection removed", connection_id=connection_id)
    return envelope()
