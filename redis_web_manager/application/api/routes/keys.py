"""
Key Browsing Routes

- POST /keys: pattern scan (capped, deduplicated, typed)
- POST /value: bounded type-aware preview of one key
- POST /set, /delete, /rename: whole-key writes
"""

from fastapi import APIRouter

from redis_web_manager.application.api.dependencies import (
    InspectorDep,
    MutationsDep,
    RegistryDep,
    ScannerDep,
)
from redis_web_manager.application.api.models import (
    ERROR_RESPONSES,
    KeyRequest,
    KeysRequest,
    RenameRequest,
    SetValueRequest,
    ValueRequest,
    envelope,
)
from redis_web_manager.keyspace.validators import require_key

router = APIRouter(tags=["Keys"], responses=ERROR_RESPONSES)


@router.post("/keys")
async def list_keys(body: KeysRequest, registry: RegistryDep, scanner: ScannerDep):
    target = body.target()
    pattern = body.pattern if isinstance(body.pattern, str) else "*"
    session = await registry.acquire(target.connection_id, target.db)
    keys = await scanner.scan(session, pattern)
    return envelope([info.to_dict() for info in keys])


@router.post("/value")
async def get_value(body: ValueRequest, registry: RegistryDep, inspector: InspectorDep):
    target = body.target()
    require_key(body.key)
    session = await registry.acquire(target.connection_id, target.db)
    preview = await inspector.inspect(
        session,
        body.key,
        preview_limit=body.preview_limit,
        cursor=body.cursor,
        start=body.start,
    )
    return envelope(preview.to_dict())


@router.post("/set")
async def set_value(body: SetValueRequest, mutations: MutationsDep):
    await mutations.set_value(body.target(), body.key, body.type, body.value, body.ttl)
    return envelope()


@router.post("/delete")
async def delete_key(body: KeyRequest, mutations: MutationsDep):
    await mutations.delete_key(body.target(), body.key)
    return envelope()


@router.post("/rename")
async def rename_key(body: RenameRequest, mutations: MutationsDep):
    await mutations.rename_key(body.target(), body.old_key, body.new_key)
    return envelope()
