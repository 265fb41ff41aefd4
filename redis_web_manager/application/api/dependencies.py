"""
FastAPI Dependency Injection Module - Educational Documentation
================================================================

WHAT IS DEPENDENCY INJECTION?
-----------------------------
Route handlers receive their collaborators (registry, scanner, inspector,
mutation service, profile store) from FastAPI instead of building them. The
collaborators are created once in the application lifespan and stored on
`app.state`; the functions below hand them out per request.

WHY THIS MATTERS FOR TESTS
--------------------------
Tests swap any collaborator with `app.dependency_overrides[get_registry] = ...`
without touching a real store.

Example:
    @router.post("/keys")
    async def list_keys(body: KeysRequest, registry: RegistryDep, scanner: ScannerDep):
        session = await registry.acquire(...)
        return envelope(await scanner.scan(session, body.pattern))
"""

from typing import Annotated

from fastapi import Depends, Request

from redis_web_manager.core.config.settings import Settings, get_settings
from redis_web_manager.infrastructure.redis.registry import ConnectionRegistry
from redis_web_manager.infrastructure.storage.profile_store import ConnectionProfileStore
from redis_web_manager.keyspace.inspector import ValueInspector
from redis_web_manager.keyspace.mutations import MutationService
from redis_web_manager.keyspace.scanner import KeyspaceScanner

# ============================================================================
# DEPENDENCY FUNCTIONS
# ============================================================================


def _from_state(request: Request, name: str):
    component = getattr(request.app.state, name, None)
    if component is None:
        raise RuntimeError(f"{name} is not initialized; is the application lifespan running?")
    return component


def get_registry(request: Request) -> ConnectionRegistry:
    """The process-wide ConnectionRegistry (sole owner of backend sessions)."""
    return _from_state(request, "registry")


def get_profile_store(request: Request) -> ConnectionProfileStore:
    return _from_state(request, "profile_store")


def get_scanner(request: Request) -> KeyspaceScanner:
    return _from_state(request, "scanner")


def get_inspector(request: Request) -> ValueInspector:
    return _from_state(request, "inspector")


def get_mutations(request: Request) -> MutationService:
    return _from_state(request, "mutations")


# ============================================================================
# TYPE ALIASES FOR DEPENDENCY INJECTION
# ============================================================================
# `Annotated[Type, Depends(provider)]` keeps the handler signatures short:
#     async def handler(registry: RegistryDep): ...

SettingsDep = Annotated[Settings, Depends(get_settings)]
RegistryDep = Annotated[ConnectionRegistry, Depends(get_registry)]
ProfileStoreDep = Annotated[ConnectionProfileStore, Depends(get_profile_store)]
ScannerDep = Annotated[KeyspaceScanner, Depends(get_scanner)]
InspectorDep = Annotated[ValueInspector, Depends(get_inspector)]
MutationsDep = Annotated[MutationService, Depends(get_mutations)]
