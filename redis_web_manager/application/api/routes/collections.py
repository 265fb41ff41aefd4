"""
Collection Editing Routes

Element-level edits of hashes, lists and sets. Each route is a thin adapter
over one MutationService operation.
"""

from fastapi import APIRouter

from redis_web_manager.application.api.dependencies import MutationsDep
from redis_web_manager.application.api.models import (
    ERROR_RESPONSES,
    HashFieldRequest,
    ListIndexRequest,
    ListPushRequest,
    ListRemoveRequest,
    SetMembersRequest,
    envelope,
)

router = APIRouter(tags=["Collections"], responses=ERROR_RESPONSES)


# ============================================================================
# HASH
# ============================================================================


@router.post("/hash/set-field")
async def hash_set_field(body: HashFieldRequest, mutations: MutationsDep):
    await mutations.hash_set_field(body.target(), body.key, body.field, body.value, body.ttl)
    return envelope()


@router.post("/hash/del-field")
async def hash_delete_field(body: HashFieldRequest, mutations: MutationsDep):
    await mutations.hash_delete_field(body.target(), body.key, body.field)
    return envelope()


# ============================================================================
# LIST
# ============================================================================


@router.post("/list/push")
async def list_push(body: ListPushRequest, mutations: MutationsDep):
    await mutations.list_push(
        body.target(), body.key, body.values, direction=body.direction, ttl=body.ttl
    )
    return envelope()


@router.post("/list/set-at")
async def list_set_at(body: ListIndexRequest, mutations: MutationsDep):
    await mutations.list_set_at(body.target(), body.key, body.index, body.value)
    return envelope()


@router.post("/list/rem")
async def list_remove(body: ListRemoveRequest, mutations: MutationsDep):
    await mutations.list_remove(body.target(), body.key, body.value, count=body.count)
    return envelope()


@router.post("/list/del-at")
async def list_delete_at(body: ListIndexRequest, mutations: MutationsDep):
    await mutations.list_delete_at(body.target(), body.key, body.index)
    return envelope()


# ============================================================================
# SET
# ============================================================================


@router.post("/set/add")
async def set_add(body: SetMembersRequest, mutations: MutationsDep):
    await mutations.set_add(body.target(), body.key, body.members, ttl=body.ttl)
    return envelope()


@router.post("/set/rem")
async def set_remove(body: SetMembersRequest, mutations: MutationsDep):
    await mutations.set_remove(body.target(), body.key, body.members)
    return envelope()
