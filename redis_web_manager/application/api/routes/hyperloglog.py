"""HyperLogLog routes: add, count, reset and merge, each answering {count, bytes}."""

from fastapi import APIRouter

from redis_web_manager.application.api.dependencies import MutationsDep
from redis_web_manager.application.api.models import (
    ERROR_RESPONSES,
    HllElementsRequest,
    HllMergeRequest,
    KeyRequest,
    envelope,
)

router = APIRouter(prefix="/hll", tags=["HyperLogLog"], responses=ERROR_RESPONSES)


@router.post("/add")
async def hll_add(body: HllElementsRequest, mutations: MutationsDep):
    return envelope(await mutations.hll_add(body.target(), body.key, body.elements, ttl=body.ttl))


@router.post("/count")
async def hll_count(body: KeyRequest, mutations: MutationsDep):
    return envelope(await mutations.hll_count(body.target(), body.key))


@router.post("/reset")
async def hll_reset(body: HllElementsRequest, mutations: MutationsDep):
    return envelope(
        await mutations.hll_reset(body.target(), body.key, body.elements, ttl=body.ttl)
    )


@router.post("/merge")
async def hll_merge(body: HllMergeRequest, mutations: MutationsDep):
    return envelope(
        await mutations.hll_merge(
            body.target(), body.destination_key, body.source_keys, ttl=body.ttl
        )
    )
