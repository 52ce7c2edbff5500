"""Cache management endpoints."""

from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter

from touchline.api.deps import AdminKey, Cache, Invalidator, Warmup
from touchline.schemas.cache import (
    CacheClearRequest,
    CacheClearResponse,
    CacheStatsResponse,
    InvalidateRequest,
    InvalidateResponse,
    SweepResponse,
    WarmupReportResponse,
)

router = APIRouter()


@router.get("/stats", response_model=CacheStatsResponse, summary="Live cache statistics")
async def cache_stats(admin_key: AdminKey, cache: Cache) -> CacheStatsResponse:
    stats = await cache.stats()
    return CacheStatsResponse.model_validate(
        {**asdict(stats), "store_failures": cache.store_failures}
    )


@router.post("/clear", response_model=CacheClearResponse, summary="Clear cache")
async def clear_cache(
    body: CacheClearRequest, admin_key: AdminKey, cache: Cache
) -> CacheClearResponse:
    if body.operation is not None:
        removed = await cache.invalidate_category(body.operation)
    else:
        removed = await cache.clear_all()
    return CacheClearResponse(removed=removed)


@router.post(
    "/invalidate",
    response_model=InvalidateResponse,
    summary="Invalidate categories affected by a data change",
)
async def invalidate(
    body: InvalidateRequest, admin_key: AdminKey, invalidator: Invalidator
) -> InvalidateResponse:
    categories = await invalidator.on_event(
        body.type,
        player_id=body.player_id,
        match_id=body.match_id,
        comprehensive=body.comprehensive,
    )
    return InvalidateResponse(invalidated=list(categories))


@router.post("/sweep", response_model=SweepResponse, summary="Delete expired entries")
async def sweep(admin_key: AdminKey, cache: Cache) -> SweepResponse:
    return SweepResponse(removed=await cache.sweep_expired())


@router.post("/warmup", response_model=WarmupReportResponse, summary="Run a full cache warmup")
async def warmup(admin_key: AdminKey, orchestrator: Warmup) -> WarmupReportResponse:
    report = await orchestrator.run_full()
    return WarmupReportResponse.model_validate(asdict(report))
