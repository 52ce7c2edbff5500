"""Health check endpoints for liveness/readiness probes."""

from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import ORJSONResponse
from sqlalchemy import select, text

from touchline import __version__
from touchline.api.deps import DBSession
from touchline.models.cache_entry import AIResponseCacheEntry
from touchline.schemas.health import LivenessResponse, ReadinessResponse

router = APIRouter()


@router.get("/live", response_model=LivenessResponse, summary="Liveness probe")
async def liveness() -> LivenessResponse:
    return LivenessResponse(version=__version__)


@router.get("/ready", response_model=ReadinessResponse, summary="Readiness probe")
async def readiness(db: DBSession) -> ORJSONResponse:
    """
    Database reachability plus the cache table itself.

    A missing cache table does not make the service unready: the cache
    degrades to misses, so it is reported but the status stays "ok".
    """
    db_status = "disconnected"
    cache_status = "unavailable"

    try:
        await db.execute(text("SELECT 1"))
        db_status = "connected"
    except Exception:
        pass

    if db_status == "connected":
        try:
            await db.execute(select(AIResponseCacheEntry.id).limit(1))
            cache_status = "available"
        except Exception:
            await db.rollback()

    overall = "ok" if db_status == "connected" else "degraded"

    return ORJSONResponse(
        status_code=200 if overall == "ok" else 503,
        content=ReadinessResponse(
            status=overall, database=db_status, cache_store=cache_status
        ).model_dump(),
    )
