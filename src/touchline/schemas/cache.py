"""Cache management schemas."""

from __future__ import annotations

from pydantic import BaseModel, Field

from touchline.core.cache.invalidation import DataChangeType


class OperationStatsResponse(BaseModel):
    count: int
    hits: int


class CacheStatsResponse(BaseModel):
    total_entries: int
    total_hits: int
    by_operation: dict[str, OperationStatsResponse]
    # reads and writes the error boundary absorbed since this process started
    store_failures: int = 0


class CacheClearRequest(BaseModel):
    operation: str | None = Field(
        None, min_length=1, description="Clear only entries for this operation"
    )


class CacheClearResponse(BaseModel):
    removed: int


class InvalidateRequest(BaseModel):
    type: DataChangeType
    player_id: int | None = None
    match_id: int | None = None
    comprehensive: bool = False


class InvalidateResponse(BaseModel):
    invalidated: list[str]


class SweepResponse(BaseModel):
    removed: int


class StepReportResponse(BaseModel):
    success: int
    failed: int
    errors: list[str]


class WarmupReportResponse(BaseModel):
    total_success: int
    total_failed: int
    duration_ms: int
    details: dict[str, StepReportResponse]
