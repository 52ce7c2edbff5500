"""
AI response cache.

Single tier: one relational table, no in-memory layer.

  get  -> derive key -> find live row -> touch (hit) / None (miss)
  put  -> derive key -> TTL by operation -> delete + insert

Store failures never reach the caller: reads degrade to a miss, writes to
a no-op. Key derivation errors do reach the caller, because they mean the
call cannot be cached at all.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

import structlog

from touchline.config import CacheSettings
from touchline.core.cache.boundary import StoreBoundary
from touchline.core.cache.keys import derive_key, to_jsonable
from touchline.core.cache.store import CacheStore, Clock, utcnow
from touchline.core.cache.ttl import TTLPolicy

logger = structlog.stdlib.get_logger()


@dataclass
class OperationStats:
    count: int = 0
    hits: int = 0


@dataclass
class CacheStats:
    """Aggregate over live entries."""

    total_entries: int = 0
    total_hits: int = 0
    by_operation: dict[str, OperationStats] = field(default_factory=dict)


class ResponseCache:
    """
    Keyed, TTL-based cache in front of expensive LLM calls.

    Usage:
        cache = ResponseCache(CacheStore(session_factory))
        text = await cache.get("playerAnalysis", params)
        if text is None:
            text = await compute()
            await cache.put("playerAnalysis", params, text)
    """

    def __init__(
        self,
        store: CacheStore,
        ttl_policy: TTLPolicy | None = None,
        *,
        clock: Clock = utcnow,
        deep_keys: bool = False,
        enabled: bool = True,
    ) -> None:
        self._store = store
        self._ttl = ttl_policy or TTLPolicy()
        self._clock = clock
        self._deep_keys = deep_keys
        self._boundary = StoreBoundary()
        self.enabled = enabled

    @classmethod
    def from_settings(
        cls,
        store: CacheStore,
        settings: CacheSettings,
        *,
        clock: Clock = utcnow,
    ) -> ResponseCache:
        return cls(
            store,
            TTLPolicy(settings.ttl_overrides, settings.default_ttl_seconds),
            clock=clock,
            deep_keys=settings.deep_canonical_keys,
            enabled=settings.enabled,
        )

    @property
    def ttl_policy(self) -> TTLPolicy:
        return self._ttl

    @property
    def store_failures(self) -> int:
        return self._boundary.failures

    def key_for(self, operation: str, params: Any) -> str:
        return derive_key(operation, params, deep=self._deep_keys)

    async def get(
        self,
        operation: str,
        params: Any,
        user_id: int | None = None,
    ) -> str | None:
        """Return the cached response, or None when the caller must compute it."""
        if not self.enabled:
            return None

        key = self.key_for(operation, params)
        entry = await self._boundary.guard(
            "find_live", lambda: self._store.find_live(key), None, operation=operation
        )
        if entry is None:
            await logger.adebug("cache.miss", operation=operation, user_id=user_id)
            return None

        await self._boundary.guard(
            "touch", lambda: self._store.touch(key), None, operation=operation
        )
        await logger.ainfo(
            "cache.hit",
            operation=operation,
            hits=entry.hit_count + 1,
            user_id=user_id,
        )
        return entry.response

    async def put(
        self,
        operation: str,
        params: Any,
        response: str,
        user_id: int | None = None,
        context_data: Any = None,
    ) -> None:
        """Store a response under the operation's TTL. Never raises on store failure."""
        if not self.enabled:
            return

        key = self.key_for(operation, params)
        expires_at = self._clock() + self._ttl.ttl_for(operation)

        async def _upsert() -> bool:
            await self._store.upsert(
                key=key,
                operation=operation,
                params=to_jsonable(params),
                response=response,
                expires_at=expires_at,
                context_data=to_jsonable(context_data),
                user_id=user_id,
            )
            return True

        if await self._boundary.guard("upsert", _upsert, False, operation=operation):
            await logger.adebug(
                "cache.stored", operation=operation, expires_at=expires_at.isoformat()
            )

    async def get_or_compute(
        self,
        operation: str,
        params: Any,
        compute: Callable[[], Awaitable[str]],
        *,
        user_id: int | None = None,
        context_data: Any = None,
    ) -> str:
        """
        Miss -> compute -> put, in one call.

        Errors raised by `compute` propagate untouched and nothing is stored.
        """
        cached = await self.get(operation, params, user_id=user_id)
        if cached is not None:
            return cached

        result = await compute()
        await self.put(operation, params, result, user_id=user_id, context_data=context_data)
        return result

    async def invalidate(self, operation: str, params: Any) -> None:
        key = self.key_for(operation, params)
        removed = await self._boundary.guard(
            "delete_by_key", lambda: self._store.delete_by_key(key), 0, operation=operation
        )
        await logger.ainfo("cache.invalidated", operation=operation, removed=removed)

    async def invalidate_category(self, operation: str) -> int:
        """Drop every cached result for `operation`, whatever its params."""
        removed = await self._boundary.guard(
            "delete_by_operation",
            lambda: self._store.delete_by_operation(operation),
            0,
            operation=operation,
        )
        await logger.ainfo("cache.invalidated_category", operation=operation, removed=removed)
        return removed

    async def sweep_expired(self) -> int:
        now = self._clock()
        removed = await self._boundary.guard(
            "delete_expired", lambda: self._store.delete_expired(now), 0
        )
        await logger.ainfo("cache.swept", removed=removed)
        return removed

    async def clear_all(self) -> int:
        removed = await self._boundary.guard("delete_all", self._store.delete_all, 0)
        await logger.awarning("cache.cleared", removed=removed)
        return removed

    async def stats(self) -> CacheStats:
        """Observability only; never call this on the request path."""
        rows = await self._boundary.guard("live_totals", self._store.live_totals, [])
        stats = CacheStats()
        for operation, count, hits in rows:
            stats.by_operation[operation] = OperationStats(count=count, hits=hits)
            stats.total_entries += count
            stats.total_hits += hits
        return stats
