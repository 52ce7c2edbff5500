"""
Persistence contract for the AI response cache.

Every method runs in its own short transaction, so concurrent request
handlers can share one CacheStore without any application-level locking.
Hit counting relies on a single UPDATE ... SET hit_count = hit_count + 1.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any

import structlog
from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from touchline.common.errors import CacheStoreUnavailableError
from touchline.models.cache_entry import AIResponseCacheEntry

logger = structlog.stdlib.get_logger()

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CacheStore:
    """SQLAlchemy-backed store for `ai_response_cache` rows."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        clock: Clock = utcnow,
    ) -> None:
        self._session_factory = session_factory
        self._clock = clock

    @asynccontextmanager
    async def _session(self, *, write: bool = False) -> AsyncIterator[AsyncSession]:
        """Open a session; driver and connection errors surface as CacheStoreUnavailableError."""
        try:
            async with self._session_factory() as session:
                if write:
                    async with session.begin():
                        yield session
                else:
                    yield session
        except (SQLAlchemyError, OSError) as e:
            raise CacheStoreUnavailableError(
                f"Cache store unavailable: {e}",
                details={"error_class": type(e).__name__},
            ) from e

    async def find_live(self, key: str) -> AIResponseCacheEntry | None:
        """Return the entry for `key` only if it has not expired yet."""
        now = self._clock()
        async with self._session() as session:
            result = await session.execute(
                select(AIResponseCacheEntry)
                .where(
                    AIResponseCacheEntry.cache_key == key,
                    AIResponseCacheEntry.expires_at > now,
                )
                .limit(1)
            )
            return result.scalar_one_or_none()

    async def upsert(
        self,
        *,
        key: str,
        operation: str,
        params: Any,
        response: str,
        expires_at: datetime,
        context_data: Any = None,
        user_id: int | None = None,
    ) -> None:
        """
        Replace whatever is stored under `key` with a fresh row.

        Delete-then-insert, not UPDATE: the new row always starts at
        hit_count=0 with its own created_at.
        """
        now = self._clock()
        async with self._session(write=True) as session:
            await session.execute(
                delete(AIResponseCacheEntry).where(AIResponseCacheEntry.cache_key == key)
            )
            session.add(
                AIResponseCacheEntry(
                    cache_key=key,
                    operation=operation,
                    request_params=params,
                    response=response,
                    context_data=context_data,
                    user_id=user_id,
                    expires_at=expires_at,
                    hit_count=0,
                    created_at=now,
                    last_accessed_at=now,
                )
            )

    async def touch(self, key: str) -> None:
        """Record a hit: atomic increment plus last-accessed timestamp."""
        now = self._clock()
        async with self._session(write=True) as session:
            await session.execute(
                update(AIResponseCacheEntry)
                .where(AIResponseCacheEntry.cache_key == key)
                .values(
                    hit_count=AIResponseCacheEntry.hit_count + 1,
                    last_accessed_at=now,
                )
            )

    async def get_entry(self, key: str) -> AIResponseCacheEntry | None:
        """Fetch a row regardless of expiry. For inspection, never for lookups."""
        async with self._session() as session:
            result = await session.execute(
                select(AIResponseCacheEntry).where(AIResponseCacheEntry.cache_key == key)
            )
            return result.scalar_one_or_none()

    async def delete_by_key(self, key: str) -> int:
        return await self._delete(AIResponseCacheEntry.cache_key == key)

    async def delete_by_operation(self, operation: str) -> int:
        return await self._delete(AIResponseCacheEntry.operation == operation)

    async def delete_expired(self, now: datetime | None = None) -> int:
        return await self._delete(AIResponseCacheEntry.expires_at < (now or self._clock()))

    async def delete_all(self) -> int:
        return await self._delete()

    async def live_totals(self) -> list[tuple[str, int, int]]:
        """(operation, entry count, summed hits) for every operation with live rows."""
        now = self._clock()
        async with self._session() as session:
            result = await session.execute(
                select(
                    AIResponseCacheEntry.operation,
                    func.count(AIResponseCacheEntry.id),
                    func.coalesce(func.sum(AIResponseCacheEntry.hit_count), 0),
                )
                .where(AIResponseCacheEntry.expires_at > now)
                .group_by(AIResponseCacheEntry.operation)
                .order_by(AIResponseCacheEntry.operation)
            )
            return [(op, int(count), int(hits)) for op, count, hits in result.all()]

    async def _delete(self, *criteria: Any) -> int:
        stmt = delete(AIResponseCacheEntry)
        if criteria:
            stmt = stmt.where(*criteria)
        async with self._session(write=True) as session:
            result = await session.execute(stmt)
        return result.rowcount or 0  # type: ignore[attr-defined]
