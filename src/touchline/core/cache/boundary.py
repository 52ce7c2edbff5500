"""
Error boundary around the cache store.

The cache is best-effort: a broken store must make requests slower, never
make them fail. Every store call made by ResponseCache goes through
StoreBoundary.guard, which turns any store exception into a fallback value
plus a log event.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TypeVar

import structlog

from touchline.common.errors import CacheStoreUnavailableError

logger = structlog.stdlib.get_logger()

T = TypeVar("T")


class StoreBoundary:
    """Converts store failures into defaults and counts them."""

    def __init__(self) -> None:
        self.failures = 0

    async def guard(
        self,
        action: str,
        call: Callable[[], Awaitable[T]],
        default: T,
        **log_fields: object,
    ) -> T:
        try:
            return await call()
        except CacheStoreUnavailableError as e:
            self.failures += 1
            await logger.awarning(
                "cache.store.unavailable",
                action=action,
                error=e.message,
                **log_fields,
            )
            return default
        except Exception as e:
            # Anything else is a bug in the store, still never the caller's problem
            self.failures += 1
            await logger.aexception(
                "cache.store.error",
                action=action,
                error=str(e),
                **log_fields,
            )
            return default
