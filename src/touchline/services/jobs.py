"""
Object wiring shared by the admin API and the scheduled cache jobs.

Nothing here is a module-level singleton: the session factory and settings
are passed in so tests and scripts can supply their own.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from touchline.config import Settings
from touchline.core.cache.invalidation import InvalidationRouter
from touchline.core.cache.manager import ResponseCache
from touchline.core.cache.store import CacheStore, Clock, utcnow
from touchline.providers.base import LLMClient
from touchline.providers.registry import get_llm_client
from touchline.services.advisor import CoachingAdvisor
from touchline.services.players import SQLPlayerDirectory
from touchline.services.warmup import WarmupOrchestrator, WarmupReport


def build_cache(
    session_factory: async_sessionmaker[AsyncSession],
    settings: Settings,
    *,
    clock: Clock = utcnow,
) -> ResponseCache:
    return ResponseCache.from_settings(
        CacheStore(session_factory, clock=clock), settings.cache, clock=clock
    )


def build_invalidation_router(cache: ResponseCache) -> InvalidationRouter:
    return InvalidationRouter(cache)


def build_advisor(
    cache: ResponseCache,
    settings: Settings,
    llm: LLMClient | None = None,
) -> CoachingAdvisor:
    return CoachingAdvisor(cache, llm or get_llm_client(settings.llm))


def build_warmup(
    session_factory: async_sessionmaker[AsyncSession],
    cache: ResponseCache,
    settings: Settings,
    llm: LLMClient | None = None,
) -> WarmupOrchestrator:
    return WarmupOrchestrator(
        build_advisor(cache, settings, llm),
        SQLPlayerDirectory(session_factory),
        settings.warmup,
    )


async def run_warmup(
    session_factory: async_sessionmaker[AsyncSession],
    settings: Settings,
) -> WarmupReport:
    cache = build_cache(session_factory, settings)
    return await build_warmup(session_factory, cache, settings).run_full()


async def run_sweep(
    session_factory: async_sessionmaker[AsyncSession],
    settings: Settings,
) -> int:
    return await build_cache(session_factory, settings).sweep_expired()
