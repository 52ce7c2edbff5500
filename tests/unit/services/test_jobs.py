"""Tests for the job wiring helpers."""

from __future__ import annotations

from datetime import timedelta

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from factories import FakeLLM, VirtualClock
from touchline.config import Settings
from touchline.services.jobs import build_cache, build_warmup, run_sweep
from touchline.services.players import SQLPlayerDirectory


@pytest.mark.unit
class TestJobs:
    async def test_build_cache_follows_settings(
        self, session_factory: async_sessionmaker[AsyncSession], clock: VirtualClock
    ) -> None:
        settings = Settings(cache={"ttl_overrides": {"trainingPlan": 60}})  # type: ignore[arg-type]
        cache = build_cache(session_factory, settings, clock=clock)

        assert cache.ttl_policy.ttl_for("trainingPlan") == timedelta(seconds=60)
        await cache.put("trainingPlan", {"p": 1}, "r")
        clock.advance(seconds=61)
        assert await cache.get("trainingPlan", {"p": 1}) is None

    async def test_build_cache_disabled(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> None:
        settings = Settings(cache={"enabled": False})  # type: ignore[arg-type]
        cache = build_cache(session_factory, settings)

        await cache.put("trainingPlan", {"p": 1}, "r")
        assert (await cache.stats()).total_entries == 0

    async def test_build_warmup_uses_sql_directory(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> None:
        settings = Settings(warmup={"concurrency": 2})  # type: ignore[arg-type]
        cache = build_cache(session_factory, settings)
        llm = FakeLLM()

        orchestrator = build_warmup(session_factory, cache, settings, llm)

        assert isinstance(orchestrator.players, SQLPlayerDirectory)
        assert orchestrator.advisor.llm is llm
        assert orchestrator.settings.concurrency == 2

    async def test_run_sweep_removes_expired_rows(
        self, session_factory: async_sessionmaker[AsyncSession], clock: VirtualClock
    ) -> None:
        settings = Settings()
        # Written a day in the past, so already expired by wall-clock time
        clock.now -= timedelta(days=1)
        stale = build_cache(session_factory, settings, clock=clock)
        await stale.put("playerAnalysis", {"p": 1}, "old")

        assert await run_sweep(session_factory, settings) == 1
        assert await run_sweep(session_factory, settings) == 0
