"""Integration tests for the cache admin API."""

from __future__ import annotations

from pathlib import Path

import pytest
from fastapi import FastAPI
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from structlog.testing import capture_logs

from factories import FakeLLM, make_player
from touchline.api.deps import get_session_factory
from touchline.core.cache.manager import ResponseCache
from touchline.core.cache.store import CacheStore


@pytest.fixture
def live_cache(session_factory: async_sessionmaker[AsyncSession]) -> ResponseCache:
    """Wall-clock cache over the same database the app uses."""
    return ResponseCache(CacheStore(session_factory))


@pytest.mark.integration
class TestAuth:
    async def test_missing_auth_header(self, client: AsyncClient) -> None:
        response = await client.get("/admin/v1/cache/stats")
        assert response.status_code == 401
        assert response.json()["error"]["type"] == "authentication_error"

    async def test_invalid_key(self, client: AsyncClient) -> None:
        response = await client.get(
            "/admin/v1/cache/stats", headers={"Authorization": "Bearer nope"}
        )
        assert response.status_code == 401

    async def test_wrong_scheme(self, client: AsyncClient) -> None:
        response = await client.get(
            "/admin/v1/cache/stats", headers={"Authorization": "Basic test_admin_key"}
        )
        assert response.status_code == 401

    async def test_rejected_call_is_logged_as_warning(self, client: AsyncClient) -> None:
        with capture_logs() as logs:
            response = await client.get("/admin/v1/cache/stats")

        access = [e for e in logs if e["event"] == "admin.request"]
        assert len(access) == 1
        assert access[0]["log_level"] == "warning"
        assert access[0]["status"] == 401
        assert access[0]["method"] == "GET"
        assert response.headers["x-touchline-latency-ms"] == str(access[0]["duration_ms"])


@pytest.mark.integration
class TestCacheAdmin:
    async def test_stats(
        self, client: AsyncClient, admin_headers: dict, live_cache: ResponseCache
    ) -> None:
        await live_cache.put("trainingPlan", {"p": 1}, "r")
        await live_cache.put("trainingPlan", {"p": 2}, "r")
        await live_cache.get("trainingPlan", {"p": 1})

        response = await client.get("/admin/v1/cache/stats", headers=admin_headers)

        assert response.status_code == 200
        assert response.json() == {
            "total_entries": 2,
            "total_hits": 1,
            "by_operation": {"trainingPlan": {"count": 2, "hits": 1}},
            "store_failures": 0,
        }
        assert "x-touchline-latency-ms" in response.headers

    async def test_stats_counts_store_failures_across_requests(
        self, app: FastAPI, client: AsyncClient, admin_headers: dict, tmp_path: Path
    ) -> None:
        # Parent directory does not exist, so every connect fails
        engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'x.db'}")
        broken = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
        app.dependency_overrides[get_session_factory] = lambda: broken
        try:
            first = await client.get("/admin/v1/cache/stats", headers=admin_headers)
            second = await client.get("/admin/v1/cache/stats", headers=admin_headers)
        finally:
            await engine.dispose()

        assert first.status_code == 200
        assert first.json()["total_entries"] == 0
        assert first.json()["store_failures"] == 1
        assert second.json()["store_failures"] == 2

    async def test_clear_one_operation(
        self, client: AsyncClient, admin_headers: dict, live_cache: ResponseCache
    ) -> None:
        await live_cache.put("trainingPlan", {"p": 1}, "r")
        await live_cache.put("matchStrategy", {"p": 1}, "r")

        response = await client.post(
            "/admin/v1/cache/clear", headers=admin_headers, json={"operation": "trainingPlan"}
        )

        assert response.status_code == 200
        assert response.json() == {"removed": 1}
        assert await live_cache.get("matchStrategy", {"p": 1}) == "r"

    async def test_clear_everything(
        self, client: AsyncClient, admin_headers: dict, live_cache: ResponseCache
    ) -> None:
        await live_cache.put("trainingPlan", {"p": 1}, "r")
        await live_cache.put("matchStrategy", {"p": 1}, "r")

        response = await client.post("/admin/v1/cache/clear", headers=admin_headers, json={})

        assert response.json() == {"removed": 2}
        assert (await live_cache.stats()).total_entries == 0

    async def test_blank_operation_is_rejected(
        self, client: AsyncClient, admin_headers: dict, live_cache: ResponseCache
    ) -> None:
        await live_cache.put("trainingPlan", {"p": 1}, "r")
        await live_cache.put("matchStrategy", {"p": 1}, "r")

        response = await client.post(
            "/admin/v1/cache/clear", headers=admin_headers, json={"operation": ""}
        )

        assert response.status_code == 422
        assert (await live_cache.stats()).total_entries == 2

    async def test_invalidate_event(
        self, client: AsyncClient, admin_headers: dict, live_cache: ResponseCache
    ) -> None:
        await live_cache.put("matchStrategy", {"p": 1}, "r")
        await live_cache.put("trainingPlan", {"p": 1}, "r")

        response = await client.post(
            "/admin/v1/cache/invalidate",
            headers=admin_headers,
            json={"type": "match", "match_id": 3},
        )

        assert response.status_code == 200
        assert response.json() == {"invalidated": ["matchStrategy", "opponentAnalysis"]}
        assert await live_cache.get("matchStrategy", {"p": 1}) is None
        assert await live_cache.get("trainingPlan", {"p": 1}) == "r"

    async def test_invalidate_comprehensive(self, client: AsyncClient, admin_headers: dict) -> None:
        response = await client.post(
            "/admin/v1/cache/invalidate",
            headers=admin_headers,
            json={"type": "player", "player_id": 7, "comprehensive": True},
        )

        assert response.status_code == 200
        assert set(response.json()["invalidated"]) == {
            "playerAnalysis",
            "injuryPrediction",
            "nutritionPlan",
            "parentReport",
            "videoAnalysis",
        }

    async def test_invalidate_rejects_unknown_type(
        self, client: AsyncClient, admin_headers: dict
    ) -> None:
        response = await client.post(
            "/admin/v1/cache/invalidate", headers=admin_headers, json={"type": "weather"}
        )
        assert response.status_code == 422

    async def test_sweep(self, client: AsyncClient, admin_headers: dict) -> None:
        response = await client.post("/admin/v1/cache/sweep", headers=admin_headers)
        assert response.status_code == 200
        assert response.json() == {"removed": 0}


@pytest.mark.integration
class TestWarmupEndpoint:
    async def test_full_warmup(
        self,
        client: AsyncClient,
        admin_headers: dict,
        db_session: AsyncSession,
        fake_llm: FakeLLM,
        live_cache: ResponseCache,
    ) -> None:
        db_session.add_all([make_player("Ada", "Mensah"), make_player("Cy", "Lowe")])
        await db_session.commit()

        response = await client.post("/admin/v1/cache/warmup", headers=admin_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["details"]["player_analyses"] == {"success": 2, "failed": 0, "errors": []}
        assert data["details"]["training_plans"]["success"] == 20
        assert data["details"]["drill_recommendations"]["success"] == 90
        assert data["details"]["match_strategies"]["success"] == 3
        assert data["total_success"] == 115
        assert data["total_failed"] == 0
        assert len(fake_llm.calls) == 115

        stats = await live_cache.stats()
        assert stats.by_operation["playerAnalysis"].count == 2
        assert stats.by_operation["trainingPlan"].count == 110
