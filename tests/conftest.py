"""
Shared test fixtures.

Uses a throwaway SQLite file per test (aiosqlite). Each store call opens its
own connection, the same way it would against PostgreSQL.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from pathlib import Path

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from factories import FakeLLM, VirtualClock
from touchline.api.deps import get_llm, get_session_factory
from touchline.app import create_app
from touchline.config import Settings, get_settings
from touchline.core.cache.manager import ResponseCache
from touchline.core.cache.store import CacheStore
from touchline.db.session import get_db_session
from touchline.models.base import Base


# Test Settings Override

def get_test_settings() -> Settings:
    return Settings(
        env="test",
        database={"url": "sqlite+aiosqlite:///:memory:"},  # type: ignore[arg-type]
        auth={"master_api_key": "test_admin_key"},  # type: ignore[arg-type]
        logging={"level": "DEBUG", "format": "console"},  # type: ignore[arg-type]
        warmup={"top_players_count": 5},  # type: ignore[arg-type]
    )


# Database Fixtures

@pytest.fixture
async def test_engine(tmp_path: Path) -> AsyncIterator[AsyncEngine]:
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'touchline.db'}", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(test_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncSession]:
    async with session_factory() as session:
        yield session


# Cache Fixtures

@pytest.fixture
def clock() -> VirtualClock:
    return VirtualClock()


@pytest.fixture
def store(session_factory: async_sessionmaker[AsyncSession], clock: VirtualClock) -> CacheStore:
    return CacheStore(session_factory, clock=clock)


@pytest.fixture
def cache(store: CacheStore, clock: VirtualClock) -> ResponseCache:
    return ResponseCache(store, clock=clock)


@pytest.fixture
def fake_llm() -> FakeLLM:
    return FakeLLM()


# App + Client Fixtures

@pytest.fixture
async def app(
    session_factory: async_sessionmaker[AsyncSession],
    fake_llm: FakeLLM,
) -> FastAPI:
    application = create_app()

    async def override_db() -> AsyncIterator[AsyncSession]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    application.dependency_overrides[get_db_session] = override_db
    application.dependency_overrides[get_session_factory] = lambda: session_factory
    application.dependency_overrides[get_settings] = get_test_settings
    application.dependency_overrides[get_llm] = lambda: fake_llm
    return application


@pytest.fixture
async def client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
def admin_headers() -> dict[str, str]:
    """Headers with admin authentication."""
    return {"Authorization": "Bearer test_admin_key"}
