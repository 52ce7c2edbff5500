"""Async database session management."""

from __future__ import annotations

from collections.abc import AsyncIterator

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from touchline.config import DatabaseSettings, get_settings


def build_engine(db: DatabaseSettings) -> AsyncEngine:
    """Engine for the configured URL. SQLite gets no pool sizing, it does not take any."""
    if make_url(db.url).get_backend_name() == "sqlite":
        return create_async_engine(db.url, echo=db.echo)

    return create_async_engine(
        db.url,
        pool_size=db.pool_size,
        max_overflow=db.max_overflow,
        echo=db.echo,
        pool_pre_ping=True,
        pool_recycle=300,
    )


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # Cache rows are read after their session closes
    return async_sessionmaker(bind, class_=AsyncSession, expire_on_commit=False)


engine: AsyncEngine = build_engine(get_settings().database)
async_session_factory = build_session_factory(engine)


async def get_db_session() -> AsyncIterator[AsyncSession]:
    """FastAPI dependency: one session per request, committed on success."""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
