"""
FastAPI dependency injection.

Central place for all shared dependencies used across routes.
"""

from __future__ import annotations

import hmac
from typing import Annotated

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from touchline.common.errors import AuthenticationError
from touchline.config import Settings, get_settings
from touchline.core.cache.invalidation import InvalidationRouter
from touchline.core.cache.manager import ResponseCache
from touchline.db.session import async_session_factory, get_db_session
from touchline.providers.base import LLMClient
from touchline.providers.registry import get_llm_client
from touchline.services.jobs import build_cache, build_invalidation_router, build_warmup
from touchline.services.warmup import WarmupOrchestrator

# Type aliases for cleaner signatures
DBSession = Annotated[AsyncSession, Depends(get_db_session)]
AppSettings = Annotated[Settings, Depends(get_settings)]


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    return async_session_factory


SessionFactory = Annotated[async_sessionmaker[AsyncSession], Depends(get_session_factory)]


async def require_admin(
    settings: AppSettings,
    authorization: Annotated[str | None, Header()] = None,
) -> str:
    """
    Authenticate an admin request via the master key.

    Accepts:
        - Authorization: Bearer <master key>
    """
    if not authorization:
        raise AuthenticationError("Missing Authorization header")

    parts = authorization.split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise AuthenticationError("Invalid Authorization header format. Expected: Bearer <key>")

    raw_key = parts[1].strip()
    expected = settings.auth.master_api_key
    if not expected or not hmac.compare_digest(raw_key.encode(), expected.encode()):
        raise AuthenticationError("Invalid admin key")
    return raw_key


def get_response_cache(
    request: Request, factory: SessionFactory, settings: AppSettings
) -> ResponseCache:
    """One cache per app, so its store failure count spans requests."""
    cache = getattr(request.app.state, "response_cache", None)
    if cache is None:
        cache = build_cache(factory, settings)
        request.app.state.response_cache = cache
    return cache


def get_invalidation_router(
    cache: Annotated[ResponseCache, Depends(get_response_cache)],
) -> InvalidationRouter:
    return build_invalidation_router(cache)


def get_llm(settings: AppSettings) -> LLMClient:
    return get_llm_client(settings.llm)


def get_warmup_orchestrator(
    factory: SessionFactory,
    cache: Annotated[ResponseCache, Depends(get_response_cache)],
    settings: AppSettings,
    llm: Annotated[LLMClient, Depends(get_llm)],
) -> WarmupOrchestrator:
    return build_warmup(factory, cache, settings, llm)


# Annotated types for route signatures
AdminKey = Annotated[str, Depends(require_admin)]
Cache = Annotated[ResponseCache, Depends(get_response_cache)]
Invalidator = Annotated[InvalidationRouter, Depends(get_invalidation_router)]
Warmup = Annotated[WarmupOrchestrator, Depends(get_warmup_orchestrator)]
