"""FastAPI application factory."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from touchline import __version__
from touchline.api.admin.router import admin_router
from touchline.api.middleware.logging import RequestLoggingMiddleware
from touchline.api.middleware.request_id import RequestIDMiddleware
from touchline.common.errors import register_error_handlers
from touchline.common.logging import configure_logging
from touchline.config import get_settings
from touchline.db.session import async_session_factory, engine
from touchline.providers.registry import close_http_client

logger = structlog.stdlib.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    configure_logging(settings.logging.level, settings.logging.format)

    await logger.ainfo(
        "touchline.startup",
        version=__version__,
        env=settings.env,
        database=settings.database.url.split("@")[-1],
        cache_enabled=settings.cache.enabled,
        llm_model=settings.llm.model,
    )

    app.state.settings = settings
    app.state.db_session_factory = async_session_factory

    yield

    await close_http_client()
    await engine.dispose()
    await logger.ainfo("touchline.shutdown")


def create_app() -> FastAPI:
    """Application factory: called by Uvicorn."""
    settings = get_settings()

    app = FastAPI(
        title="Touchline",
        description="AI response cache administration for the academy coaching assistant.",
        version=__version__,
        docs_url="/docs" if settings.env == "development" else None,
        redoc_url="/redoc" if settings.env == "development" else None,
        lifespan=lifespan,
    )

    # Middleware (order matters; outermost first)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(RequestLoggingMiddleware)

    register_error_handlers(app)

    app.include_router(admin_router)

    return app
