"""
Unified error handling.

Every Touchline error carries an HTTP status and an error type so the admin
API can render it without per-route handling.
"""

from __future__ import annotations

from typing import Any

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import ORJSONResponse

logger = structlog.stdlib.get_logger()


class TouchlineError(Exception):
    """Base exception for all Touchline errors."""

    status_code: int = 500
    error_type: str = "internal_error"

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> dict[str, Any]:
        return {
            "error": {
                "message": self.message,
                "type": self.error_type,
                "code": self.status_code,
                **self.details,
            }
        }


class AuthenticationError(TouchlineError):
    status_code = 401
    error_type = "authentication_error"


class ValidationError(TouchlineError):
    status_code = 400
    error_type = "invalid_request_error"


class KeySerializationError(ValidationError):
    """Request parameters could not be serialized into a cache key."""

    error_type = "cache_key_serialization_error"


class CacheStoreUnavailableError(TouchlineError):
    """The backing cache table could not be reached."""

    status_code = 503
    error_type = "cache_store_unavailable"


class LLMError(TouchlineError):
    """The upstream language model call failed."""

    status_code = 502
    error_type = "llm_error"


def register_error_handlers(app: FastAPI) -> None:
    """Register global exception handlers."""

    @app.exception_handler(TouchlineError)
    async def touchline_error_handler(request: Request, exc: TouchlineError) -> ORJSONResponse:
        await logger.awarning(
            "touchline.error",
            error_type=exc.error_type,
            message=exc.message,
            status_code=exc.status_code,
            path=request.url.path,
        )
        return ORJSONResponse(
            status_code=exc.status_code,
            content=exc.to_response(),
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> ORJSONResponse:
        await logger.aexception(
            "touchline.unhandled_error",
            path=request.url.path,
            error=str(exc),
        )
        return ORJSONResponse(
            status_code=500,
            content={
                "error": {
                    "message": "An internal error occurred.",
                    "type": "internal_error",
                    "code": 500,
                }
            },
        )
