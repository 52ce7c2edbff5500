"""Access log for the admin API."""

from __future__ import annotations

import time

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = structlog.stdlib.get_logger()

LATENCY_HEADER = "x-touchline-latency-ms"

# Probed every few seconds by the orchestrator
QUIET_PATH_PREFIX = "/admin/v1/health/"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.url.path.startswith(QUIET_PATH_PREFIX):
            return await call_next(request)

        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = int((time.perf_counter() - start) * 1000)

        # Rejected admin calls are worth seeing above INFO
        log = logger.awarning if response.status_code >= 400 else logger.ainfo
        await log(
            "admin.request",
            method=request.method,
            status=response.status_code,
            duration_ms=duration_ms,
        )

        response.headers[LATENCY_HEADER] = str(duration_ms)
        return response
