"""One log line per HTTP request, with timing."""

from __future__ import annotations

import logging
import time
from typing import Any

from fastapi import FastAPI
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from academy.core.constants import Routes
from academy.core.logging import env_bool

# Polled by load balancers; successful hits are logged at DEBUG only.
_QUIET_PATHS = frozenset({Routes.HEALTH.prefix})


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: FastAPI) -> None:
        super().__init__(app)
        self.logger = logging.getLogger("academy.request")

    def _pick_level(self, path: str, status_code: int | None) -> int:
        if status_code is None or status_code >= 500:
            return logging.ERROR
        if path in _QUIET_PATHS and status_code < 400:
            return logging.DEBUG
        return logging.INFO

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        start = time.perf_counter()
        response: Response | None = None
        try:
            response = await call_next(request)
            return response
        finally:
            duration_ms = (time.perf_counter() - start) * 1000.0
            status_code = response.status_code if response else None
            path = request.url.path

            extra: dict[str, Any] = {
                "method": request.method,
                "path": path,
                "query": request.url.query,
                "status_code": status_code,
                "duration_ms": round(duration_ms, 2),
                "client_ip": request.client.host if request.client else None,
                "user_agent": request.headers.get("user-agent"),
            }
            self.logger.log(
                self._pick_level(path, status_code),
                "%s %s -> %s (%.2fms)",
                request.method,
                path,
                status_code,
                duration_ms,
                extra=extra,
            )


def add_request_logging_middleware(app: FastAPI) -> None:
    """Attach the middleware unless LOG_REQUESTS is false."""
    if not env_bool("LOG_REQUESTS", default=True):
        return
    app.add_middleware(RequestLoggingMiddleware)
