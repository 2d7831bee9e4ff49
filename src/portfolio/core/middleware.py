"""Request logging middleware."""

import logging
import time
import uuid
from collections.abc import Callable

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response
from starlette.types import ASGIApp

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log each request with its status, duration and request id.

    The request id is taken from the incoming ``X-Request-ID`` header or
    generated, stored on ``request.state.request_id`` and echoed back on the
    response. Health checks and the API docs are passed through silently.
    """

    def __init__(self, app: ASGIApp, quiet_paths: set[str] | None = None) -> None:
        super().__init__(app)
        self._quiet_paths = quiet_paths or {
            "/health",
            "/health/db",
            "/docs",
            "/openapi.json",
            "/redoc",
        }

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id

        if request.url.path in self._quiet_paths:
            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = request_id
            return response

        start_time = time.perf_counter()
        response = await call_next(request)
        duration = time.perf_counter() - start_time

        log_level = logging.WARNING if response.status_code >= 400 else logging.INFO
        logger.log(
            log_level,
            f"[{request_id[:8]}] {request.method} {request.url.path} - "
            f"{response.status_code} ({duration:.3f}s)",
        )

        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers["X-Process-Time"] = f"{duration:.3f}"
        return response
