"""
Request logging middleware.

Logs every incoming request with method, path, status code, and latency,
and echoes the latency back in an ``X-Process-Time-Ms`` header so callers
batching leads can see how long each evaluation took.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("lead_engine.access")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log request method, path, status code, and response time."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        start = time.perf_counter()
        response: Response | None = None
        try:
            response = await call_next(request)
            return response
        finally:
            elapsed_ms = round((time.perf_counter() - start) * 1000, 2)
            status_code = response.status_code if response else 500
            if response is not None:
                response.headers["X-Process-Time-Ms"] = f"{elapsed_ms:.2f}"
            logger.info(
                "%s %s -> %d (%.2fms)",
                request.method,
                request.url.path,
                status_code,
                elapsed_ms,
            )
