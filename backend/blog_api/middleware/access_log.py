"""
Blog API Backend — Access Log and Error Boundary Middleware
============================================================

What:  Writes one access log line per request and turns any fault that
       escaped the route handlers into the 500 envelope.
Why:   The 500 must be rendered inside the middleware stack so that the
       outer layers still add X-Request-ID and the CORS headers to it.
How:   Wraps call_next. The level follows the status class: 5xx ERROR,
       4xx WARNING, everything else INFO. Requests to the health route
       ({prefix}/health exactly) are served but not logged.

Request bodies are never logged here; the routes log them at DEBUG only.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from blog_api.exceptions import internal_error_envelope
from blog_api.middleware.request_id import request_id_var

logger = logging.getLogger("blog_api.access")


def _level_for(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class AccessLogMiddleware(BaseHTTPMiddleware):
    """Access logging plus the last-resort 500 for handler faults."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        settings = request.app.state.settings
        rid = request_id_var.get("")
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
            response = JSONResponse(
                status_code=500,
                content=internal_error_envelope(exc, settings.is_development),
            )

        if request.url.path == f"{settings.api_prefix}/health":
            return response

        elapsed_ms = (time.perf_counter() - started) * 1000
        client = request.client.host if request.client else "unknown"
        logger.log(
            _level_for(response.status_code),
            "%s %s %d %.1fms [%s] from %s",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            rid,
            client,
            extra={
                "request_id": rid,
                "status": response.status_code,
                "duration_ms": round(elapsed_ms, 2),
            },
        )
        return response
