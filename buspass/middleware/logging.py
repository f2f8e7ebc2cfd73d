"""
Bus Pass Backend - Access Log Middleware
==========================================

What:  Writes one "buspass.access" line per request once the response is ready.

Line format:
    POST /bus-pass -> 201 in 14.2ms (rid=3f2a9c1e, client=10.0.0.7)

Level follows the response: ERROR for 5xx, WARNING for 4xx, INFO otherwise.
Form bodies (rider names, emails) and photo bytes are never logged.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from buspass.middleware.request_id import request_id_var

access_logger = logging.getLogger("buspass.access")

# Polled by monitors every few seconds
QUIET_PATHS = frozenset({"/health"})


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Access log with status and wall time of each request."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in QUIET_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        rid = request_id_var.get("")
        client = request.client.host if request.client else "unknown"
        access_logger.log(
            level_for_status(response.status_code),
            "%s %s -> %d in %.1fms (rid=%s, client=%s)",
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
