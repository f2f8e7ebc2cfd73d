"""
Bus Pass Backend - Rate Limiting Middleware
=============================================

What:  Per-client sliding window limit on API requests.
How:   Each client address owns a deque of monotonic hit times. Hits older
       than settings.rate_limit_window fall off the left end; a client that
       already holds settings.rate_limit_requests hits gets a 429 and a
       Retry-After telling it when its oldest hit expires.

Idle clients are swept once per window, so the table only holds clients
seen in the last two windows. Counts are per worker process.
"""

import logging
import math
import time
from collections import deque
from typing import Deque, Dict, Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from buspass.config import settings
from buspass.exceptions import RateLimitExceededError

logger = logging.getLogger(__name__)


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Answers 429 once a client exceeds its request allowance."""

    EXEMPT_PATHS = frozenset({"/health", "/docs", "/openapi.json", "/redoc"})

    def __init__(self, app, **kwargs):
        super().__init__(app, **kwargs)
        self._hits: Dict[str, Deque[float]] = {}
        self._next_sweep = 0.0

    @staticmethod
    def client_key(request: Request) -> str:
        # Behind a proxy this is the proxy's address
        return request.client.host if request.client else "unknown"

    def sweep(self, now: float) -> int:
        """Forget clients whose newest hit is outside the window."""
        cutoff = now - settings.rate_limit_window
        idle = [key for key, hits in self._hits.items() if not hits or hits[-1] <= cutoff]
        for key in idle:
            del self._hits[key]
        self._next_sweep = now + settings.rate_limit_window
        if idle:
            logger.debug("Rate limiter dropped %d idle clients", len(idle))
        return len(idle)

    def register_hit(self, key: str, now: float) -> Optional[RateLimitExceededError]:
        """
        Record a hit for key at time now.

        Returns the error to answer with when the client is over its limit;
        rejected hits are not recorded.
        """
        window = settings.rate_limit_window
        hits = self._hits.setdefault(key, deque())
        while hits and hits[0] <= now - window:
            hits.popleft()

        if len(hits) >= settings.rate_limit_requests:
            retry_after = max(1, math.ceil(hits[0] + window - now))
            return RateLimitExceededError(retry_after=retry_after, context={"client_ip": key})

        hits.append(now)
        return None

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in self.EXEMPT_PATHS:
            return await call_next(request)

        now = time.monotonic()
        if now >= self._next_sweep:
            self.sweep(now)

        key = self.client_key(request)
        exceeded = self.register_hit(key, now)
        if exceeded is None:
            return await call_next(request)

        logger.warning(
            "Rate limit hit by %s on %s %s (retry in %ds)",
            key,
            request.method,
            request.url.path,
            exceeded.retry_after,
        )
        return JSONResponse(
            status_code=429,
            content={
                "error": "rate_limit_exceeded",
                "message": exceeded.message,
                "details": exceeded.context,
            },
            headers={"Retry-After": str(exceeded.retry_after)},
        )
