"""HTTP middleware: CORS, response headers and the per-client request budget.

The budget is charged to the network peer. Forwarding headers are honored
only when the peer is a configured reverse proxy.
"""

import time
from collections import deque
from collections.abc import Iterable
from typing import Any

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.types import ASGIApp

from evote_api.core.config import Settings
from evote_api.schemas.common import ErrorResponse

RATE_LIMIT_WINDOW_SECONDS = 60.0


def get_client_ip(request: Request, trusted_proxies: Iterable[str] = ()) -> str:
    """Resolve the address a request is charged to.

    The socket peer is used as-is unless it is a trusted proxy. Behind
    trusted proxies, ``X-Forwarded-For`` is read right to left and the first
    hop that is not itself a trusted proxy wins; entries left of it were
    written by the client and are ignored.

    Args:
        request: The incoming request.
        trusted_proxies: Addresses of reverse proxies allowed to forward
            client addresses.

    Returns:
        The client address, or ``"unknown"`` when the peer is not known.
    """
    peer = request.client.host if request.client else "unknown"
    proxies = set(trusted_proxies)
    if peer not in proxies:
        return peer

    hops = [hop.strip() for hop in request.headers.get("x-forwarded-for", "").split(",") if hop.strip()]
    for hop in reversed(hops):
        if hop not in proxies:
            return hop
    return peer


def setup_cors(app: FastAPI, settings: Settings) -> None:
    """Allow browser access from the configured voting front-ends only."""
    kwargs: dict[str, Any] = {
        "allow_credentials": True,
        "allow_methods": ["GET", "POST", "OPTIONS"],
        "allow_headers": ["Authorization", "Content-Type"],
    }
    if settings.cors_origin_list:
        kwargs["allow_origins"] = settings.cors_origin_list
    app.add_middleware(CORSMiddleware, **kwargs)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to every response.

    Responses carry voter profiles and session tokens and are never cached.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        response.headers["Cache-Control"] = "no-store"
        return response


class SlidingWindowCounter:
    """Request timestamps per client over a fixed window.

    Clients with no request inside the window are dropped on a periodic
    sweep, so memory is bounded by the number of clients active in one
    window.

    Args:
        limit: Requests allowed per client per window.
        window_seconds: Window length in seconds.
    """

    def __init__(self, limit: int, window_seconds: float = RATE_LIMIT_WINDOW_SECONDS) -> None:
        self.limit = limit
        self.window_seconds = window_seconds
        self._hits: dict[str, deque[float]] = {}
        self._last_sweep: float | None = None

    def __len__(self) -> int:
        return len(self._hits)

    def allow(self, key: str, now: float) -> bool:
        """Record a request for ``key`` at ``now`` if it is within budget."""
        window_start = now - self.window_seconds
        if self._last_sweep is None or now - self._last_sweep >= self.window_seconds:
            self._sweep(window_start)
            self._last_sweep = now

        hits = self._hits.setdefault(key, deque())
        while hits and hits[0] <= window_start:
            hits.popleft()
        if len(hits) >= self.limit:
            return False
        hits.append(now)
        return True

    def _sweep(self, window_start: float) -> None:
        idle = [key for key, hits in self._hits.items() if not hits or hits[-1] <= window_start]
        for key in idle:
            del self._hits[key]


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Per-client sliding-window rate limit.

    Counts are process-local, so each backend instance limits separately.
    Rejections use the standard error envelope with kind ``rate_limited``.
    """

    def __init__(
        self,
        app: ASGIApp,
        requests_per_minute: int = 120,
        trusted_proxies: Iterable[str] = (),
    ) -> None:
        super().__init__(app)
        self.trusted_proxies = frozenset(trusted_proxies)
        self.counter = SlidingWindowCounter(requests_per_minute)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        client_ip = get_client_ip(request, self.trusted_proxies)
        if not self.counter.allow(client_ip, time.monotonic()):
            logger.warning("Rate limit exceeded for {} on {} {}", client_ip, request.method, request.url.path)
            body = ErrorResponse(error="Rate limit exceeded", kind="rate_limited")
            return JSONResponse(status_code=429, content=body.model_dump())
        return await call_next(request)
