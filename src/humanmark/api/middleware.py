"""HumanMark - Request id, access log and per-client rate limiting."""

from __future__ import annotations

import logging
import secrets
import threading
import time
from typing import Awaitable, Callable

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

RATE_WINDOW_SEC = 60
UNLIMITED_PATHS = frozenset({"/health"})
REQUEST_ID_HEADER = "X-Request-ID"


class RateLimiter:
    """Fixed-window request counter per client key."""

    def __init__(self, max_requests: int, window_sec: float = RATE_WINDOW_SEC) -> None:
        self.max_requests = max_requests
        self.window_sec = window_sec
        self._windows: dict[str, tuple[float, int]] = {}  # key -> (window start, count)
        self._lock = threading.Lock()

    def hit(self, key: str) -> tuple[bool, int]:
        """Count one request. Returns (allowed, remaining in this window)."""
        now = time.monotonic()
        with self._lock:
            start, count = self._windows.get(key, (now, 0))
            if now - start >= self.window_sec:
                start, count = now, 0
            if count >= self.max_requests:
                return False, 0
            count += 1
            self._windows[key] = (start, count)
            if len(self._windows) > 10_000:
                self._drop_stale(now)
            return True, self.max_requests - count

    def _drop_stale(self, now: float) -> None:
        stale = [k for k, (start, _) in self._windows.items() if now - start >= self.window_sec]
        for k in stale:
            del self._windows[k]


def client_ip(request: Request) -> str:
    forwarded = request.headers.get("X-Forwarded-For", "")
    if forwarded:
        return forwarded.split(",")[0].strip()
    real_ip = request.headers.get("X-Real-IP", "")
    if real_ip:
        return real_ip.strip()
    return request.client.host if request.client else "unknown"


def install_request_middleware(app: FastAPI, rate_limit: int) -> RateLimiter:
    limiter = RateLimiter(rate_limit)

    @app.middleware("http")
    async def request_context(request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or secrets.token_hex(8)
        structlog.contextvars.bind_contextvars(request_id=request_id)
        start = time.perf_counter()
        remote = client_ip(request)
        try:
            if request.url.path in UNLIMITED_PATHS:
                response = await call_next(request)
            else:
                allowed, remaining = limiter.hit(remote)
                if allowed:
                    response = await call_next(request)
                else:
                    logger.warning("Rate limit exceeded for %s", remote)
                    response = JSONResponse(
                        status_code=429,
                        content={"error": "rate limit exceeded", "code": "rate_limited", "retry_after": RATE_WINDOW_SEC},
                        headers={"Retry-After": str(RATE_WINDOW_SEC)},
                    )
                response.headers["X-RateLimit-Limit"] = str(limiter.max_requests)
                response.headers["X-RateLimit-Remaining"] = str(remaining)

            response.headers[REQUEST_ID_HEADER] = request_id
            logger.info(
                "http request",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "status": response.status_code,
                    "duration_ms": round((time.perf_counter() - start) * 1000, 2),
                    "remote_addr": remote,
                    "user_agent": request.headers.get("User-Agent", ""),
                },
            )
            return response
        finally:
            structlog.contextvars.unbind_contextvars("request_id")

    return limiter
