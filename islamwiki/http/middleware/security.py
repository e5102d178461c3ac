"""
Security Middleware.

Protects the wiki routes with:
- Per-client sliding-window rate limiting (per hour, per minute and per
  second burst); clients idle for an hour are forgotten
- Detection of common SQL injection, XSS and path traversal probes
- Security response headers
- ``Cache-Control: no-store`` for account and administration pages
"""

from __future__ import annotations

import re
import time
from collections import deque
from typing import Callable, Deque, Dict, Optional, Tuple
from urllib.parse import unquote_plus

from starlette.requests import Request
from starlette.responses import Response

from islamwiki.core.errors import HttpException
from islamwiki.core.logging_config import get_logger
from islamwiki.http.utils import client_ip
from islamwiki.server.core.config import RateLimitConfig

from .stack import RequestHandler

logger = get_logger(__name__)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "1; mode=block",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Content-Security-Policy": (
        "default-src 'self'; "
        "script-src 'self' 'unsafe-inline' https://unpkg.com https://cdnjs.cloudflare.com; "
        "style-src 'self' 'unsafe-inline' https://cdnjs.cloudflare.com; "
        "img-src 'self' data: https:; "
        "font-src 'self' https://cdnjs.cloudflare.com;"
    ),
    "Permissions-Policy": "geolocation=(), microphone=(), camera=()",
    "Strict-Transport-Security": "max-age=31536000; includeSubDomains",
}

NO_STORE_PREFIXES = ("/admin", "/profile")

SQL_INJECTION_PATTERNS = [
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"union\s*select",
        r"union\+select",
        r"union%20select",
        r"drop\s+table",
        r"delete\s+from",
        r"insert\s+into",
        r"update\s+set",
        r"exec\s*\(",
        r"eval\s*\(",
    )
]

XSS_PATTERNS = [
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>",
        r"javascript:",
        r"vbscript:",
        r"onload\s*=",
        r"onerror\s*=",
    )
]

HOUR = 3600.0
MINUTE = 60.0
SECOND = 1.0

RateWindows = Tuple[Deque[float], Deque[float], Deque[float]]


class SecurityMiddleware:
    """Rate limiting, probe detection and security headers."""

    def __init__(
        self,
        rate_limit: Optional[RateLimitConfig] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Args:
            rate_limit: Rate limit configuration; defaults apply when omitted
            clock: Monotonic time source in seconds
        """
        self.rate_limit = rate_limit or RateLimitConfig()
        self._clock = clock
        self._requests: Dict[str, RateWindows] = {}
        self._last_sweep = clock()

    async def handle(self, request: Request, call_next: RequestHandler) -> Response:
        try:
            if self.rate_limit.enabled:
                self.check_rate_limit(request)
            self.detect_suspicious_patterns(request)
        except HttpException as e:
            logger.warning(
                f"Security middleware blocked request from {client_ip(request)} to {request.url.path}: {e.message}"
            )
            raise

        response = await call_next(request)
        self.add_security_headers(request, response)
        return response

    def check_rate_limit(self, request: Request) -> None:
        """
        Record the request and enforce the burst, per-minute and per-hour limits.

        Raises:
            HttpException: 429 when any limit is exceeded
        """
        now = self._clock()
        self._forget_idle_clients(now)
        windows = self._requests.setdefault(client_ip(request), (deque(), deque(), deque()))
        for window, length in zip(windows, (HOUR, MINUTE, SECOND)):
            while window and window[0] <= now - length:
                window.popleft()
        hour_window, minute_window, burst_window = windows

        if len(burst_window) >= self.rate_limit.burst_limit:
            raise HttpException.too_many_requests("Too many requests (burst limit exceeded)", retry_after=1)
        if len(minute_window) >= self.rate_limit.requests_per_minute:
            raise HttpException.too_many_requests("Too many requests (rate limit exceeded)", retry_after=60)
        if len(hour_window) >= self.rate_limit.requests_per_hour:
            raise HttpException.too_many_requests("Too many requests (hourly limit exceeded)", retry_after=3600)

        for window in windows:
            window.append(now)

    def _forget_idle_clients(self, now: float) -> None:
        # A client is idle once its newest request has left the hour window.
        if now - self._last_sweep < MINUTE:
            return
        self._last_sweep = now
        idle = [
            ip for ip, (hour_window, _, _) in self._requests.items() if not hour_window or hour_window[-1] <= now - HOUR
        ]
        for ip in idle:
            del self._requests[ip]
        if idle:
            logger.debug(f"Forgot rate limit state for {len(idle)} idle client(s)")

    @property
    def tracked_clients(self) -> int:
        return len(self._requests)

    def detect_suspicious_patterns(self, request: Request) -> None:
        """
        Reject requests carrying injection or traversal probes.

        Raises:
            HttpException: 403 when a pattern matches
        """
        path = request.url.path
        query = request.url.query
        decoded_query = unquote_plus(query)
        user_agent = request.headers.get("user-agent", "")

        for pattern in SQL_INJECTION_PATTERNS:
            if any(pattern.search(value) for value in (path, query, decoded_query, user_agent)):
                logger.warning(f"Suspicious pattern detected: {pattern.pattern}")
                raise HttpException.forbidden("Suspicious request detected")

        for pattern in XSS_PATTERNS:
            if pattern.search(path):
                logger.warning(f"Suspicious pattern detected: {pattern.pattern}")
                raise HttpException.forbidden("Suspicious request detected")

        if ".." in path or "//" in path:
            logger.warning(f"Path traversal attempt detected: {path}")
            raise HttpException.forbidden("Suspicious request detected")

    def add_security_headers(self, request: Request, response: Response) -> None:
        for header, value in SECURITY_HEADERS.items():
            response.headers[header] = value
        if request.url.path.startswith(NO_STORE_PREFIXES):
            response.headers["Cache-Control"] = "no-store, no-cache, must-revalidate, max-age=0"
            response.headers["Pragma"] = "no-cache"
