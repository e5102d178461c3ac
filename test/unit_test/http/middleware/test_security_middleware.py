"""
Unit tests for the security middleware.

Covers rate limiting with a controllable clock, suspicious pattern
detection, security headers and client IP resolution.
"""

import pytest
from starlette.responses import PlainTextResponse

from islamwiki.core.errors import HttpException
from islamwiki.http.middleware import SecurityMiddleware
from islamwiki.http.middleware.security import SECURITY_HEADERS
from islamwiki.http.utils import client_ip
from islamwiki.server.core.config import RateLimitConfig


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


async def ok(request):
    return PlainTextResponse("ok")


class TestRateLimiting:
    def test_burst_limit(self, make_request):
        clock = FakeClock()
        middleware = SecurityMiddleware(RateLimitConfig(requests_per_minute=60, burst_limit=10), clock=clock)
        request = make_request()

        for _ in range(10):
            middleware.check_rate_limit(request)

        with pytest.raises(HttpException) as exc_info:
            middleware.check_rate_limit(request)
        assert exc_info.value.status_code == 429
        assert "burst" in exc_info.value.message

        clock.advance(1.5)
        middleware.check_rate_limit(request)

    def test_minute_limit(self, make_request):
        clock = FakeClock()
        middleware = SecurityMiddleware(RateLimitConfig(requests_per_minute=5, burst_limit=100), clock=clock)
        request = make_request()

        for _ in range(5):
            middleware.check_rate_limit(request)
            clock.advance(2)

        with pytest.raises(HttpException) as exc_info:
            middleware.check_rate_limit(request)
        assert exc_info.value.status_code == 429
        assert exc_info.value.headers["Retry-After"] == "60"

        clock.advance(60)
        middleware.check_rate_limit(request)

    def test_hour_limit(self, make_request):
        clock = FakeClock()
        middleware = SecurityMiddleware(
            RateLimitConfig(requests_per_minute=100, requests_per_hour=3, burst_limit=100), clock=clock
        )
        request = make_request()

        for _ in range(3):
            middleware.check_rate_limit(request)
            clock.advance(120)

        with pytest.raises(HttpException) as exc_info:
            middleware.check_rate_limit(request)
        assert exc_info.value.status_code == 429
        assert "hourly" in exc_info.value.message
        assert exc_info.value.headers["Retry-After"] == "3600"

        clock.advance(3600)
        middleware.check_rate_limit(request)

    def test_idle_clients_are_forgotten(self, make_request):
        clock = FakeClock()
        middleware = SecurityMiddleware(RateLimitConfig(), clock=clock)
        for index in range(5):
            middleware.check_rate_limit(make_request(client=(f"10.0.0.{index}", 1)))
        assert middleware.tracked_clients == 5

        clock.advance(1800)
        middleware.check_rate_limit(make_request(client=("10.0.1.1", 1)))
        assert middleware.tracked_clients == 6

        clock.advance(1801)
        middleware.check_rate_limit(make_request(client=("10.0.1.2", 1)))
        assert middleware.tracked_clients == 2

    def test_limits_are_per_client(self, make_request):
        middleware = SecurityMiddleware(RateLimitConfig(requests_per_minute=1, burst_limit=1), clock=FakeClock())

        middleware.check_rate_limit(make_request(client=("10.0.0.1", 1)))
        middleware.check_rate_limit(make_request(client=("10.0.0.2", 1)))

        with pytest.raises(HttpException):
            middleware.check_rate_limit(make_request(client=("10.0.0.1", 1)))

    @pytest.mark.asyncio
    async def test_disabled_rate_limit(self, make_request):
        middleware = SecurityMiddleware(RateLimitConfig(enabled=False, requests_per_minute=1, burst_limit=1))

        for _ in range(3):
            response = await middleware.handle(make_request(), ok)
            assert response.status_code == 200


class TestSuspiciousPatterns:
    @pytest.mark.parametrize(
        "kwargs",
        [
            {"query_string": "q=1+UNION+SELECT+password"},
            {"query_string": "q=1%20union%20select%20x"},
            {"path": "/wiki/DROP TABLE users"},
            {"headers": {"User-Agent": "sqlmap eval(payload)"}},
            {"path": "/wiki/<script>alert(1)</script>"},
            {"path": "/wiki/javascript:alert(1)"},
            {"path": "/wiki/../../etc/passwd"},
            {"path": "//double"},
        ],
    )
    def test_suspicious_requests_are_forbidden(self, make_request, kwargs):
        middleware = SecurityMiddleware()

        with pytest.raises(HttpException) as exc_info:
            middleware.detect_suspicious_patterns(make_request(**kwargs))

        assert exc_info.value.status_code == 403

    def test_normal_request_passes(self, make_request):
        SecurityMiddleware().detect_suspicious_patterns(
            make_request(path="/wiki/Salah", query_string="section=times", headers={"User-Agent": "Mozilla/5.0"})
        )

    @pytest.mark.asyncio
    async def test_handle_blocks_before_calling_next(self, make_request):
        calls = []

        async def call_next(request):
            calls.append(request)
            return PlainTextResponse("ok")

        with pytest.raises(HttpException):
            await SecurityMiddleware().handle(make_request(path="/a/../b"), call_next)

        assert calls == []


class TestSecurityHeaders:
    @pytest.mark.asyncio
    async def test_headers_added(self, make_request):
        response = await SecurityMiddleware().handle(make_request(path="/wiki/Salah"), ok)

        for header, value in SECURITY_HEADERS.items():
            assert response.headers[header] == value
        assert "Cache-Control" not in response.headers

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["/admin", "/admin/configuration", "/profile/settings"])
    async def test_no_store_for_sensitive_pages(self, make_request, path):
        response = await SecurityMiddleware().handle(make_request(path=path), ok)

        assert response.headers["Cache-Control"].startswith("no-store")
        assert response.headers["Pragma"] == "no-cache"


class TestClientIp:
    def test_forwarded_for_first_entry(self, make_request):
        request = make_request(headers={"X-Forwarded-For": "203.0.113.7, 10.0.0.1", "X-Real-IP": "10.0.0.9"})

        assert client_ip(request) == "203.0.113.7"

    def test_real_ip(self, make_request):
        assert client_ip(make_request(headers={"X-Real-IP": "198.51.100.4"})) == "198.51.100.4"

    def test_peer_address(self, make_request):
        assert client_ip(make_request(client=("192.0.2.1", 4000))) == "192.0.2.1"
