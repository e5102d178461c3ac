"""
Unit tests for the request logging middleware.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import FastAPI, Request
from starlette.responses import Response
from starlette.testclient import TestClient

from islamwiki.http.middleware import RequestLoggingMiddleware


class TestRequestLoggingMiddlewareDispatch:
    """Test RequestLoggingMiddleware.dispatch method."""

    @pytest.mark.asyncio
    async def test_middleware_logs_and_adds_process_time(self):
        mock_request = AsyncMock(spec=Request)
        mock_request.method = "GET"
        mock_request.url.path = "/wiki/Salah"
        mock_request.state = MagicMock()

        async def mock_call_next(request):
            return Response(content="ok", status_code=200)

        middleware = RequestLoggingMiddleware(app=AsyncMock())

        with patch("islamwiki.http.middleware.request_logging.logger") as mock_logger:
            response = await middleware.dispatch(mock_request, mock_call_next)

        assert response.status_code == 200
        assert "X-Process-Time" in response.headers
        mock_logger.info.assert_called_once()
        assert "GET /wiki/Salah 200" in mock_logger.info.call_args[0][0]
        mock_logger.warning.assert_not_called()

    @pytest.mark.asyncio
    async def test_middleware_warns_on_slow_requests(self):
        mock_request = AsyncMock(spec=Request)
        mock_request.method = "POST"
        mock_request.url.path = "/api/configuration/core/site_name"
        mock_request.state = MagicMock()

        async def mock_call_next(request):
            return Response(content="ok", status_code=200)

        middleware = RequestLoggingMiddleware(app=AsyncMock())

        with (
            patch("islamwiki.http.middleware.request_logging.time") as mock_time,
            patch("islamwiki.http.middleware.request_logging.logger") as mock_logger,
        ):
            mock_time.time.side_effect = [100.0, 101.5]
            response = await middleware.dispatch(mock_request, mock_call_next)

        assert response.headers["X-Process-Time"] == "1500.00"
        mock_logger.warning.assert_called_once()
        assert "Slow request" in mock_logger.warning.call_args[0][0]

    @pytest.mark.asyncio
    async def test_middleware_logs_and_reraises_errors(self):
        mock_request = AsyncMock(spec=Request)
        mock_request.method = "GET"
        mock_request.url.path = "/boom"
        mock_request.state = MagicMock()

        async def mock_call_next(request):
            raise ValueError("boom")

        middleware = RequestLoggingMiddleware(app=AsyncMock())

        with patch("islamwiki.http.middleware.request_logging.logger") as mock_logger:
            with pytest.raises(ValueError):
                await middleware.dispatch(mock_request, mock_call_next)

        mock_logger.error.assert_called_once()


class TestRequestLoggingMiddlewareIntegration:
    def test_header_on_real_application(self):
        app = FastAPI()
        app.add_middleware(RequestLoggingMiddleware)

        @app.get("/ping")
        async def ping():
            return {"pong": True}

        response = TestClient(app).get("/ping")

        assert response.status_code == 200
        assert float(response.headers["X-Process-Time"]) >= 0
