"""
Error Handling Middleware.

Outermost wiki middleware: turns ``HttpException`` and unhandled exceptions
into HTML error pages.
"""

from __future__ import annotations

from starlette.requests import Request
from starlette.responses import HTMLResponse, Response

from islamwiki.core.errors import HttpException
from islamwiki.core.logging_config import get_logger
from islamwiki.http.error_pages import render_error_page

from .stack import RequestHandler

logger = get_logger(__name__)


class ErrorHandlingMiddleware:
    def __init__(self, debug: bool = False, environment: str = "production", app_name: str = "IslamWiki") -> None:
        self.debug = debug
        self.environment = environment
        self.app_name = app_name

    async def handle(self, request: Request, call_next: RequestHandler) -> Response:
        try:
            return await call_next(request)
        except HttpException as e:
            logger.warning(f"HTTP {e.status_code} for {request.method} {request.url.path}: {e.message}")
            return self._render(e.status_code, e.message or "", e, dict(e.headers))
        except Exception as e:
            logger.error(f"Unhandled exception for {request.method} {request.url.path} [{self.environment}]: {e}", exc_info=True)
            message = str(e) if self.debug else "An unexpected error occurred. Please try again later."
            return self._render(500, message, e)

    def _render(self, status_code: int, message: str, exception: Exception, headers=None) -> Response:
        page = render_error_page(
            status_code,
            message,
            exception=exception,
            debug=self.debug,
            app_name=self.app_name,
        )
        return HTMLResponse(page, status_code=status_code, headers=headers)
