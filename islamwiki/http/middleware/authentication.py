"""
Authentication Middleware.

Route middleware for pages that require a logged-in user. Anonymous
requests are redirected to the login page with the requested path as the
``redirect`` parameter.
"""

from __future__ import annotations

from urllib.parse import quote

from starlette.requests import Request
from starlette.responses import RedirectResponse, Response

from islamwiki.core.logging_config import get_logger

from .session import get_session
from .stack import RequestHandler

logger = get_logger(__name__)

LOGIN_PATH = "/login"


class AuthenticationMiddleware:
    def __init__(self, login_path: str = LOGIN_PATH) -> None:
        self.login_path = login_path

    async def handle(self, request: Request, call_next: RequestHandler) -> Response:
        session = get_session(request)
        if session is None or not session.is_logged_in():
            logger.info(f"Unauthenticated access to {request.url.path}, redirecting to {self.login_path}")
            location = f"{self.login_path}?redirect={quote(request.url.path)}"
            return RedirectResponse(location, status_code=302)
        return await call_next(request)
