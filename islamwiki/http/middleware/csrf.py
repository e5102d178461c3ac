"""
CSRF Middleware.

State-changing requests must carry the session's CSRF token, either as the
``_token`` form field, the ``X-CSRF-TOKEN`` header or the url-encoded
``X-XSRF-TOKEN`` header. API, webhook and authentication endpoints are
exempt.
"""

from __future__ import annotations

from typing import Iterable, Optional
from urllib.parse import unquote

from starlette.requests import Request
from starlette.responses import Response

from islamwiki.core.errors import HttpException
from islamwiki.core.logging_config import get_logger

from .session import get_session
from .stack import RequestHandler

logger = get_logger(__name__)

PROTECTED_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})

DEFAULT_EXCLUDED_PREFIXES = ("/api/", "/webhook/", "/login", "/register", "/logout")

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


class CsrfMiddleware:
    def __init__(self, excluded_prefixes: Optional[Iterable[str]] = None) -> None:
        self.excluded_prefixes = tuple(excluded_prefixes) if excluded_prefixes is not None else DEFAULT_EXCLUDED_PREFIXES

    async def handle(self, request: Request, call_next: RequestHandler) -> Response:
        if self.should_verify(request):
            token = await self.get_token(request)
            session = get_session(request)
            if not token or session is None or not session.verify_csrf_token(token):
                logger.warning(f"CSRF token mismatch for {request.method} {request.url.path}")
                raise HttpException.forbidden("CSRF token mismatch")
        return await call_next(request)

    def should_verify(self, request: Request) -> bool:
        if request.method.upper() not in PROTECTED_METHODS:
            return False
        return not request.url.path.startswith(self.excluded_prefixes)

    async def get_token(self, request: Request) -> Optional[str]:
        """Token from the form body, ``X-CSRF-TOKEN`` or ``X-XSRF-TOKEN``, in that order."""
        content_type = request.headers.get("content-type", "")
        if content_type.startswith(FORM_CONTENT_TYPES):
            form = await request.form()
            token = form.get("_token")
            if isinstance(token, str) and token:
                return token
        token = request.headers.get("x-csrf-token")
        if token:
            return token
        xsrf = request.headers.get("x-xsrf-token")
        if xsrf:
            return unquote(xsrf)
        return None
