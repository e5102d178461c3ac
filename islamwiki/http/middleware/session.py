"""
Session Start Middleware.

Wraps the Starlette session of the request in a ``SessionManager``, starts
it and exposes it as ``request.state.session``. Without Starlette's
``SessionMiddleware`` installed a throwaway per-request mapping is used.
"""

from __future__ import annotations

from typing import Optional

from starlette.requests import Request
from starlette.responses import Response

from islamwiki.core.session import SessionManager
from islamwiki.server.core.config import SessionConfig

from .stack import RequestHandler


def get_session(request: Request) -> Optional[SessionManager]:
    """The ``SessionManager`` of the request, if the session middleware ran."""
    return getattr(request.state, "session", None)


class SessionStartMiddleware:
    def __init__(self, config: Optional[SessionConfig] = None) -> None:
        self.config = config or SessionConfig()

    async def handle(self, request: Request, call_next: RequestHandler) -> Response:
        data = request.session if "session" in request.scope else {}
        session = SessionManager(data, self.config)
        session.start()
        request.state.session = session
        return await call_next(request)
