"""
Base controller.

Controllers are resolved by the router from ``"module:Class@method"``
references and constructed with the application container. Actions receive
the request followed by the route parameters as keyword arguments.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi.encoders import jsonable_encoder
from starlette.requests import Request
from starlette.responses import HTMLResponse, JSONResponse, RedirectResponse

from islamwiki.core.container import Container
from islamwiki.core.logging_config import get_logger
from islamwiki.core.session import SessionManager
from islamwiki.http.middleware.session import get_session


class Controller:
    def __init__(self, container: Container) -> None:
        self.container = container
        self.logger = get_logger(type(self).__module__)

    def json(self, data: Any, status_code: int = 200, headers: Optional[Dict[str, str]] = None) -> JSONResponse:
        return JSONResponse(jsonable_encoder(data), status_code=status_code, headers=headers)

    def html(self, content: str, status_code: int = 200, headers: Optional[Dict[str, str]] = None) -> HTMLResponse:
        return HTMLResponse(content, status_code=status_code, headers=headers)

    def redirect(self, url: str, status_code: int = 302) -> RedirectResponse:
        return RedirectResponse(url, status_code=status_code)

    def session(self, request: Request) -> Optional[SessionManager]:
        return get_session(request)
