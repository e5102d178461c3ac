"""
Middleware Stack.

Runs a request through an ordered list of middleware before it reaches the
final handler. The first middleware added is the outermost one: it sees the
request first and the response last.

A middleware is either an object with an ``async handle(request, call_next)``
method or an async callable ``(request, call_next)``.
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Iterable, List, Optional

from starlette.requests import Request
from starlette.responses import Response

from islamwiki.core.errors import HttpException
from islamwiki.core.logging_config import get_logger

RequestHandler = Callable[[Request], Awaitable[Response]]


class MiddlewareStack:
    """Ordered collection of middleware executed around a request handler."""

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self.logger = logger or get_logger(__name__)
        self._middleware: List[Any] = []

    def add(self, middleware: Any) -> "MiddlewareStack":
        self._middleware.append(middleware)
        return self

    def add_multiple(self, middleware: Iterable[Any]) -> "MiddlewareStack":
        for item in middleware:
            self.add(item)
        return self

    def count(self) -> int:
        return len(self._middleware)

    def __len__(self) -> int:
        return len(self._middleware)

    def clear(self) -> None:
        self._middleware = []

    def get_all(self) -> List[Any]:
        return list(self._middleware)

    async def execute(self, request: Request, handler: RequestHandler) -> Response:
        """
        Run the request through every middleware and then the handler.

        Args:
            request: The incoming request
            handler: Final handler producing the response

        Returns:
            The response produced by the chain

        Raises:
            TypeError: If a registered middleware is not usable
        """
        chain = handler
        for middleware in reversed(self._middleware):
            chain = self._wrap(middleware, chain)
        return await chain(request)

    def _wrap(self, middleware: Any, call_next: RequestHandler) -> RequestHandler:
        if hasattr(middleware, "handle"):
            invoke = middleware.handle
        elif callable(middleware):
            invoke = middleware
        else:
            raise TypeError(f"Invalid middleware: {type(middleware).__name__}")
        name = type(middleware).__name__ if hasattr(middleware, "handle") else getattr(middleware, "__name__", repr(middleware))

        async def run(request: Request) -> Response:
            try:
                return await invoke(request, call_next)
            except HttpException:
                raise
            except Exception as e:
                self.logger.error(f"Middleware error in {name}: {e}")
                raise

        return run
