"""
IslamRouter.

Pattern-based router for the wiki pages and JSON endpoints. Routes are
matched by a linear scan in registration order; the first route whose
method set contains the request method and whose pattern matches the path
wins. Requests that match nothing end in a 404 error page.

Every request runs through the global middleware stack (error handling,
security, session, CSRF) and then through the route's own middleware before
the handler is called. Handlers are either callables::

    router.get("/health", lambda request: {"status": "ok"})

or controller actions, ``"module.path:ClassName@method"``::

    router.get("/", "islamwiki.http.controllers.home:HomeController@index")

Route parameters are passed to the handler as keyword arguments.
"""

from __future__ import annotations

import inspect
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Tuple, Union

from starlette.requests import Request
from starlette.responses import HTMLResponse, Response
from starlette.types import Receive, Scope, Send

from islamwiki.core.container import Container
from islamwiki.core.errors import HttpException, RouteResolutionError
from islamwiki.core.logging_config import get_logger
from islamwiki.extensions.hooks import HookManager
from islamwiki.http.error_pages import render_error_page
from islamwiki.http.middleware import (
    CsrfMiddleware,
    ErrorHandlingMiddleware,
    MiddlewareStack,
    SecurityMiddleware,
    SessionStartMiddleware,
)
from islamwiki.http.utils import to_response
from islamwiki.server.core.config import Settings

from .controller_factory import ControllerFactory
from .route import Handler, Route, RouteMatch

logger = get_logger(__name__)

BEFORE_REQUEST_HOOK = "BeforeRequest"
AFTER_RESPONSE_HOOK = "AfterResponse"
ROUTES_REGISTER_HOOK = "RoutesRegister"

ANY_METHODS = ("GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS")


class IslamRouter:
    """Router and ASGI application for the wiki routes."""

    def __init__(self, container: Container, middleware_stack: Optional[MiddlewareStack] = None) -> None:
        """
        Args:
            container: Application container
            middleware_stack: Global middleware; built from the container on
                the first request when omitted
        """
        self._container = container
        self._routes: List[Route] = []
        self._named_routes: Dict[str, Route] = {}
        self._groups: List[Tuple[str, List[Any]]] = []
        self._middleware_stack = middleware_stack
        self._middleware_initialized = middleware_stack is not None
        self.controller_factory = ControllerFactory(container)

    @property
    def container(self) -> Container:
        return self._container

    @property
    def routes(self) -> List[Route]:
        return list(self._routes)

    # =====================================================================
    # Registration
    # =====================================================================

    def map(
        self,
        methods: Union[str, Iterable[str]],
        pattern: str,
        handler: Handler,
        middleware: Optional[Iterable[Any]] = None,
        name: Optional[str] = None,
    ) -> "IslamRouter":
        """
        Register a route.

        Args:
            methods: HTTP method or methods
            pattern: Path pattern with ``{name}`` placeholders
            handler: Callable or ``"module.path:ClassName@method"``
            middleware: Route middleware, run inside the global stack
            name: Optional name for ``url_for``

        Returns:
            The router, for chaining
        """
        prefix = "".join(group_prefix for group_prefix, _ in self._groups)
        group_middleware = [item for _, items in self._groups for item in items]
        route = Route(methods, prefix + pattern, handler, group_middleware + list(middleware or []), name)
        self._routes.append(route)
        if name:
            self._named_routes[name] = route
        logger.debug(f"Route registered: {sorted(route.methods)} {route.pattern}")
        return self

    def get(self, pattern: str, handler: Handler, middleware: Optional[Iterable[Any]] = None, name: Optional[str] = None) -> "IslamRouter":
        return self.map("GET", pattern, handler, middleware, name)

    def post(self, pattern: str, handler: Handler, middleware: Optional[Iterable[Any]] = None, name: Optional[str] = None) -> "IslamRouter":
        return self.map("POST", pattern, handler, middleware, name)

    def put(self, pattern: str, handler: Handler, middleware: Optional[Iterable[Any]] = None, name: Optional[str] = None) -> "IslamRouter":
        return self.map("PUT", pattern, handler, middleware, name)

    def delete(self, pattern: str, handler: Handler, middleware: Optional[Iterable[Any]] = None, name: Optional[str] = None) -> "IslamRouter":
        return self.map("DELETE", pattern, handler, middleware, name)

    def patch(self, pattern: str, handler: Handler, middleware: Optional[Iterable[Any]] = None, name: Optional[str] = None) -> "IslamRouter":
        return self.map("PATCH", pattern, handler, middleware, name)

    def any(self, pattern: str, handler: Handler, middleware: Optional[Iterable[Any]] = None, name: Optional[str] = None) -> "IslamRouter":
        return self.map(ANY_METHODS, pattern, handler, middleware, name)

    @contextmanager
    def group(self, prefix: str, middleware: Optional[Iterable[Any]] = None) -> Iterator["IslamRouter"]:
        """Register the routes defined in the block under a common prefix and middleware."""
        self._groups.append((prefix.rstrip("/"), list(middleware or [])))
        try:
            yield self
        finally:
            self._groups.pop()

    # =====================================================================
    # Lookup
    # =====================================================================

    def find_route(self, method: str, path: str) -> Optional[RouteMatch]:
        """
        Find the first route allowing ``method`` whose pattern matches ``path``.

        A path that only matches routes of other methods gives None, like an
        unknown path.
        """
        for route in self._routes:
            if not route.allows(method):
                continue
            params = route.match(path)
            if params is not None:
                return RouteMatch(route, params)
        return None

    def url_for(self, name: str, **params: Any) -> str:
        """
        Build the path of a named route.

        Raises:
            KeyError: If no route has this name
            ValueError: If a placeholder value is missing
        """
        if name not in self._named_routes:
            raise KeyError(f"No route named {name!r}")
        return self._named_routes[name].build_path(**params)

    # =====================================================================
    # Dispatch
    # =====================================================================

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "lifespan":
            while True:
                message = await receive()
                if message["type"] == "lifespan.startup":
                    await send({"type": "lifespan.startup.complete"})
                elif message["type"] == "lifespan.shutdown":
                    await send({"type": "lifespan.shutdown.complete"})
                    return
        if scope["type"] != "http":
            if scope["type"] == "websocket":
                await send({"type": "websocket.close", "code": 1000})
            return
        request = Request(scope, receive)
        response = await self.handle(request)
        await response(scope, receive, send)

    async def handle(self, request: Request) -> Response:
        """
        Handle a request through the global middleware stack and the matched route.

        Args:
            request: The incoming request

        Returns:
            The response; errors are rendered by the error-handling middleware
        """
        stack = self._get_middleware_stack()
        if stack is not None:
            return await stack.execute(request, self._dispatch)
        try:
            return await self._dispatch(request)
        except HttpException as e:
            return HTMLResponse(render_error_page(e.status_code, e.message), status_code=e.status_code, headers=e.headers)

    async def _dispatch(self, request: Request) -> Response:
        method = request.method.upper()
        path = self._request_path(request)
        match = self.find_route(method, path)
        if match is None:
            raise HttpException.not_found(f"No route found for {method} {path}")

        hook_manager = self._hook_manager()
        response: Optional[Response] = None
        if hook_manager is not None:
            for result in await hook_manager.run_async(BEFORE_REQUEST_HOOK, request):
                if isinstance(result, Response):
                    response = result
                    break

        if response is None:
            async def call_handler(req: Request) -> Response:
                return await self._call_handler(req, match)

            if match.middleware:
                route_stack = MiddlewareStack(logger)
                route_stack.add_multiple(self._resolve_middleware(item) for item in match.middleware)
                response = await route_stack.execute(request, call_handler)
            else:
                response = await call_handler(request)

        if hook_manager is not None:
            await hook_manager.run_async(AFTER_RESPONSE_HOOK, request, response)
        return response

    async def _call_handler(self, request: Request, match: RouteMatch) -> Response:
        handler = match.handler
        if isinstance(handler, str):
            handler = self._resolve_action(handler)
        if not callable(handler):
            raise RouteResolutionError(repr(handler), "handler is not callable")
        result = handler(request, **match.params)
        if inspect.isawaitable(result):
            result = await result
        return to_response(result)

    def _resolve_action(self, reference: str) -> Callable[..., Any]:
        controller_reference, separator, action = reference.rpartition("@")
        if not separator or not action:
            raise RouteResolutionError(reference, "expected 'module.path:ClassName@method'")
        controller = self.controller_factory.create(controller_reference)
        method = getattr(controller, action, None)
        if not callable(method):
            logger.error(f"Controller method not found: {reference}")
            raise RouteResolutionError(reference, f"method '{action}' not found")
        return method

    def _resolve_middleware(self, item: Any) -> Any:
        if isinstance(item, (str, type)):
            if self._container.has(item):
                return self._container.get(item)
            if isinstance(item, type):
                return item()
            raise RouteResolutionError(item, "middleware is not bound in the container")
        return item

    @staticmethod
    def _request_path(request: Request) -> str:
        # Starlette already strips the query string and percent-decodes the path.
        path = request.scope.get("path", "/")
        root_path = request.scope.get("root_path", "")
        if root_path and path.startswith(root_path):
            path = path[len(root_path) :]
        return path or "/"

    def _hook_manager(self) -> Optional[HookManager]:
        if self._container.has(HookManager):
            return self._container.get(HookManager)
        return None

    def _get_middleware_stack(self) -> Optional[MiddlewareStack]:
        if not self._middleware_initialized:
            self._middleware_initialized = True
            try:
                self._middleware_stack = self._build_middleware_stack()
            except Exception as e:
                logger.error(f"Failed to initialize middleware stack: {e}", exc_info=True)
                self._middleware_stack = None
        return self._middleware_stack

    def _build_middleware_stack(self) -> MiddlewareStack:
        if self._container.has(MiddlewareStack):
            return self._container.get(MiddlewareStack)

        settings = self._container.get(Settings) if self._container.has(Settings) else Settings()
        stack = MiddlewareStack(logger)
        stack.add(ErrorHandlingMiddleware(settings.debug, settings.environment, settings.app_name))
        if settings.security_headers_enabled:
            stack.add(SecurityMiddleware(settings.rate_limit))
        stack.add(SessionStartMiddleware(settings.session))
        if settings.csrf_enabled:
            stack.add(CsrfMiddleware())
        logger.info(f"Middleware stack initialized with {stack.count()} middleware")
        return stack

    @property
    def middleware_stack(self) -> Optional[MiddlewareStack]:
        return self._get_middleware_stack()
