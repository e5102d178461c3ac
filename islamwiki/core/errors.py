"""
Exception types shared across the IslamWiki core.

``HttpException`` carries an HTTP status code and optional response headers;
the error-handling middleware turns it into an error page. The remaining
exceptions signal wiring problems in the router, container and extension
loader.
"""

from __future__ import annotations

from typing import Dict, Optional


class IslamWikiError(Exception):
    pass


class HttpException(IslamWikiError):
    """An error that maps directly onto an HTTP response status."""

    def __init__(self, status_code: int, message: str = "", headers: Optional[Dict[str, str]] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.headers: Dict[str, str] = dict(headers or {})

    def __repr__(self) -> str:
        return f"HttpException(status_code={self.status_code}, message={self.message!r})"

    @classmethod
    def not_found(cls, message: str = "Not Found") -> "HttpException":
        return cls(404, message)

    @classmethod
    def forbidden(cls, message: str = "Forbidden") -> "HttpException":
        return cls(403, message)

    @classmethod
    def unauthorized(cls, message: str = "Unauthorized") -> "HttpException":
        return cls(401, message)

    @classmethod
    def bad_request(cls, message: str = "Bad Request") -> "HttpException":
        return cls(400, message)

    @classmethod
    def too_many_requests(cls, message: str = "Too Many Requests", retry_after: Optional[int] = None) -> "HttpException":
        headers = {"Retry-After": str(retry_after)} if retry_after is not None else None
        return cls(429, message, headers)

    @classmethod
    def server_error(cls, message: str = "Internal Server Error") -> "HttpException":
        return cls(500, message)


class RouteResolutionError(IslamWikiError):
    """Raised when a route handler reference cannot be turned into a callable."""

    def __init__(self, reference: str, reason: str) -> None:
        super().__init__(f"Cannot resolve route handler '{reference}': {reason}")
        self.reference = reference


class ServiceNotFoundError(IslamWikiError, KeyError):
    def __init__(self, key: object) -> None:
        super().__init__(f"Service not bound in container: {key!r}")
        self.key = key

    def __str__(self) -> str:
        return str(self.args[0])


class ExtensionError(IslamWikiError):
    def __init__(self, extension_name: str, message: str) -> None:
        super().__init__(f"Extension '{extension_name}': {message}")
        self.extension_name = extension_name
