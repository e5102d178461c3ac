"""
Wiki middleware.

Everything except ``RequestLoggingMiddleware`` runs inside the
``IslamRouter`` middleware stack; ``RequestLoggingMiddleware`` is installed
on the FastAPI application.
"""

from .authentication import AuthenticationMiddleware
from .csrf import CsrfMiddleware
from .error_handling import ErrorHandlingMiddleware
from .request_logging import RequestLoggingMiddleware
from .security import SecurityMiddleware
from .session import SessionStartMiddleware, get_session
from .stack import MiddlewareStack

__all__ = [
    "AuthenticationMiddleware",
    "CsrfMiddleware",
    "ErrorHandlingMiddleware",
    "MiddlewareStack",
    "RequestLoggingMiddleware",
    "SecurityMiddleware",
    "SessionStartMiddleware",
    "get_session",
]
