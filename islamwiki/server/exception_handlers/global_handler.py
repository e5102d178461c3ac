"""
Global Exception Handlers for the FastAPI Application.

Errors raised inside the wiki router are rendered by its own
error-handling middleware. These handlers cover the FastAPI endpoints
(health, version, docs): ``HttpException`` keeps its status code, anything
else is logged with an error ID and answered with a JSON 500.
"""

import traceback

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from islamwiki.core.errors import HttpException
from islamwiki.core.logging_config import get_logger

logger = get_logger(__name__)


async def http_exception_handler(request: Request, exc: HttpException) -> JSONResponse:
    """Answer an ``HttpException`` with its status code and headers."""
    logger.warning(f"HTTP {exc.status_code} in {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message or "Error"},
        headers=exc.headers or None,
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Global exception handler to log detailed error information.

    This handler is called for any unhandled exception in the application.
    It logs the full error context and returns a JSON response with an error ID
    that clients can use to reference the error when reporting issues.

    Args:
        request: The HTTP request that caused the exception
        exc: The exception that was raised

    Returns:
        JSONResponse with error details and error ID
    """
    error_id = id(exc)

    logger.error(
        f"Unhandled exception [{error_id}] in {request.method} {request.url.path}: {exc}",
        exc_info=True,
        extra={
            "error_id": error_id,
            "method": request.method,
            "path": request.url.path,
            "query_params": dict(request.query_params),
            "client": request.client.host if request.client else "unknown",
            "error_type": type(exc).__name__,
            "traceback": traceback.format_exc(),
        },
    )

    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "error_id": error_id,
            "error_type": type(exc).__name__,
        },
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """
    Register exception handlers with the FastAPI application.

    Args:
        app: The FastAPI application instance
    """
    app.add_exception_handler(HttpException, http_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)
    logger.debug("Exception handlers registered successfully")
