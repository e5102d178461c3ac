"""
Health Check Endpoints.

This module provides basic system status endpoints (health, version,
database) used for monitoring and deployment verification.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from islamwiki.core.database.session import get_session
from islamwiki.core.logging_config import get_logger

from ...core import constant

logger = get_logger(__name__)

router = APIRouter()


@router.get(
    "/health",
    summary="Health Check",
    description="Check the operational status of the server.",
    response_description="Status object.",
)
async def health_check():
    """
    Health check endpoint.

    Returns a simple status indicator to confirm the server is running and reachable.
    """
    return {"status": "ok"}


@router.get(
    "/health/database",
    summary="Database Health Check",
    description="Check that the configuration database answers queries.",
    response_description="Status object.",
)
async def database_health_check(session: AsyncSession = Depends(get_session)):
    """
    Database health check endpoint.

    Runs a trivial query; answers 503 when the database is unreachable.
    """
    try:
        await session.execute(text("SELECT 1"))
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        return JSONResponse(status_code=503, content={"status": "error", "database": "unavailable"})
    return {"status": "ok", "database": "ok"}


@router.get(
    "/version",
    summary="Get Version",
    description="Retrieve version information for the server.",
    response_description="Version object.",
)
async def version():
    """
    Get version.

    Returns the application version and the configuration export format version.
    """
    return {"version": constant.VERSION, "config_schema_version": constant.CONFIG_EXPORT_VERSION}
