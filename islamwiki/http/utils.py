"""
Request and response helpers shared by the router, middleware and controllers.
"""

from __future__ import annotations

from typing import Any

from fastapi.encoders import jsonable_encoder
from starlette.requests import Request
from starlette.responses import HTMLResponse, JSONResponse, Response


def client_ip(request: Request) -> str:
    """
    Best-effort client IP address.

    Uses the first address of ``X-Forwarded-For``, then ``X-Real-IP``,
    then the socket peer.
    """
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()
    return request.client.host if request.client else "unknown"


def to_response(result: Any) -> Response:
    """
    Convert a handler return value into a response.

    ``Response`` objects pass through, dicts and lists become JSON, strings
    become HTML and ``None`` becomes an empty ``204``.
    """
    if isinstance(result, Response):
        return result
    if result is None:
        return Response(status_code=204)
    if isinstance(result, str):
        return HTMLResponse(result)
    if isinstance(result, (dict, list)):
        return JSONResponse(jsonable_encoder(result))
    raise TypeError(f"Unsupported handler return type: {type(result).__name__}")
