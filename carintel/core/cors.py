"""
CORS handling.

Starlette's CORSMiddleware rejects unknown origins; the frontend contract instead
answers every request and falls back to the production origin.
"""

from __future__ import annotations

from typing import Awaitable, Callable

from fastapi import Request, Response

from . import config

ALLOW_METHODS = "GET, POST, PUT, DELETE, OPTIONS"
ALLOW_HEADERS = "Content-Type, Authorization"


def resolve_origin(origin: str | None) -> str:
    if origin and origin in config.allowed_origins():
        return origin
    return config.FALLBACK_ORIGIN


def apply_headers(response: Response, origin: str | None) -> Response:
    response.headers["Access-Control-Allow-Origin"] = resolve_origin(origin)
    response.headers["Access-Control-Allow-Methods"] = ALLOW_METHODS
    response.headers["Access-Control-Allow-Headers"] = ALLOW_HEADERS
    response.headers["Access-Control-Allow-Credentials"] = "true"
    response.headers["Vary"] = "Origin"
    return response


async def cors_middleware(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    origin = request.headers.get("origin")
    if request.method == "OPTIONS":
        return apply_headers(Response(status_code=200), origin)
    response = await call_next(request)
    return apply_headers(response, origin)
