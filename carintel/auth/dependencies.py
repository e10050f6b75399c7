"""
Bearer-token helpers for protected actions.
"""

from __future__ import annotations

from fastapi import Request

from carintel.core import errors

from . import schemas, service


def _extract_bearer_token(authorization: str | None) -> str:
    raw = (authorization or "").strip()
    if not raw:
        raise errors.AuthError("Geen autorisatie token")

    parts = raw.split(" ", 1)
    if len(parts) != 2:
        raise errors.AuthError("Invalid Authorization header format.")

    scheme, token = parts[0].strip().lower(), parts[1].strip()
    if scheme != "bearer" or not token:
        raise errors.AuthError("Authorization must be: Bearer <token>.")
    return token


def get_bearer_token(request: Request) -> str:
    return _extract_bearer_token(request.headers.get("authorization"))


def get_current_principal(request: Request) -> schemas.Principal:
    return service.principal_from_token(get_bearer_token(request))


def get_admin_principal(request: Request) -> schemas.Principal:
    return service.require_admin(get_current_principal(request))
