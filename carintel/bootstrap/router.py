"""
`/api/init-db` endpoint.
"""

from __future__ import annotations

from fastapi import APIRouter, Request

from carintel.core import errors

from . import service

router = APIRouter()


@router.api_route("/api/init-db", methods=["GET", "POST", "PUT", "DELETE"])
async def init_db(request: Request) -> dict:
    if request.method != "POST":
        raise errors.MethodError()
    return await service.init_db()
