"""
Contact form endpoint.
"""

from __future__ import annotations

from fastapi import APIRouter, Request

from carintel.core import dispatch, errors

from . import schemas, service

router = APIRouter()


@router.api_route("/api/contact", methods=["GET", "POST", "PUT", "DELETE"])
async def contact(request: Request) -> dict:
    if request.method != "POST":
        raise errors.MethodError()
    payload = await dispatch.read_model(request, schemas.ContactRequest)
    return await service.submit(payload)
