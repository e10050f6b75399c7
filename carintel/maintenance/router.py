"""
`/api/maintenance?action=...` endpoint.
"""

from __future__ import annotations

from enum import Enum

from fastapi import APIRouter, Query, Request

from carintel.core import dispatch
from carintel.core.dispatch import Route

from . import service

router = APIRouter()


class MaintenanceAction(str, Enum):
    CREATE_ADMIN = "create-admin"
    SAMPLE_DATA = "sample-data"
    CLEANUP = "cleanup"


async def _create_admin(_: Request) -> dict:
    return await service.create_admin()


async def _sample_data(_: Request) -> dict:
    return await service.sample_data()


async def _cleanup(_: Request) -> dict:
    return await service.cleanup()


ROUTES = dispatch.check_routes(
    MaintenanceAction,
    {
        MaintenanceAction.CREATE_ADMIN: Route("POST", _create_admin),
        MaintenanceAction.SAMPLE_DATA: Route("POST", _sample_data),
        MaintenanceAction.CLEANUP: Route("POST", _cleanup),
    },
)


@router.api_route("/api/maintenance", methods=["GET", "POST", "PUT", "DELETE"])
async def maintenance_endpoint(request: Request, action: str | None = Query(default=None)):
    return await dispatch.dispatch(request, ROUTES, dispatch.parse_action(MaintenanceAction, action))
