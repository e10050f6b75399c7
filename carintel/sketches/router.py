"""
`/api/sketches?action=...&id=...` endpoint. Every action needs a bearer token.
"""

from __future__ import annotations

from enum import Enum

from fastapi import APIRouter, Query, Request

from carintel.auth import dependencies as auth_dependencies
from carintel.core import dispatch
from carintel.core.dispatch import Route

from . import schemas, service

router = APIRouter()


class SketchAction(str, Enum):
    LIST = "list"
    GET = "get"
    SAVE = "save"
    UPDATE = "update"
    DELETE = "delete"


def _user_id(request: Request) -> str:
    return request.state.principal.user_id


async def _list(request: Request) -> dict:
    return await service.list_sketches(_user_id(request))


async def _get(request: Request) -> dict:
    return await service.get_sketch(_user_id(request), request.query_params.get("id"))


async def _save(request: Request):
    payload = await dispatch.read_model(request, schemas.SketchRequest)
    return dispatch.created(await service.save_sketch(_user_id(request), payload))


async def _update(request: Request) -> dict:
    payload = await dispatch.read_model(request, schemas.SketchRequest)
    return await service.update_sketch(_user_id(request), request.query_params.get("id"), payload)


async def _delete(request: Request) -> dict:
    return await service.delete_sketch(_user_id(request), request.query_params.get("id"))


ROUTES = dispatch.check_routes(
    SketchAction,
    {
        SketchAction.LIST: Route("GET", _list),
        SketchAction.GET: Route("GET", _get),
        SketchAction.SAVE: Route("POST", _save),
        SketchAction.UPDATE: Route("PUT", _update),
        SketchAction.DELETE: Route("DELETE", _delete),
    },
)


@router.api_route("/api/sketches", methods=["GET", "POST", "PUT", "DELETE"])
async def sketches_endpoint(request: Request, action: str | None = Query(default=None)):
    request.state.principal = auth_dependencies.get_current_principal(request)
    return await dispatch.dispatch(request, ROUTES, dispatch.parse_action(SketchAction, action))
