"""
`/api/auth?action=...` endpoint: accounts, admin views, search logging and saved items.
"""

from __future__ import annotations

from enum import Enum

from fastapi import APIRouter, Query, Request

from carintel.activity import schemas as activity_schemas
from carintel.activity import service as activity_service
from carintel.core import dispatch
from carintel.core.dispatch import Route
from carintel.maintenance import service as maintenance_service
from carintel.saved import schemas as saved_schemas
from carintel.saved import service as saved_service

from . import dependencies, schemas, service

router = APIRouter()


class AuthAction(str, Enum):
    REGISTER = "register"
    LOGIN = "login"
    VERIFY = "verify"
    ADMIN_STATS = "admin-stats"
    ADMIN_LOGS = "admin-logs"
    LOG_SEARCH = "log-search"
    LOG_ANONYMOUS_SEARCH = "log-anonymous-search"
    SAVE_SEARCH_RESULTS = "save-search-results"
    GET_SAVED_SEARCHES = "get-saved-searches"
    DELETE_SAVED_SEARCH = "delete-saved-search"
    SAVE_VEHICLE = "save-vehicle"
    GET_SAVED_VEHICLES = "get-saved-vehicles"
    DELETE_SAVED_VEHICLE = "delete-saved-vehicle"
    CLEANUP_OLD_DATA = "cleanup-old-data"


def _query_id(request: Request, field: str) -> str | None:
    return request.query_params.get(field) or request.query_params.get("id")


async def _register(request: Request):
    payload = await dispatch.read_model(request, schemas.RegisterRequest)
    result = await service.register(payload, client=activity_service.ClientInfo.from_request(request))
    return dispatch.created(result)


async def _login(request: Request) -> schemas.AuthResponse:
    payload = await dispatch.read_model(request, schemas.LoginRequest)
    return await service.login(payload, client=activity_service.ClientInfo.from_request(request))


async def _verify(request: Request) -> schemas.VerifyResponse:
    payload = await dispatch.read_model(request, schemas.VerifyRequest)
    return await service.verify(payload)


async def _admin_stats(request: Request) -> dict:
    dependencies.get_admin_principal(request)
    return await activity_service.admin_stats()


async def _admin_logs(request: Request) -> dict:
    dependencies.get_admin_principal(request)
    return await activity_service.admin_logs(
        page=request.query_params.get("page"),
        limit=request.query_params.get("limit"),
    )


async def _log_search(request: Request) -> dict:
    principal = dependencies.get_current_principal(request)
    payload = await dispatch.read_model(request, activity_schemas.LogSearchRequest)
    return await activity_service.log_search(
        principal.user_id,
        payload,
        client=activity_service.ClientInfo.from_request(request),
    )


async def _log_anonymous_search(request: Request) -> dict:
    payload = await dispatch.read_model(request, activity_schemas.AnonymousSearchRequest)
    return await activity_service.log_anonymous_search(
        payload,
        client=activity_service.ClientInfo.from_request(request),
    )


async def _save_search_results(request: Request):
    principal = dependencies.get_current_principal(request)
    payload = await dispatch.read_model(request, saved_schemas.SaveSearchRequest)
    result = await saved_service.save_search(
        principal.user_id,
        payload,
        client=activity_service.ClientInfo.from_request(request),
    )
    return dispatch.created(result)


async def _get_saved_searches(request: Request) -> list[dict]:
    principal = dependencies.get_current_principal(request)
    return await saved_service.list_searches(principal.user_id)


async def _delete_saved_search(request: Request) -> dict:
    principal = dependencies.get_current_principal(request)
    payload = await dispatch.read_model(request, saved_schemas.DeleteSearchRequest)
    return await saved_service.delete_search(
        principal.user_id,
        payload.search_id or _query_id(request, "searchId"),
        client=activity_service.ClientInfo.from_request(request),
    )


async def _save_vehicle(request: Request):
    principal = dependencies.get_current_principal(request)
    payload = await dispatch.read_model(request, saved_schemas.SaveVehicleRequest)
    row = await saved_service.save_vehicle(
        principal.user_id,
        payload,
        client=activity_service.ClientInfo.from_request(request),
    )
    return dispatch.created(row)


async def _get_saved_vehicles(request: Request) -> list[dict]:
    principal = dependencies.get_current_principal(request)
    return await saved_service.list_vehicles(principal.user_id)


async def _delete_saved_vehicle(request: Request) -> dict:
    principal = dependencies.get_current_principal(request)
    payload = await dispatch.read_model(request, saved_schemas.DeleteVehicleRequest)
    return await saved_service.delete_vehicle(
        principal.user_id,
        payload.vehicle_id or _query_id(request, "vehicleId"),
        client=activity_service.ClientInfo.from_request(request),
    )


async def _cleanup_old_data(request: Request) -> dict:
    principal = dependencies.get_admin_principal(request)
    result = await maintenance_service.cleanup()
    await activity_service.record(
        principal.user_id,
        action="CLEANUP_OLD_DATA",
        details={"deleted": result["deleted"]},
        client=activity_service.ClientInfo.from_request(request),
    )
    return result


ROUTES = dispatch.check_routes(
    AuthAction,
    {
        AuthAction.REGISTER: Route("POST", _register),
        AuthAction.LOGIN: Route("POST", _login),
        AuthAction.VERIFY: Route("POST", _verify),
        AuthAction.ADMIN_STATS: Route("GET", _admin_stats),
        AuthAction.ADMIN_LOGS: Route("GET", _admin_logs),
        AuthAction.LOG_SEARCH: Route("POST", _log_search),
        AuthAction.LOG_ANONYMOUS_SEARCH: Route("POST", _log_anonymous_search),
        AuthAction.SAVE_SEARCH_RESULTS: Route("POST", _save_search_results),
        AuthAction.GET_SAVED_SEARCHES: Route("GET", _get_saved_searches),
        AuthAction.DELETE_SAVED_SEARCH: Route("DELETE", _delete_saved_search),
        AuthAction.SAVE_VEHICLE: Route("POST", _save_vehicle),
        AuthAction.GET_SAVED_VEHICLES: Route("GET", _get_saved_vehicles),
        AuthAction.DELETE_SAVED_VEHICLE: Route("DELETE", _delete_saved_vehicle),
        AuthAction.CLEANUP_OLD_DATA: Route("POST", _cleanup_old_data),
    },
)


@router.api_route("/api/auth", methods=["GET", "POST", "PUT", "DELETE"])
async def auth_endpoint(request: Request, action: str | None = Query(default=None)):
    return await dispatch.dispatch(request, ROUTES, dispatch.parse_action(AuthAction, action))
