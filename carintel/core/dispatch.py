"""
`?action=` dispatch shared by the handlers.

Each handler declares its actions as an `Enum` and maps every member to the
HTTP method it accepts and the coroutine that serves it.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Mapping, TypeVar

import pydantic
from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from . import errors

ActionT = TypeVar("ActionT", bound=Enum)
ModelT = TypeVar("ModelT", bound=pydantic.BaseModel)

Handler = Callable[[Request], Awaitable[Any]]


@dataclass(frozen=True)
class Route:
    method: str
    handler: Handler


def check_routes(action_enum: type[Enum], routes: Mapping[Any, Route]) -> Mapping[Any, Route]:
    missing = [member.value for member in action_enum if member not in routes]
    if missing:
        raise RuntimeError(f"No route for actions: {', '.join(missing)}")
    return routes


def parse_action(action_enum: type[ActionT], raw: str | None) -> ActionT:
    try:
        return action_enum((raw or "").strip())
    except ValueError as exc:
        raise errors.ValidationError("Invalid action") from exc


async def dispatch(request: Request, routes: Mapping[ActionT, Route], action: ActionT) -> Any:
    route = routes[action]
    if request.method.upper() != route.method:
        raise errors.MethodError()
    return await route.handler(request)


async def json_body(request: Request) -> dict[str, Any]:
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        data = json.loads(raw)
    except ValueError as exc:
        raise errors.ValidationError("Invalid JSON body") from exc
    if not isinstance(data, dict):
        raise errors.ValidationError("JSON body must be an object")
    return data


def parse_model(model: type[ModelT], data: dict[str, Any]) -> ModelT:
    try:
        return model.model_validate(data)
    except pydantic.ValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ()))
        message = str(first.get("msg") or "Invalid value")
        raise errors.ValidationError(f"{field}: {message}" if field else message) from exc


async def read_model(request: Request, model: type[ModelT]) -> ModelT:
    return parse_model(model, await json_body(request))


def created(payload: Any) -> JSONResponse:
    return JSONResponse(status_code=201, content=jsonable_encoder(payload))
