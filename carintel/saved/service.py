"""
Saved search results and saved vehicles, scoped to the calling user.
"""

from __future__ import annotations

import logging
from uuid import UUID

import asyncpg

from carintel.activity import service as activity_service
from carintel.core import db, errors

from . import repository, schemas

logger = logging.getLogger(__name__)


def owner_id(user_id: str) -> UUID:
    owner = db.uuid_arg(user_id)
    if owner is None:
        raise errors.AuthError("Ongeldig token")
    return owner


async def save_search(
    user_id: str,
    payload: schemas.SaveSearchRequest,
    *,
    client: activity_service.ClientInfo,
) -> dict:
    name = (payload.name or "").strip()
    if payload.kentekens is None or not name:
        raise errors.ValidationError("Kentekens en naam zijn verplicht")

    owner = owner_id(user_id)
    async with db.connection() as conn:
        row = await repository.insert_saved_search(
            conn,
            user_id=owner,
            name=name,
            kentekens=payload.kentekens,
            search_query=payload.search_query,
            search_filters=payload.search_filters,
        )
        await activity_service.log_activity(
            conn,
            user_id=owner,
            action="SAVE_SEARCH_RESULTS",
            details={
                "name": name,
                "kenteken_count": len(payload.kentekens),
                "search_query": payload.search_query,
            },
            client=client,
        )

    return {
        "id": row["id"],
        "name": row["name"],
        "kentekens": row["kentekens"],
        "kenteken_count": len(row["kentekens"]),
        "created_at": row["created_at"],
    }


async def list_searches(user_id: str) -> list[dict]:
    async with db.connection() as conn:
        rows = await repository.list_saved_searches(conn, user_id=owner_id(user_id))
    for row in rows:
        row["kenteken_count"] = len(row["kentekens"] or [])
    return rows


async def delete_search(
    user_id: str,
    raw_search_id: str | None,
    *,
    client: activity_service.ClientInfo,
) -> dict:
    if not (raw_search_id or "").strip():
        raise errors.ValidationError("Search ID is verplicht")

    owner = owner_id(user_id)
    search_id = db.uuid_arg(raw_search_id)
    if search_id is None:
        raise errors.NotFoundError("Opgeslagen zoekopdracht niet gevonden")

    async with db.connection() as conn:
        deleted = await repository.delete_saved_search(conn, search_id=search_id, user_id=owner)
        if deleted is None:
            raise errors.NotFoundError("Opgeslagen zoekopdracht niet gevonden")
        await activity_service.log_activity(
            conn,
            user_id=owner,
            action="DELETE_SAVED_SEARCH",
            details={"search_id": str(search_id), "name": deleted.get("name")},
            client=client,
        )

    return {"message": "Opgeslagen zoekopdracht verwijderd"}


async def save_vehicle(
    user_id: str,
    payload: schemas.SaveVehicleRequest,
    *,
    client: activity_service.ClientInfo,
) -> dict:
    kenteken = (payload.kenteken or "").strip()
    if not kenteken or not payload.vehicle_data:
        raise errors.ValidationError("Kenteken en voertuigdata zijn verplicht")

    owner = owner_id(user_id)
    async with db.connection() as conn:
        if await repository.saved_vehicle_exists(conn, user_id=owner, kenteken=kenteken):
            raise errors.ConflictError("Dit voertuig is al opgeslagen")
        try:
            row = await repository.insert_saved_vehicle(
                conn,
                user_id=owner,
                kenteken=kenteken,
                vehicle_data=payload.vehicle_data,
                notes=payload.notes,
            )
        except asyncpg.UniqueViolationError as exc:
            raise errors.ConflictError("Dit voertuig is al opgeslagen") from exc

        await activity_service.log_activity(
            conn,
            user_id=owner,
            action="SAVE_VEHICLE",
            details={"kenteken": kenteken, "notes": payload.notes},
            client=client,
        )

    logger.info("vehicle_saved user_id=%s kenteken=%s", owner, kenteken)
    return row


async def list_vehicles(user_id: str) -> list[dict]:
    async with db.connection() as conn:
        return await repository.list_saved_vehicles(conn, user_id=owner_id(user_id))


async def delete_vehicle(
    user_id: str,
    raw_vehicle_id: str | None,
    *,
    client: activity_service.ClientInfo,
) -> dict:
    if not (raw_vehicle_id or "").strip():
        raise errors.ValidationError("Vehicle ID is verplicht")

    owner = owner_id(user_id)
    vehicle_id = db.uuid_arg(raw_vehicle_id)
    if vehicle_id is None:
        raise errors.NotFoundError("Opgeslagen voertuig niet gevonden")

    async with db.connection() as conn:
        deleted = await repository.delete_saved_vehicle(conn, vehicle_id=vehicle_id, user_id=owner)
        if deleted is None:
            raise errors.NotFoundError("Opgeslagen voertuig niet gevonden")
        await activity_service.log_activity(
            conn,
            user_id=owner,
            action="DELETE_SAVED_VEHICLE",
            details={"vehicle_id": str(vehicle_id), "kenteken": deleted.get("kenteken")},
            client=client,
        )

    return {"message": "Opgeslagen voertuig verwijderd"}
