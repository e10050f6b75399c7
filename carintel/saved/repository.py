"""
Saved searches and saved vehicles persistence helpers.

Every statement filters on both the row id and the owning user id.
"""

from __future__ import annotations

from uuid import UUID

import asyncpg

from carintel.core import db

SEARCH_COLUMNS = "id, user_id, name, kentekens, search_query, search_filters, created_at, updated_at"
VEHICLE_COLUMNS = "id, user_id, kenteken, vehicle_data, notes, created_at, updated_at"


def _decode_search(row: dict) -> dict:
    row["kentekens"] = db.json_value(row.get("kentekens"), [])
    row["search_filters"] = db.json_value(row.get("search_filters"), {})
    return row


def _decode_vehicle(row: dict) -> dict:
    row["vehicle_data"] = db.json_value(row.get("vehicle_data"), {})
    return row


async def insert_saved_search(
    conn: asyncpg.Connection,
    *,
    user_id: UUID,
    name: str,
    kentekens: list,
    search_query: str | None,
    search_filters: dict | None,
) -> dict:
    row = await db.fetch_one(
        conn,
        f"""
        INSERT INTO saved_searches (user_id, name, kentekens, search_query, search_filters)
        VALUES ($1, $2, $3::jsonb, $4, $5::jsonb)
        RETURNING {SEARCH_COLUMNS}
        """,
        user_id,
        name,
        db.json_arg(kentekens),
        search_query,
        db.json_arg(search_filters or {}),
    )
    if row is None:
        raise RuntimeError("Failed to save search.")
    return _decode_search(row)


async def list_saved_searches(conn: asyncpg.Connection, *, user_id: UUID) -> list[dict]:
    rows = await db.fetch_all(
        conn,
        f"""
        SELECT {SEARCH_COLUMNS}
        FROM saved_searches
        WHERE user_id = $1
        ORDER BY created_at DESC
        """,
        user_id,
    )
    return [_decode_search(row) for row in rows]


async def delete_saved_search(conn: asyncpg.Connection, *, search_id: UUID, user_id: UUID) -> dict | None:
    return await db.fetch_one(
        conn,
        """
        DELETE FROM saved_searches
        WHERE id = $1
          AND user_id = $2
        RETURNING id, name
        """,
        search_id,
        user_id,
    )


async def saved_vehicle_exists(conn: asyncpg.Connection, *, user_id: UUID, kenteken: str) -> bool:
    row = await db.fetch_one(
        conn,
        "SELECT id FROM saved_vehicles WHERE user_id = $1 AND kenteken = $2",
        user_id,
        kenteken,
    )
    return row is not None


async def insert_saved_vehicle(
    conn: asyncpg.Connection,
    *,
    user_id: UUID,
    kenteken: str,
    vehicle_data: dict,
    notes: str | None,
) -> dict:
    row = await db.fetch_one(
        conn,
        f"""
        INSERT INTO saved_vehicles (user_id, kenteken, vehicle_data, notes)
        VALUES ($1, $2, $3::jsonb, $4)
        RETURNING {VEHICLE_COLUMNS}
        """,
        user_id,
        kenteken,
        db.json_arg(vehicle_data),
        notes,
    )
    if row is None:
        raise RuntimeError("Failed to save vehicle.")
    return _decode_vehicle(row)


async def list_saved_vehicles(conn: asyncpg.Connection, *, user_id: UUID) -> list[dict]:
    rows = await db.fetch_all(
        conn,
        f"""
        SELECT {VEHICLE_COLUMNS}
        FROM saved_vehicles
        WHERE user_id = $1
        ORDER BY created_at DESC
        """,
        user_id,
    )
    return [_decode_vehicle(row) for row in rows]


async def delete_saved_vehicle(conn: asyncpg.Connection, *, vehicle_id: UUID, user_id: UUID) -> dict | None:
    return await db.fetch_one(
        conn,
        """
        DELETE FROM saved_vehicles
        WHERE id = $1
          AND user_id = $2
        RETURNING id, kenteken
        """,
        vehicle_id,
        user_id,
    )
