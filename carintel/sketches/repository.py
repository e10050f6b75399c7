"""
Sketch (verkeersschets) persistence helpers.
"""

from __future__ import annotations

from uuid import UUID

import asyncpg

from carintel.core import db

SKETCHES_DDL = """
CREATE TABLE IF NOT EXISTS verkeersschetsen (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    user_id UUID NOT NULL,
    title VARCHAR(255) NOT NULL,
    description TEXT,
    location VARCHAR(255),
    incidents JSONB NOT NULL DEFAULT '[]'::jsonb,
    drawn_lines JSONB NOT NULL DEFAULT '[]'::jsonb,
    metadata JSONB NOT NULL DEFAULT '{}'::jsonb,
    is_public BOOLEAN NOT NULL DEFAULT FALSE,
    created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
    updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
);
CREATE INDEX IF NOT EXISTS idx_verkeersschetsen_user_updated
    ON verkeersschetsen (user_id, updated_at DESC);
"""

SUMMARY_COLUMNS = "id, title, description, location, created_at, updated_at, is_public"
FULL_COLUMNS = (
    "id, user_id, title, description, location, incidents, drawn_lines, metadata, "
    "is_public, created_at, updated_at"
)

_table_ready = False


async def ensure_table(conn: asyncpg.Connection) -> None:
    """
    Create the sketches table on first use in this process.
    """
    global _table_ready
    if _table_ready:
        return None
    await db.execute(conn, SKETCHES_DDL)
    _table_ready = True


def _decode(row: dict) -> dict:
    row["incidents"] = db.json_value(row.get("incidents"), [])
    row["drawn_lines"] = db.json_value(row.get("drawn_lines"), [])
    row["metadata"] = db.json_value(row.get("metadata"), {})
    return row


async def list_sketches(conn: asyncpg.Connection, *, user_id: UUID) -> list[dict]:
    return await db.fetch_all(
        conn,
        f"""
        SELECT {SUMMARY_COLUMNS}
        FROM verkeersschetsen
        WHERE user_id = $1
        ORDER BY updated_at DESC
        """,
        user_id,
    )


async def get_sketch(conn: asyncpg.Connection, *, sketch_id: UUID, user_id: UUID) -> dict | None:
    row = await db.fetch_one(
        conn,
        f"""
        SELECT {FULL_COLUMNS}
        FROM verkeersschetsen
        WHERE id = $1
          AND user_id = $2
        """,
        sketch_id,
        user_id,
    )
    return _decode(row) if row is not None else None


async def insert_sketch(
    conn: asyncpg.Connection,
    *,
    user_id: UUID,
    title: str,
    description: str | None,
    location: str | None,
    incidents: list,
    drawn_lines: list,
    metadata: dict,
    is_public: bool,
) -> dict:
    row = await db.fetch_one(
        conn,
        """
        INSERT INTO verkeersschetsen
            (user_id, title, description, location, incidents, drawn_lines, metadata, is_public)
        VALUES ($1, $2, $3, $4, $5::jsonb, $6::jsonb, $7::jsonb, $8)
        RETURNING id, created_at
        """,
        user_id,
        title,
        description,
        location,
        db.json_arg(incidents),
        db.json_arg(drawn_lines),
        db.json_arg(metadata),
        is_public,
    )
    if row is None:
        raise RuntimeError("Failed to save sketch.")
    return row


async def update_sketch(
    conn: asyncpg.Connection,
    *,
    sketch_id: UUID,
    user_id: UUID,
    title: str,
    description: str | None,
    location: str | None,
    incidents: list,
    drawn_lines: list,
    metadata: dict,
    is_public: bool,
) -> dict | None:
    return await db.fetch_one(
        conn,
        """
        UPDATE verkeersschetsen
        SET title = $3,
            description = $4,
            location = $5,
            incidents = $6::jsonb,
            drawn_lines = $7::jsonb,
            metadata = $8::jsonb,
            is_public = $9,
            updated_at = now()
        WHERE id = $1
          AND user_id = $2
        RETURNING id, updated_at
        """,
        sketch_id,
        user_id,
        title,
        description,
        location,
        db.json_arg(incidents),
        db.json_arg(drawn_lines),
        db.json_arg(metadata),
        is_public,
    )


async def delete_sketch(conn: asyncpg.Connection, *, sketch_id: UUID, user_id: UUID) -> dict | None:
    return await db.fetch_one(
        conn,
        """
        DELETE FROM verkeersschetsen
        WHERE id = $1
          AND user_id = $2
        RETURNING id
        """,
        sketch_id,
        user_id,
    )
