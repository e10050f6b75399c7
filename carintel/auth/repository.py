"""
Auth persistence helpers.
"""

from __future__ import annotations

from uuid import UUID

import asyncpg

from carintel.core import db

USER_COLUMNS = "id, email, name, role, created_at, updated_at"


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


async def create_user(
    conn: asyncpg.Connection,
    *,
    email: str,
    password_hash: str,
    name: str | None = None,
    role: str = "user",
) -> dict:
    row = await db.fetch_one(
        conn,
        f"""
        INSERT INTO users (email, password_hash, name, role)
        VALUES ($1, $2, $3, $4)
        RETURNING {USER_COLUMNS}
        """,
        normalize_email(email),
        password_hash,
        name,
        role,
    )
    if row is None:
        raise RuntimeError("Failed to create user.")
    return row


async def get_user_by_email(conn: asyncpg.Connection, email: str) -> dict | None:
    return await db.fetch_one(
        conn,
        f"""
        SELECT {USER_COLUMNS}, password_hash
        FROM users
        WHERE lower(email) = lower($1)
        """,
        normalize_email(email),
    )


async def get_user_by_id(conn: asyncpg.Connection, user_id: UUID) -> dict | None:
    return await db.fetch_one(
        conn,
        f"""
        SELECT {USER_COLUMNS}
        FROM users
        WHERE id = $1
        """,
        user_id,
    )


async def upsert_admin_user(
    conn: asyncpg.Connection,
    *,
    email: str,
    password_hash: str,
    name: str | None,
) -> tuple[dict, bool]:
    """
    Create the admin account or promote/reset an existing one.

    Returns (user_row, created).
    """
    row = await db.fetch_one(
        conn,
        f"""
        INSERT INTO users (email, password_hash, name, role)
        VALUES ($1, $2, $3, 'admin')
        ON CONFLICT (email) DO UPDATE
        SET role = 'admin',
            password_hash = EXCLUDED.password_hash,
            name = COALESCE(EXCLUDED.name, users.name),
            updated_at = now()
        RETURNING {USER_COLUMNS}, (xmax = 0) AS created
        """,
        normalize_email(email),
        password_hash,
        name,
    )
    if row is None:
        raise RuntimeError("Failed to upsert admin user.")
    created = bool(row.pop("created"))
    return row, created
