"""
Database bootstrap: create the schema, then report table statistics.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

import asyncpg

from carintel.core import db, errors

from . import schema

logger = logging.getLogger(__name__)


async def create_schema(conn: asyncpg.Connection) -> None:
    await db.execute(conn, "CREATE EXTENSION IF NOT EXISTS pgcrypto")
    for table, ddl in schema.STATEMENTS:
        await db.execute(conn, ddl)
        logger.info("table_ready table=%s", table)


async def table_stats(conn: asyncpg.Connection) -> list[dict]:
    return await db.fetch_all(
        conn,
        """
        SELECT
            schemaname,
            relname AS tablename,
            n_tup_ins AS inserts,
            n_tup_upd AS updates,
            n_tup_del AS deletes,
            n_live_tup AS live_rows,
            n_dead_tup AS dead_rows
        FROM pg_stat_user_tables
        ORDER BY relname
        """,
    )


async def database_size(conn: asyncpg.Connection) -> str:
    row = await db.fetch_one(conn, "SELECT pg_size_pretty(pg_database_size(current_database())) AS size")
    return str((row or {}).get("size") or "")


async def init_db() -> dict:
    try:
        async with db.connection() as conn:
            await create_schema(conn)
            tables = await table_stats(conn)
            size = await database_size(conn)
    except (asyncpg.PostgresError, OSError) as exc:
        logger.exception("init_db_failed")
        raise errors.InternalError("Database initialization failed") from exc

    return {
        "success": True,
        "message": "Database schema initialized successfully",
        "tables": tables,
        "databaseSize": size,
        "timestamp": datetime.now(timezone.utc),
    }
