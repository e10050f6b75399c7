"""
Maintenance persistence helpers.
"""

from __future__ import annotations

from datetime import datetime

import asyncpg

from carintel.core import db

_PURGE_SQL = {
    "anonymous_searches": """
        WITH deleted AS (
            DELETE FROM anonymous_searches WHERE created_at <= $1 RETURNING 1
        )
        SELECT count(*) AS n FROM deleted
    """,
    "activity_logs": """
        WITH deleted AS (
            DELETE FROM activity_logs WHERE created_at <= $1 RETURNING 1
        )
        SELECT count(*) AS n FROM deleted
    """,
    "saved_searches": """
        WITH deleted AS (
            DELETE FROM saved_searches WHERE created_at <= $1 RETURNING 1
        )
        SELECT count(*) AS n FROM deleted
    """,
}


async def delete_created_before(conn: asyncpg.Connection, table: str, cutoff: datetime) -> int:
    """
    Delete rows of `table` whose created_at is at or before `cutoff`; return how many.
    """
    sql = _PURGE_SQL.get(table)
    if sql is None:
        raise ValueError(f"No retention rule for table {table!r}.")
    return await db.fetch_count(conn, sql, cutoff)


async def insert_demo_search(
    conn: asyncpg.Connection,
    *,
    search_query: str,
    search_type: str,
    result_count: int,
    session_id: str,
) -> None:
    await db.execute(
        conn,
        """
        INSERT INTO anonymous_searches (search_query, search_type, result_count, session_id, user_agent)
        VALUES ($1, $2, $3, $4, 'sample-data')
        """,
        search_query,
        search_type,
        result_count,
        session_id,
    )
