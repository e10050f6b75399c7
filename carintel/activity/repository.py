"""
Activity and search-log persistence helpers.
"""

from __future__ import annotations

from ipaddress import IPv4Address, IPv6Address
from uuid import UUID

import asyncpg

from carintel.core import db


async def insert_activity(
    conn: asyncpg.Connection,
    *,
    user_id: UUID,
    action: str,
    details: dict,
    ip_address: IPv4Address | IPv6Address | None,
    user_agent: str | None,
) -> None:
    await db.execute(
        conn,
        """
        INSERT INTO activity_logs (user_id, action, details, ip_address, user_agent)
        VALUES ($1, $2, $3::jsonb, $4, $5)
        """,
        user_id,
        action,
        db.json_arg(details),
        ip_address,
        user_agent,
    )


async def insert_anonymous_search(
    conn: asyncpg.Connection,
    *,
    search_query: str,
    search_type: str,
    search_filters: dict | None,
    result_count: int,
    session_id: str | None,
    ip_address: IPv4Address | IPv6Address | None,
    user_agent: str | None,
) -> None:
    await db.execute(
        conn,
        """
        INSERT INTO anonymous_searches (
            search_query, search_type, search_filters, result_count,
            session_id, ip_address, user_agent
        )
        VALUES ($1, $2, $3::jsonb, $4, $5, $6, $7)
        """,
        search_query,
        search_type,
        db.json_arg(search_filters),
        result_count,
        session_id,
        ip_address,
        user_agent,
    )


async def list_activity(conn: asyncpg.Connection, *, limit: int, offset: int) -> list[dict]:
    rows = await db.fetch_all(
        conn,
        """
        SELECT
            al.id,
            al.action,
            al.details,
            al.ip_address,
            al.user_agent,
            al.created_at,
            u.email,
            u.name,
            u.role
        FROM activity_logs al
        JOIN users u ON al.user_id = u.id
        ORDER BY al.created_at DESC
        LIMIT $1 OFFSET $2
        """,
        limit,
        offset,
    )
    for row in rows:
        row["details"] = db.json_value(row.get("details"), {})
    return rows


async def count_activity(conn: asyncpg.Connection) -> int:
    return await db.fetch_count(conn, "SELECT count(*) AS n FROM activity_logs")


async def admin_totals(conn: asyncpg.Connection) -> dict[str, int]:
    row = await db.fetch_one(
        conn,
        """
        SELECT
            (SELECT count(*) FROM users) AS total_users,
            (SELECT count(*) FROM saved_searches) AS total_saved_searches,
            (SELECT count(*) FROM saved_vehicles) AS total_saved_vehicles,
            (SELECT count(*) FROM activity_logs WHERE action = 'SEARCH') AS total_search_count,
            (SELECT count(*) FROM anonymous_searches) AS total_anonymous_searches
        """,
    )
    return {key: int(value or 0) for key, value in (row or {}).items()}


async def anonymous_searches_by_type(conn: asyncpg.Connection) -> list[dict]:
    return await db.fetch_all(
        conn,
        """
        SELECT search_type, count(*) AS count, avg(result_count)::float AS avg_results
        FROM anonymous_searches
        GROUP BY search_type
        ORDER BY count DESC
        """,
    )


async def daily_search_stats(conn: asyncpg.Connection, *, days: int = 30) -> list[dict]:
    return await db.fetch_all(
        conn,
        """
        SELECT
            date(created_at) AS search_date,
            count(*) AS anonymous_searches,
            count(DISTINCT ip_address) AS unique_ips
        FROM anonymous_searches
        WHERE created_at >= CURRENT_DATE - make_interval(days => $1)
        GROUP BY date(created_at)
        ORDER BY search_date DESC
        LIMIT $2
        """,
        days,
        days,
    )


async def top_search_queries(conn: asyncpg.Connection, *, limit: int = 50) -> list[dict]:
    return await db.fetch_all(
        conn,
        """
        SELECT search_query, count(*) AS search_count, search_type
        FROM anonymous_searches
        WHERE search_query IS NOT NULL
          AND length(search_query) > 0
        GROUP BY search_query, search_type
        ORDER BY search_count DESC
        LIMIT $1
        """,
        limit,
    )


async def searches_by_user(conn: asyncpg.Connection, *, limit: int = 20) -> list[dict]:
    return await db.fetch_all(
        conn,
        """
        SELECT u.email, u.name, count(al.id) AS search_count
        FROM users u
        LEFT JOIN activity_logs al ON u.id = al.user_id AND al.action = 'SEARCH'
        GROUP BY u.id, u.email, u.name
        ORDER BY search_count DESC
        LIMIT $1
        """,
        limit,
    )


async def recent_users(conn: asyncpg.Connection, *, limit: int = 50) -> list[dict]:
    return await db.fetch_all(
        conn,
        """
        SELECT id, email, name, role, created_at
        FROM users
        ORDER BY created_at DESC
        LIMIT $1
        """,
        limit,
    )


async def hourly_search_pattern(conn: asyncpg.Connection, *, days: int = 7) -> list[dict]:
    return await db.fetch_all(
        conn,
        """
        SELECT extract(hour FROM created_at)::int AS hour, count(*) AS search_count
        FROM anonymous_searches
        WHERE created_at >= CURRENT_DATE - make_interval(days => $1)
        GROUP BY 1
        ORDER BY hour
        """,
        days,
    )
