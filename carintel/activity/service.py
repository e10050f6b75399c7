"""
Activity logging, search logging and the admin views built on top of them.
"""

from __future__ import annotations

import ipaddress
import logging
import math
from dataclasses import dataclass
from ipaddress import IPv4Address, IPv6Address
from typing import Any
from uuid import UUID

import asyncpg
from fastapi import Request

from carintel.core import db, errors

from . import repository, schemas

DEFAULT_LOG_PAGE_SIZE = 50
MAX_LOG_PAGE_SIZE = 500

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClientInfo:
    ip_address: IPv4Address | IPv6Address | None = None
    user_agent: str | None = None

    @classmethod
    def from_request(cls, request: Request) -> "ClientInfo":
        forwarded = request.headers.get("x-forwarded-for") or request.headers.get("x-real-ip") or ""
        candidate = forwarded.split(",")[0].strip()
        if not candidate and request.client is not None:
            candidate = request.client.host
        return cls(
            ip_address=parse_ip(candidate),
            user_agent=request.headers.get("user-agent") or None,
        )


def parse_ip(raw: str | None) -> IPv4Address | IPv6Address | None:
    try:
        return ipaddress.ip_address((raw or "").strip())
    except ValueError:
        return None


async def log_activity(
    conn: asyncpg.Connection,
    *,
    user_id: UUID | str,
    action: str,
    details: dict[str, Any] | None = None,
    client: ClientInfo | None = None,
) -> None:
    """
    Record one activity row. Best effort: a failed insert never fails the caller.
    """
    client = client or ClientInfo()
    owner = db.uuid_arg(user_id)
    if owner is None:
        logger.warning("activity_skipped action=%s reason=invalid_user_id", action)
        return None

    try:
        await repository.insert_activity(
            conn,
            user_id=owner,
            action=action,
            details=details or {},
            ip_address=client.ip_address,
            user_agent=client.user_agent,
        )
    except (asyncpg.PostgresError, OSError):
        logger.exception("activity_log_failed action=%s user_id=%s", action, owner)


async def record(
    user_id: UUID | str,
    *,
    action: str,
    details: dict[str, Any] | None = None,
    client: ClientInfo | None = None,
) -> None:
    async with db.connection() as conn:
        await log_activity(conn, user_id=user_id, action=action, details=details, client=client)


async def log_search(
    user_id: str,
    payload: schemas.LogSearchRequest,
    *,
    client: ClientInfo,
) -> dict:
    async with db.connection() as conn:
        await log_activity(
            conn,
            user_id=user_id,
            action="SEARCH",
            details={
                "search_query": payload.search_query,
                "search_filters": payload.search_filters,
                "result_count": payload.result_count or 0,
            },
            client=client,
        )
    return {"success": True}


async def log_anonymous_search(
    payload: schemas.AnonymousSearchRequest,
    *,
    client: ClientInfo,
) -> dict:
    search_query = (payload.search_query or "").strip()
    search_type = (payload.search_type or "").strip()
    if not search_query or not search_type:
        raise errors.ValidationError("Search query and type are required")

    async with db.connection() as conn:
        await repository.insert_anonymous_search(
            conn,
            search_query=search_query,
            search_type=search_type,
            search_filters=payload.search_filters,
            result_count=payload.result_count or 0,
            session_id=payload.session_id,
            ip_address=client.ip_address,
            user_agent=client.user_agent,
        )
    return {"success": True}


async def admin_stats() -> dict:
    async with db.connection() as conn:
        totals = await repository.admin_totals(conn)
        return {
            "totalUsers": totals.get("total_users", 0),
            "totalSavedSearches": totals.get("total_saved_searches", 0),
            "totalSavedVehicles": totals.get("total_saved_vehicles", 0),
            "totalSearchCount": totals.get("total_search_count", 0),
            "totalAnonymousSearches": totals.get("total_anonymous_searches", 0),
            "anonymousSearchesByType": await repository.anonymous_searches_by_type(conn),
            "dailySearchStats": await repository.daily_search_stats(conn, days=30),
            "topSearchQueries": await repository.top_search_queries(conn, limit=50),
            "searchesByUser": await repository.searches_by_user(conn, limit=20),
            "recentUsers": await repository.recent_users(conn, limit=50),
            "hourlySearchPattern": await repository.hourly_search_pattern(conn, days=7),
        }


def _positive_int(raw: str | None, default: int, *, name: str) -> int:
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise errors.ValidationError(f"{name} must be a number") from exc
    if value < 1:
        raise errors.ValidationError(f"{name} must be at least 1")
    return value


async def admin_logs(*, page: str | None = None, limit: str | None = None) -> dict:
    page_no = _positive_int(page, 1, name="page")
    page_size = min(_positive_int(limit, DEFAULT_LOG_PAGE_SIZE, name="limit"), MAX_LOG_PAGE_SIZE)

    async with db.connection() as conn:
        logs = await repository.list_activity(
            conn,
            limit=page_size,
            offset=(page_no - 1) * page_size,
        )
        total = await repository.count_activity(conn)

    return {
        "logs": logs,
        "pagination": {
            "page": page_no,
            "limit": page_size,
            "total": total,
            "pages": math.ceil(total / page_size),
        },
    }
