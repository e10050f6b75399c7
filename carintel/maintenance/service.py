"""
Administrative maintenance actions: admin bootstrap, demo data and retention cleanup.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Awaitable

import asyncpg

from carintel.auth import repository as auth_repository
from carintel.auth import security
from carintel.auth import service as auth_service
from carintel.core import config, db
from carintel.saved import repository as saved_repository

from . import repository

# Days a row is kept, per table.
RETENTION_DAYS = {
    "anonymous_searches": 30,
    "activity_logs": 90,
    "saved_searches": 365,
}

DEMO_PASSWORD = "demo1234"
DEMO_USERS = (
    ("demo1@carintel.nl", "Demo Gebruiker 1"),
    ("demo2@carintel.nl", "Demo Gebruiker 2"),
    ("demo3@carintel.nl", "Demo Gebruiker 3"),
)
DEMO_SEARCHES = (
    ("AB-123-C", "kenteken", 1),
    ("Volkswagen", "merk", 245),
    ("Tesla Model 3", "model", 87),
    ("trekgewicht 1500", "trekgewicht", 412),
    ("Toyota", "merk", 198),
)
DEMO_SAVED_SEARCH = ("Demo: Volkswagen", ["AB123C", "12ABC3"], "Volkswagen", {"merk": "VOLKSWAGEN"})

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def cutoff(now: datetime, days: int) -> datetime:
    """
    Oldest created_at that survives is strictly after this instant.
    """
    return now - timedelta(days=days)


async def cleanup(*, now: datetime | None = None) -> dict:
    now = now or utcnow()
    deleted: dict[str, int] = {}
    async with db.connection() as conn:
        for table, days in RETENTION_DAYS.items():
            deleted[table] = await repository.delete_created_before(conn, table, cutoff(now, days))

    logger.info(
        "retention_cleanup %s",
        " ".join(f"{table}={count}" for table, count in deleted.items()),
    )
    return {
        "success": True,
        "message": "Oude data succesvol opgeschoond",
        "deleted": deleted,
        "timestamp": now,
    }


async def create_admin() -> dict:
    email = config.admin_email()
    password_hash = security.hash_password(config.admin_password())

    async with db.connection() as conn:
        user_row, was_created = await auth_repository.upsert_admin_user(
            conn,
            email=email,
            password_hash=password_hash,
            name=config.admin_name(),
        )

    status = "created" if was_created else "updated"
    logger.info("admin_account_%s user_id=%s", status, user_row["id"])
    return {"status": status, "user": auth_service.to_user_response(user_row)}


@dataclass
class SeedCounter:
    inserted: int = 0
    skipped: int = 0

    async def insert_or_skip(self, statement: Awaitable[Any]) -> Any:
        """
        Await one insert. A unique violation counts as skipped; anything else propagates.
        """
        try:
            result = await statement
        except asyncpg.UniqueViolationError:
            self.skipped += 1
            return None
        self.inserted += 1
        return result


async def sample_data() -> dict:
    counter = SeedCounter()
    password_hash = security.hash_password(DEMO_PASSWORD)

    async with db.connection() as conn:
        user_ids = []
        for email, name in DEMO_USERS:
            row = await counter.insert_or_skip(
                auth_repository.create_user(conn, email=email, password_hash=password_hash, name=name)
            )
            if row is None:
                row = await auth_repository.get_user_by_email(conn, email)
            if row is not None:
                user_ids.append(row["id"])

        for index, (query, search_type, result_count) in enumerate(DEMO_SEARCHES):
            await counter.insert_or_skip(
                repository.insert_demo_search(
                    conn,
                    search_query=query,
                    search_type=search_type,
                    result_count=result_count,
                    session_id=f"sample-session-{index % 2}",
                )
            )

        if user_ids:
            name, kentekens, search_query, search_filters = DEMO_SAVED_SEARCH
            await counter.insert_or_skip(
                saved_repository.insert_saved_search(
                    conn,
                    user_id=user_ids[0],
                    name=name,
                    kentekens=kentekens,
                    search_query=search_query,
                    search_filters=search_filters,
                )
            )

    logger.info("sample_data inserted=%s skipped=%s", counter.inserted, counter.skipped)
    return {"inserted": counter.inserted, "skipped": counter.skipped}
