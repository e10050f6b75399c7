"""
Owner-scoped CRUD on traffic sketches.

A sketch that exists but belongs to someone else is reported exactly like a
missing one.
"""

from __future__ import annotations

import logging
from uuid import UUID

from carintel.core import db, errors

from . import repository, schemas

logger = logging.getLogger(__name__)


def _owner(user_id: str) -> UUID:
    owner = db.uuid_arg(user_id)
    if owner is None:
        raise errors.AuthError("Ongeldige token")
    return owner


def _sketch_id(raw: str | None) -> UUID:
    if not (raw or "").strip():
        raise errors.ValidationError("Sketch ID is required")
    sketch_id = db.uuid_arg(raw)
    if sketch_id is None:
        raise errors.NotFoundError("Sketch not found")
    return sketch_id


def _fields(payload: schemas.SketchRequest) -> dict:
    title = (payload.title or "").strip()
    if not title:
        raise errors.ValidationError("Title is required")
    return {
        "title": title,
        "description": payload.description or None,
        "location": payload.location or None,
        "incidents": payload.incidents or [],
        "drawn_lines": payload.drawn_lines or [],
        "metadata": payload.metadata or {},
        "is_public": bool(payload.is_public),
    }


async def list_sketches(user_id: str) -> dict:
    owner = _owner(user_id)
    async with db.connection() as conn:
        await repository.ensure_table(conn)
        rows = await repository.list_sketches(conn, user_id=owner)
    return {"sketches": rows}


async def get_sketch(user_id: str, raw_id: str | None) -> dict:
    owner = _owner(user_id)
    sketch_id = _sketch_id(raw_id)
    async with db.connection() as conn:
        await repository.ensure_table(conn)
        row = await repository.get_sketch(conn, sketch_id=sketch_id, user_id=owner)
    if row is None:
        raise errors.NotFoundError("Sketch not found")
    return {"sketch": row}


async def save_sketch(user_id: str, payload: schemas.SketchRequest) -> dict:
    owner = _owner(user_id)
    fields = _fields(payload)
    async with db.connection() as conn:
        await repository.ensure_table(conn)
        row = await repository.insert_sketch(conn, user_id=owner, **fields)

    logger.info("sketch_saved sketch_id=%s user_id=%s", row["id"], owner)
    return {"message": "Sketch saved successfully", "sketch": row}


async def update_sketch(user_id: str, raw_id: str | None, payload: schemas.SketchRequest) -> dict:
    owner = _owner(user_id)
    sketch_id = _sketch_id(raw_id)
    fields = _fields(payload)
    async with db.connection() as conn:
        await repository.ensure_table(conn)
        row = await repository.update_sketch(conn, sketch_id=sketch_id, user_id=owner, **fields)
    if row is None:
        raise errors.NotFoundError("Sketch not found or not authorized")
    return {"message": "Sketch updated successfully", "sketch": row}


async def delete_sketch(user_id: str, raw_id: str | None) -> dict:
    owner = _owner(user_id)
    sketch_id = _sketch_id(raw_id)
    async with db.connection() as conn:
        await repository.ensure_table(conn)
        row = await repository.delete_sketch(conn, sketch_id=sketch_id, user_id=owner)
    if row is None:
        raise errors.NotFoundError("Sketch not found or not authorized")
    return {"message": "Sketch deleted successfully"}
