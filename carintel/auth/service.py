"""
Auth business logic.
"""

from __future__ import annotations

import logging

import asyncpg

from carintel.activity import service as activity_service
from carintel.core import db, errors

from . import repository, schemas, security

MIN_PASSWORD_LENGTH = 6

logger = logging.getLogger(__name__)


def to_user_response(user_row: dict) -> schemas.UserResponse:
    return schemas.UserResponse(
        id=str(user_row["id"]),
        email=str(user_row["email"]),
        name=user_row.get("name"),
        role=str(user_row.get("role") or "user"),
        created_at=user_row.get("created_at"),
        updated_at=user_row.get("updated_at"),
    )


def issue_token(user_row: dict) -> str:
    return security.build_access_token(
        user_id=str(user_row["id"]),
        email=str(user_row["email"]),
        role=str(user_row.get("role") or "user"),
    )


async def register(
    payload: schemas.RegisterRequest,
    *,
    client: activity_service.ClientInfo,
) -> schemas.AuthResponse:
    email = repository.normalize_email(payload.email or "")
    password = payload.password or ""
    if not email or not password:
        raise errors.ValidationError("Email en wachtwoord zijn verplicht")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise errors.ValidationError("Wachtwoord moet minimaal 6 karakters lang zijn")
    if len(password.encode("utf-8")) > security.MAX_PASSWORD_BYTES:
        raise errors.ValidationError("Wachtwoord mag maximaal 72 bytes lang zijn")

    async with db.connection() as conn:
        existing = await repository.get_user_by_email(conn, email)
        if existing is not None:
            raise errors.ConflictError("Gebruiker bestaat al met dit email adres")

        password_hash = security.hash_password(password)
        try:
            user_row = await repository.create_user(
                conn,
                email=email,
                password_hash=password_hash,
                name=(payload.name or "").strip() or None,
            )
        except asyncpg.UniqueViolationError as exc:
            # Lost a race against a concurrent registration for the same email.
            raise errors.ConflictError("Gebruiker bestaat al met dit email adres") from exc

        await activity_service.log_activity(
            conn,
            user_id=user_row["id"],
            action="REGISTER",
            details={"email": user_row["email"], "name": user_row.get("name")},
            client=client,
        )

    logger.info("user_registered user_id=%s", user_row["id"])
    return schemas.AuthResponse(user=to_user_response(user_row), token=issue_token(user_row))


async def login(
    payload: schemas.LoginRequest,
    *,
    client: activity_service.ClientInfo,
) -> schemas.AuthResponse:
    email = repository.normalize_email(payload.email or "")
    password = payload.password or ""
    if not email or not password:
        raise errors.ValidationError("Email en wachtwoord zijn verplicht")

    async with db.connection() as conn:
        user_row = await repository.get_user_by_email(conn, email)
        if user_row is None:
            raise errors.AuthError("Gebruiker niet gevonden")

        if not security.verify_password(password, str(user_row.get("password_hash") or "")):
            raise errors.AuthError("Ongeldig wachtwoord")

        await activity_service.log_activity(
            conn,
            user_id=user_row["id"],
            action="LOGIN",
            details={"email": user_row["email"]},
            client=client,
        )

    return schemas.AuthResponse(user=to_user_response(user_row), token=issue_token(user_row))


async def verify(payload: schemas.VerifyRequest) -> schemas.VerifyResponse:
    token = (payload.token or "").strip()
    if not token:
        raise errors.ValidationError("Token is verplicht")

    try:
        claims = security.decode_access_token(token)
    except security.AuthSecurityError:
        return schemas.VerifyResponse(user=None)

    user_id = db.uuid_arg(claims.get("sub"))
    if user_id is None:
        return schemas.VerifyResponse(user=None)

    async with db.connection() as conn:
        user_row = await repository.get_user_by_id(conn, user_id)

    if user_row is None:
        return schemas.VerifyResponse(user=None)
    return schemas.VerifyResponse(user=to_user_response(user_row))


def principal_from_token(token: str) -> schemas.Principal:
    try:
        claims = security.decode_access_token(token)
    except security.AuthSecurityError as exc:
        raise errors.AuthError("Ongeldig token") from exc

    return schemas.Principal(
        user_id=str(claims["sub"]),
        email=str(claims.get("email") or ""),
        role=str(claims.get("role") or "user"),
    )


def require_admin(principal: schemas.Principal) -> schemas.Principal:
    if not principal.is_admin:
        raise errors.AuthzError("Geen admin rechten")
    return principal
