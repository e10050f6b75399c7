"""
Auth security helpers: password hashing and session tokens.
"""

from __future__ import annotations

import time
from typing import Any

import bcrypt
import jwt

from carintel.core import config

BCRYPT_ROUNDS = 12
ROLES = ("user", "admin")
# bcrypt only reads this many bytes; newer releases reject anything longer.
MAX_PASSWORD_BYTES = 72


class AuthSecurityError(RuntimeError):
    pass


def jwt_secret() -> str:
    # Development fallback; deployments set JWT_SECRET.
    return config.env_str("JWT_SECRET", "dev-change-this-secret")


def jwt_algorithm() -> str:
    return config.env_str("JWT_ALG", "HS256")


def token_expire_days() -> int:
    return config.env_int("TOKEN_EXPIRE_DAYS", 7)


def now_epoch_s() -> int:
    return int(time.time())


def hash_password(plain_password: str) -> str:
    password = (plain_password or "").encode("utf-8")
    if not password:
        raise AuthSecurityError("Password is empty.")
    if len(password) > MAX_PASSWORD_BYTES:
        raise AuthSecurityError("Password is longer than 72 bytes.")
    return bcrypt.hashpw(password, bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain_password: str, password_hash: str) -> bool:
    password = (plain_password or "").encode("utf-8")
    hashed = (password_hash or "").encode("utf-8")
    if not password or not hashed or len(password) > MAX_PASSWORD_BYTES:
        return False
    try:
        return bcrypt.checkpw(password, hashed)
    except (TypeError, ValueError):
        # Not a bcrypt digest.
        return False


def build_access_token(*, user_id: str, email: str, role: str, issued_at: int | None = None) -> str:
    issued_at = now_epoch_s() if issued_at is None else issued_at
    expires_at = issued_at + (token_expire_days() * 24 * 60 * 60)

    payload = {
        "sub": str(user_id),
        "email": email,
        "role": role,
        "type": "access",
        "iat": issued_at,
        "exp": expires_at,
    }
    return jwt.encode(payload, jwt_secret(), algorithm=jwt_algorithm())


def decode_access_token(token: str) -> dict[str, Any]:
    raw = (token or "").strip()
    if not raw:
        raise AuthSecurityError("Access token is empty.")

    try:
        payload = jwt.decode(raw, jwt_secret(), algorithms=[jwt_algorithm()])
    except jwt.InvalidTokenError as exc:
        raise AuthSecurityError("Invalid access token.") from exc

    token_type = str(payload.get("type") or "").strip().lower()
    if token_type != "access":
        raise AuthSecurityError("Token is not an access token.")

    if not str(payload.get("sub") or "").strip():
        raise AuthSecurityError("Token has no subject.")

    if payload.get("role", "user") not in ROLES:
        raise AuthSecurityError("Token carries an unknown role.")

    return payload
