"""
Environment-backed settings.

Every setting is read on call so tests can override it with monkeypatch.setenv.
"""

from __future__ import annotations

import os

DEFAULT_ALLOWED_ORIGINS = (
    "https://carintel.nl",
    "https://www.carintel.nl",
    "http://localhost:5173",
    "http://localhost:3000",
)
FALLBACK_ORIGIN = "https://www.carintel.nl"


def env_str(name: str, default: str) -> str:
    return os.environ.get(name, default).strip() or default


def env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def env_list(name: str) -> list[str]:
    raw = os.environ.get(name, "")
    return [item.strip() for item in raw.split(",") if item.strip()]


def log_level() -> str:
    return env_str("LOG_LEVEL", "INFO").upper()


def allowed_origins() -> list[str]:
    return [*DEFAULT_ALLOWED_ORIGINS, *env_list("CORS_EXTRA_ORIGINS")]


def smtp_host() -> str:
    return env_str("SMTP_HOST", "smtp.gmail.com")


def smtp_port() -> int:
    return env_int("SMTP_PORT", 587)


def smtp_user() -> str:
    return env_str("EMAIL_USER", "")


def smtp_password() -> str:
    return os.environ.get("EMAIL_PASS", "")


def contact_to() -> str:
    return env_str("CONTACT_TO", "info@carintel.nl")


def admin_email() -> str:
    return env_str("ADMIN_EMAIL", "admin@carintel.nl").lower()


def admin_password() -> str:
    return env_str("ADMIN_PASSWORD", "admin123!")


def admin_name() -> str:
    return env_str("ADMIN_NAME", "CarIntel Admin")
