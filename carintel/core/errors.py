"""
Application error taxonomy.

Handlers raise these; `carintel.main` renders them as `{"error": message}`
with the matching status code.
"""

from __future__ import annotations


class AppError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = 400
    default_message = "Invalid request"


class AuthError(AppError):
    status_code = 401
    default_message = "Geen autorisatie token"


class AuthzError(AppError):
    status_code = 403
    default_message = "Geen admin rechten"


class NotFoundError(AppError):
    # Also used for rows that exist but belong to someone else.
    status_code = 404
    default_message = "Not found"


class MethodError(AppError):
    status_code = 405
    default_message = "Method not allowed"


class ConflictError(AppError):
    status_code = 409
    default_message = "Conflict"


class InternalError(AppError):
    status_code = 500
