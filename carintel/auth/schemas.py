"""
Auth API schemas (request/response models).

Request fields are optional at the schema level; the service reports missing
ones with the messages the frontend shows to users.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class RegisterRequest(BaseModel):
    email: str | None = Field(default=None, max_length=320)
    password: str | None = Field(default=None, max_length=128)
    name: str | None = Field(default=None, max_length=255)


class LoginRequest(BaseModel):
    email: str | None = Field(default=None, max_length=320)
    password: str | None = Field(default=None, max_length=128)


class VerifyRequest(BaseModel):
    token: str | None = None


class UserResponse(BaseModel):
    id: str
    email: str
    name: str | None = None
    role: Literal["user", "admin"]
    created_at: datetime | None = None
    updated_at: datetime | None = None


class AuthResponse(BaseModel):
    user: UserResponse
    token: str


class VerifyResponse(BaseModel):
    user: UserResponse | None = None


class Principal(BaseModel):
    """
    Identity carried by a verified token.
    """

    user_id: str
    email: str = ""
    role: str = "user"

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"
