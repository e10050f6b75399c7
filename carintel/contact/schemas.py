"""
Contact form models.
"""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, Field


class ContactRequest(BaseModel):
    name: str | None = Field(default=None, max_length=200)
    email: str | None = Field(default=None, max_length=320)
    subject: str | None = Field(default=None, max_length=300)
    message: str | None = Field(default=None, max_length=10000)


@dataclass(frozen=True)
class ContactForm:
    """
    A validated submission: every field present and non-blank.
    """

    name: str
    email: str
    subject: str
    message: str
