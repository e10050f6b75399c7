"""
Sketch request models.

`incidents`, `drawnLines` and `metadata` are stored as-is; their inner shape
belongs to the map editor.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class SketchRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str | None = Field(default=None, max_length=255)
    description: str | None = None
    location: str | None = Field(default=None, max_length=255)
    incidents: list[Any] | None = None
    drawn_lines: list[Any] | None = Field(default=None, alias="drawnLines")
    metadata: dict[str, Any] | None = None
    is_public: bool | None = Field(default=None, alias="isPublic")
