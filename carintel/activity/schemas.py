"""
Search-logging request models.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class LogSearchRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    search_query: str | None = Field(default=None, alias="searchQuery", max_length=500)
    search_filters: dict[str, Any] | None = Field(default=None, alias="searchFilters")
    result_count: int | None = Field(default=None, alias="resultCount", ge=0)


class AnonymousSearchRequest(LogSearchRequest):
    search_type: str | None = Field(default=None, alias="searchType", max_length=50)
    session_id: str | None = Field(default=None, alias="sessionId", max_length=255)
