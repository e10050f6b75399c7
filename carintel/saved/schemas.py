"""
Saved searches / saved vehicles request models.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class SaveSearchRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str | None = Field(default=None, max_length=255)
    kentekens: list[Any] | None = None
    search_query: str | None = Field(default=None, alias="searchQuery", max_length=500)
    search_filters: dict[str, Any] | None = Field(default=None, alias="searchFilters")


class DeleteSearchRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    search_id: str | None = Field(default=None, alias="searchId")


class SaveVehicleRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    kenteken: str | None = Field(default=None, max_length=20)
    vehicle_data: dict[str, Any] | None = Field(default=None, alias="vehicleData")
    notes: str | None = Field(default=None, max_length=2000)


class DeleteVehicleRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    vehicle_id: str | None = Field(default=None, alias="vehicleId")
