# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Geographic point."""

from __future__ import annotations

from pydantic import AliasChoices, Field

from swifttrack_integration.models.model_camel_base import ModelCamelBase


class ModelCoordinates(ModelCamelBase):
    """WGS84 point; accepts ``latitude``/``longitude`` or ``lat``/``lng``."""

    latitude: float = Field(
        ge=-90.0, le=90.0, validation_alias=AliasChoices("latitude", "lat")
    )
    longitude: float = Field(
        ge=-180.0, le=180.0, validation_alias=AliasChoices("longitude", "lng")
    )

    def to_remote(self) -> dict[str, float]:
        return {"lat": self.latitude, "lng": self.longitude}


__all__: list[str] = ["ModelCoordinates"]
