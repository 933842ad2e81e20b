# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""A stop to be visited by a vehicle."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from swifttrack_integration.models.model_camel_base import ModelCamelBase
from swifttrack_integration.models.routing.model_coordinates import ModelCoordinates


class ModelRouteStop(ModelCamelBase):
    id: str = Field(min_length=1)
    address: str | None = None
    coordinates: ModelCoordinates | None = None
    type: str = "delivery"
    time_windows: list[dict[str, Any]] = Field(default_factory=list)
    service_time: int = Field(default=300, ge=0)
    priority: int = 1

    def to_remote(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "address": self.address,
            "coordinates": self.coordinates.to_remote() if self.coordinates else None,
            "type": self.type,
            "time_windows": self.time_windows,
            "service_time": self.service_time,
            "priority": self.priority,
        }


__all__: list[str] = ["ModelRouteStop"]
