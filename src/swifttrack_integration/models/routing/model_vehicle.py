# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""A vehicle available for route assignment."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from swifttrack_integration.models.model_camel_base import ModelCamelBase
from swifttrack_integration.models.routing.model_coordinates import ModelCoordinates


class ModelVehicle(ModelCamelBase):
    """Vehicle; ``end_location`` defaults to ``start_location`` remotely."""

    id: str = Field(min_length=1)
    start_location: ModelCoordinates | None = None
    end_location: ModelCoordinates | None = None
    capacity: dict[str, Any] = Field(default_factory=dict)
    max_distance: float | None = None
    max_time: float | None = None
    skills: list[str] = Field(default_factory=list)

    def to_remote(self) -> dict[str, Any]:
        start = self.start_location.to_remote() if self.start_location else None
        end = self.end_location.to_remote() if self.end_location else start
        return {
            "id": self.id,
            "start_location": start,
            "end_location": end,
            "capacity": self.capacity,
            "max_distance": self.max_distance,
            "max_time": self.max_time,
            "skills": self.skills,
        }


__all__: list[str] = ["ModelVehicle"]
