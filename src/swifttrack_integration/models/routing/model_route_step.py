# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""One visited stop within an optimized route."""

from __future__ import annotations

from swifttrack_integration.models.model_camel_base import ModelCamelBase
from swifttrack_integration.models.routing.model_coordinates import ModelCoordinates


class ModelRouteStep(ModelCamelBase):
    """Step of a route.

    Attributes:
        distance: Kilometres from the previous step (or vehicle start)
        duration: Seconds from the previous step (or vehicle start)
        arrival: Remote arrival time, when the optimizer reports one
        departure: Remote departure time, when the optimizer reports one
    """

    id: str
    type: str | None = None
    address: str | None = None
    coordinates: ModelCoordinates | None = None
    distance: float = 0.0
    duration: float = 0.0
    arrival: str | None = None
    departure: str | None = None
    description: str | None = None


__all__: list[str] = ["ModelRouteStep"]
