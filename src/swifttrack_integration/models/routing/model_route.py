# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Optimized route for one vehicle."""

from __future__ import annotations

from pydantic import Field

from swifttrack_integration.models.model_camel_base import ModelCamelBase
from swifttrack_integration.models.routing.model_route_step import ModelRouteStep


class ModelRoute(ModelCamelBase):
    vehicle_id: str
    distance: float = 0.0
    duration: float = 0.0
    cost: float = 0.0
    steps: list[ModelRouteStep] = Field(default_factory=list)


__all__: list[str] = ["ModelRoute"]
