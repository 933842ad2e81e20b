# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Result of a route optimization, remote or fallback."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from swifttrack_integration.models.model_camel_base import ModelCamelBase
from swifttrack_integration.models.routing.model_route import ModelRoute
from swifttrack_integration.utils import utc_now


class ModelRouteOptimizationResult(ModelCamelBase):
    """Optimization outcome.

    ``optimized`` is True only for results produced by the external
    optimizer; the local nearest-neighbour fallback reports False with
    ``provider="fallback"``.
    """

    optimized: bool
    provider: str
    method: str | None = None
    total_distance: float = 0.0
    total_duration: float = 0.0
    total_cost: float = 0.0
    routes: list[ModelRoute] = Field(default_factory=list)
    unassigned: list[str] = Field(default_factory=list)
    optimization_time: float | None = None
    timestamp: datetime = Field(default_factory=utc_now)


__all__: list[str] = ["ModelRouteOptimizationResult"]
