# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Payload of ``route.optimization.requested``."""

from __future__ import annotations

from uuid import uuid4

from pydantic import AliasChoices, Field

from swifttrack_integration.models.model_camel_base import ModelCamelBase
from swifttrack_integration.models.routing.model_route_options import (
    ModelRouteOptions,
)
from swifttrack_integration.models.routing.model_route_stop import ModelRouteStop
from swifttrack_integration.models.routing.model_vehicle import ModelVehicle


class ModelRouteOptimizationRequest(ModelCamelBase):
    request_id: str = Field(
        default_factory=lambda: str(uuid4()),
        validation_alias=AliasChoices("requestId", "request_id", "id"),
    )
    order_id: str | None = None
    stops: list[ModelRouteStop] = Field(min_length=1)
    vehicles: list[ModelVehicle] = Field(min_length=1)
    options: ModelRouteOptions = Field(default_factory=ModelRouteOptions)


__all__: list[str] = ["ModelRouteOptimizationRequest"]
