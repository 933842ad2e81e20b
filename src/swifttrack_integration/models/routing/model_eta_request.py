# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Payload of ``route.eta.requested``."""

from __future__ import annotations

from uuid import uuid4

from pydantic import AliasChoices, Field

from swifttrack_integration.models.model_camel_base import ModelCamelBase
from swifttrack_integration.models.routing.model_coordinates import ModelCoordinates
from swifttrack_integration.models.routing.model_route_options import (
    ModelRouteOptions,
)


class ModelEtaRequest(ModelCamelBase):
    request_id: str = Field(
        default_factory=lambda: str(uuid4()),
        validation_alias=AliasChoices("requestId", "request_id", "id"),
    )
    order_id: str | None = None
    origin: ModelCoordinates
    destination: ModelCoordinates
    options: ModelRouteOptions = Field(default_factory=ModelRouteOptions)


__all__: list[str] = ["ModelEtaRequest"]
