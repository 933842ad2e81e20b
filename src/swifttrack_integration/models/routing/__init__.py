# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Route optimization and ETA models."""

from swifttrack_integration.models.routing.model_coordinates import ModelCoordinates
from swifttrack_integration.models.routing.model_eta_request import ModelEtaRequest
from swifttrack_integration.models.routing.model_eta_result import ModelEtaResult
from swifttrack_integration.models.routing.model_route import ModelRoute
from swifttrack_integration.models.routing.model_route_optimization_request import (
    ModelRouteOptimizationRequest,
)
from swifttrack_integration.models.routing.model_route_optimization_result import (
    ModelRouteOptimizationResult,
)
from swifttrack_integration.models.routing.model_route_options import (
    ModelRouteOptions,
)
from swifttrack_integration.models.routing.model_route_step import ModelRouteStep
from swifttrack_integration.models.routing.model_route_stop import ModelRouteStop
from swifttrack_integration.models.routing.model_vehicle import ModelVehicle

__all__: list[str] = [
    "ModelCoordinates",
    "ModelEtaRequest",
    "ModelEtaResult",
    "ModelRoute",
    "ModelRouteOptimizationRequest",
    "ModelRouteOptimizationResult",
    "ModelRouteOptions",
    "ModelRouteStep",
    "ModelRouteStop",
    "ModelVehicle",
]
