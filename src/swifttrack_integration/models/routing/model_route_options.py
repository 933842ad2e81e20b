# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Options for route optimization and ETA requests."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from swifttrack_integration.models.model_camel_base import ModelCamelBase
from swifttrack_integration.utils import utc_now


class ModelRouteOptions(ModelCamelBase):
    profile: str = "balanced"
    consider_traffic: bool = True
    optimize_order: bool = True
    balance_routes: bool = False
    return_to_depot: bool = True
    vehicle_type: str = "car"
    departure_time: datetime | None = None

    def to_remote_optimize(self) -> dict[str, Any]:
        return {
            "traffic": self.consider_traffic,
            "optimize_order": self.optimize_order,
            "balance_routes": self.balance_routes,
            "return_to_depot": self.return_to_depot,
        }

    def to_remote_eta(self) -> dict[str, Any]:
        departure = self.departure_time or utc_now()
        return {
            "traffic": self.consider_traffic,
            "departure_time": departure.isoformat(),
            "vehicle_type": self.vehicle_type,
        }


__all__: list[str] = ["ModelRouteOptions"]
