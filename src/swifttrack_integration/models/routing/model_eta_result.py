# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Estimated time of arrival between two points."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from swifttrack_integration.models.model_camel_base import ModelCamelBase


class ModelEtaResult(ModelCamelBase):
    """ETA in kilometres and seconds; ``eta`` is computed at calculation time."""

    distance: float
    duration: float
    eta: datetime
    route_geometry: Any = None
    traffic_considered: bool = False
    provider: str


__all__: list[str] = ["ModelEtaResult"]
