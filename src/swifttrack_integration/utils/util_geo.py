# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Great-circle distance helpers for the local route fallback."""

from __future__ import annotations

import math

EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Return the haversine distance between two points in kilometres.

    Example:
        >>> haversine_km(6.9271, 79.8612, 6.9271, 79.8612)
        0.0
    """
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1))
        * math.cos(math.radians(lat2))
        * math.sin(d_lng / 2) ** 2
    )
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


__all__: list[str] = ["EARTH_RADIUS_KM", "haversine_km"]
