# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Utility modules for the SwiftTrack integration layer.

    - util_datetime: UTC timestamp helpers
    - util_error_sanitization: Error message sanitization for logs and failure events
    - util_geo: Haversine distance for the local route fallback
    - util_routing_key: Routing key validation, normalization and wildcard matching
"""

from swifttrack_integration.utils.util_datetime import utc_now, utc_now_iso
from swifttrack_integration.utils.util_error_sanitization import (
    SENSITIVE_PATTERNS,
    sanitize_error_message,
    sanitize_error_string,
)
from swifttrack_integration.utils.util_geo import EARTH_RADIUS_KM, haversine_km
from swifttrack_integration.utils.util_routing_key import (
    normalize_routing_key_suffix,
    routing_key_matches,
    validate_routing_key,
)

__all__: list[str] = [
    "EARTH_RADIUS_KM",
    "SENSITIVE_PATTERNS",
    "haversine_km",
    "normalize_routing_key_suffix",
    "routing_key_matches",
    "sanitize_error_message",
    "sanitize_error_string",
    "utc_now",
    "utc_now_iso",
    "validate_routing_key",
]
