# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Reusable connection-lifecycle mixins."""

from swifttrack_integration.mixins.mixin_async_circuit_breaker import (
    CircuitState,
    MixinAsyncCircuitBreaker,
)
from swifttrack_integration.mixins.mixin_reconnecting_connection import (
    MixinReconnectingConnection,
)

__all__: list[str] = [
    "CircuitState",
    "MixinAsyncCircuitBreaker",
    "MixinReconnectingConnection",
]
