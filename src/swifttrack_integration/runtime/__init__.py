# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Adapter runtime and process wiring."""

from swifttrack_integration.runtime.model_adapter_binding import ModelAdapterBinding
from swifttrack_integration.runtime.runtime_factories import (
    build_billing_runtime,
    build_route_runtime,
    build_warehouse_runtime,
)
from swifttrack_integration.runtime.service_adapter_runtime import (
    AdapterRuntime,
    ProtocolBridge,
)
from swifttrack_integration.runtime.util_logging import configure_logging

__all__: list[str] = [
    "AdapterRuntime",
    "ModelAdapterBinding",
    "ProtocolBridge",
    "build_billing_runtime",
    "build_route_runtime",
    "build_warehouse_runtime",
    "configure_logging",
]
