# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Protocol bridges between the broker and external systems.

Exports:
    WarehouseLineBridge: TCP newline-delimited JSON (warehouse)
    BillingSoapBridge: SOAP over HTTP (billing)
    RouteOptimizerBridge: JSON REST (route optimizer) with local fallback
"""

from swifttrack_integration.bridges.bridge_billing_soap import BillingSoapBridge
from swifttrack_integration.bridges.bridge_route_optimizer import (
    RouteOptimizerBridge,
)
from swifttrack_integration.bridges.bridge_warehouse_line import WarehouseLineBridge

__all__: list[str] = [
    "BillingSoapBridge",
    "RouteOptimizerBridge",
    "WarehouseLineBridge",
]
