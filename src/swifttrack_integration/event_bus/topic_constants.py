# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Routing key constants for the SwiftTrack domain event stream.

Topic names themselves are configurable (``ModelTopologyConfig``); routing
keys are fixed identifiers shared by producers and consumers.

Warehouse event keys are derived from ``EnumWarehouseEventType.routing_key``
and are not repeated here.
"""

from __future__ import annotations

from typing import Final

# Inbound order lifecycle
ORDER_CREATED: Final[str] = "order.created"
ORDER_STATUS_UPDATED: Final[str] = "order.status.updated"
DRIVER_ASSIGNED: Final[str] = "driver.assigned"

# Users
USER_CREATED: Final[str] = "user.created"

# Billing
BILLING_ORDER_CREATED: Final[str] = "billing.order.created"
BILLING_CUSTOMER_CREATED: Final[str] = "billing.customer.created"

# Route optimizer
ROUTE_OPTIMIZATION_REQUESTED: Final[str] = "route.optimization.requested"
ROUTE_OPTIMIZED: Final[str] = "route.optimized"
ROUTE_OPTIMIZATION_FAILED: Final[str] = "route.optimization.failed"
ROUTE_ETA_REQUESTED: Final[str] = "route.eta.requested"
ROUTE_ETA_CALCULATED: Final[str] = "route.eta.calculated"
ROUTE_ETA_FAILED: Final[str] = "route.eta.failed"

# Kafka record header names
HEADER_ROUTING_KEY: Final[str] = "routing_key"
HEADER_MESSAGE_ID: Final[str] = "message_id"
HEADER_CORRELATION_ID: Final[str] = "correlation_id"
HEADER_PERSISTENT: Final[str] = "persistent"
HEADER_TIMESTAMP: Final[str] = "timestamp"


__all__: list[str] = [
    "BILLING_CUSTOMER_CREATED",
    "BILLING_ORDER_CREATED",
    "DRIVER_ASSIGNED",
    "HEADER_CORRELATION_ID",
    "HEADER_MESSAGE_ID",
    "HEADER_PERSISTENT",
    "HEADER_ROUTING_KEY",
    "HEADER_TIMESTAMP",
    "ORDER_CREATED",
    "ORDER_STATUS_UPDATED",
    "ROUTE_ETA_CALCULATED",
    "ROUTE_ETA_FAILED",
    "ROUTE_ETA_REQUESTED",
    "ROUTE_OPTIMIZATION_FAILED",
    "ROUTE_OPTIMIZATION_REQUESTED",
    "ROUTE_OPTIMIZED",
    "USER_CREATED",
]
