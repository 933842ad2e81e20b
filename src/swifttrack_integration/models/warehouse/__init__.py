# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Warehouse line-protocol models."""

from swifttrack_integration.models.warehouse.model_pending_request import (
    ModelPendingRequest,
)
from swifttrack_integration.models.warehouse.model_warehouse_commands import (
    ModelCallbackMeta,
    ModelReceivePackage,
    ModelRegisterAdapter,
    ModelWarehouseCommand,
)
from swifttrack_integration.models.warehouse.model_warehouse_event import (
    ModelWarehouseEvent,
    ModelWarehousePackageEvent,
)

__all__: list[str] = [
    "ModelCallbackMeta",
    "ModelPendingRequest",
    "ModelReceivePackage",
    "ModelRegisterAdapter",
    "ModelWarehouseCommand",
    "ModelWarehouseEvent",
    "ModelWarehousePackageEvent",
]
