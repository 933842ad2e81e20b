# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Order lifecycle payload models."""

from swifttrack_integration.models.orders.model_order_created_event import (
    ModelOrderCreatedEvent,
)
from swifttrack_integration.models.orders.model_order_item import ModelOrderItem

__all__: list[str] = ["ModelOrderCreatedEvent", "ModelOrderItem"]
