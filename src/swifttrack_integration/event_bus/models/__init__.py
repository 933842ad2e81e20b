# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Message envelope and topology models shared by every adapter."""

from swifttrack_integration.event_bus.models.model_broker_message import (
    ModelBrokerMessage,
)
from swifttrack_integration.event_bus.models.model_queue_binding import (
    ModelQueueBinding,
)

__all__: list[str] = ["ModelBrokerMessage", "ModelQueueBinding"]
