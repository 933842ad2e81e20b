# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Queue binding plus the handler that consumes it."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from swifttrack_integration.event_bus.protocol_broker_client import (
    BrokerMessageHandler,
)


class ModelAdapterBinding(BaseModel):
    """One ``(queue, topic, routing key)`` binding and its handler.

    Several bindings may share a queue; they must then share the handler.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    queue: str = Field(min_length=1)
    topic: str = Field(min_length=1)
    routing_key: str = Field(min_length=1)
    handler: BrokerMessageHandler


__all__: list[str] = ["ModelAdapterBinding"]
