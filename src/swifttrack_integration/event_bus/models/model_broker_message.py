# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Broker message envelope delivered to subscription handlers."""

from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

from swifttrack_integration.utils import utc_now


class ModelBrokerMessage(BaseModel):
    """One message as seen by a queue consumer.

    The body on the wire is the UTF-8 JSON encoding of ``payload``; the
    remaining fields travel as transport metadata (record key and headers
    on Kafka).

    Attributes:
        message_id: Unique message identifier, stable across redeliveries
        topic: Topic the message was published to
        routing_key: Dot-separated routing key used for binding matches
        payload: Decoded JSON object
        persistent: Publisher's persistence flag
        timestamp: Publish time (UTC)
        correlation_id: Correlation ID propagated into every derived event
        delivery_count: 1 on first delivery, incremented on each requeue
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    message_id: UUID = Field(default_factory=uuid4)
    topic: str
    routing_key: str
    payload: dict[str, Any]
    persistent: bool = True
    timestamp: datetime = Field(default_factory=utc_now)
    correlation_id: UUID = Field(default_factory=uuid4)
    delivery_count: int = Field(default=1, ge=1)

    @property
    def redelivered(self) -> bool:
        return self.delivery_count > 1

    def for_redelivery(self) -> ModelBrokerMessage:
        """Copy of this message with ``delivery_count`` incremented."""
        return self.model_copy(update={"delivery_count": self.delivery_count + 1})


__all__ = ["ModelBrokerMessage"]
