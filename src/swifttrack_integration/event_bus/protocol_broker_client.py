# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Broker client protocol shared by the Kafka and in-memory implementations."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any, Protocol, runtime_checkable
from uuid import UUID

from swifttrack_integration.enums import EnumConnectionState, EnumMessageDisposition
from swifttrack_integration.event_bus.models import ModelBrokerMessage

BrokerMessageHandler = Callable[[ModelBrokerMessage], Awaitable[EnumMessageDisposition]]
Unsubscribe = Callable[[], Awaitable[None]]


@runtime_checkable
class ProtocolBrokerClient(Protocol):
    """Topic broker client contract used by the adapter runtime.

    Delivery semantics:
        - A queue receives a copy of every message whose (topic, routing key)
          matches any of its bindings.
        - Consumers of the same queue compete; each message goes to one.
        - The handler's EnumMessageDisposition decides ack, drop or requeue.
        - Redelivery after requeue may reorder messages.
    """

    @property
    def connection_state(self) -> EnumConnectionState: ...

    async def connect(self) -> bool:
        """Connect and assert topology; a no-op returning True when connected."""
        ...

    async def publish(
        self,
        topic: str,
        routing_key: str,
        payload: dict[str, Any],
        *,
        persistent: bool = True,
        correlation_id: UUID | None = None,
    ) -> bool:
        """Best-effort publish; False (with a warning logged) when dropped."""
        ...

    async def subscribe(self, queue: str, handler: BrokerMessageHandler) -> Unsubscribe:
        """Assert ``queue`` and deliver its messages to ``handler``."""
        ...

    async def bind_queue(self, queue: str, topic: str, routing_key: str) -> None:
        """Declare a binding; recorded and re-asserted on every connect."""
        ...

    async def close(self) -> None:
        """Close the transport and cancel pending reconnects."""
        ...

    async def health_check(self) -> dict[str, object]: ...


__all__: list[str] = [
    "BrokerMessageHandler",
    "ProtocolBrokerClient",
    "Unsubscribe",
]
