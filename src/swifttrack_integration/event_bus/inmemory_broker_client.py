# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""In-memory broker client for local development and testing.

Implements ProtocolBrokerClient with one asyncio.Queue per broker queue.
Publishing copies a message into every queue with a matching binding;
each subscribed handler runs as a competing consumer task on its queue.

Features:
    - Topic/routing-key pattern bindings (``*`` and ``#`` wildcards)
    - Ack, drop and requeue dispositions with delivery counting
    - Optional redelivery cap
    - Simulated transport loss and broker outages driving the same
      reconnect state machine the Kafka client uses
    - Publish history for inspection in tests
    - ``join()`` to wait until every queue is drained

Usage:
    ```python
    broker = InMemoryBrokerClient(ModelTopologyConfig())
    await broker.connect()
    await broker.bind_queue("wms-adapter-q", "orders", "order.created")
    await broker.subscribe("wms-adapter-q", handler)
    await broker.publish("orders", "order.created", {"orderId": "o-1"})
    await broker.join()
    await broker.close()
    ```
"""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from contextlib import suppress
from typing import Any
from uuid import UUID, uuid4

from swifttrack_integration.enums import (
    EnumConnectionState,
    EnumInfraTransportType,
    EnumMessageDisposition,
)
from swifttrack_integration.errors import (
    InfraConnectionError,
    ModelInfraErrorContext,
)
from swifttrack_integration.event_bus.models import (
    ModelBrokerMessage,
    ModelQueueBinding,
)
from swifttrack_integration.event_bus.protocol_broker_client import (
    BrokerMessageHandler,
    Unsubscribe,
)
from swifttrack_integration.event_bus.util_dispatch import dispatch_message
from swifttrack_integration.mixins import MixinReconnectingConnection
from swifttrack_integration.models.config import (
    ModelIntegrationConfig,
    ModelTopologyConfig,
)
from swifttrack_integration.utils import validate_routing_key

logger = logging.getLogger(__name__)


class InMemoryBrokerClient(MixinReconnectingConnection):
    """In-memory topic broker with AMQP-style queue semantics.

    Attributes:
        available: When False, connect attempts fail as if the broker were
            down; the client keeps retrying on its reconnect interval.
        topology_assertions: Number of successful topology assertions.
    """

    def __init__(
        self,
        topology: ModelTopologyConfig | None = None,
        *,
        reconnect_interval: float = 0.0,
        requeue_delay: float = 0.0,
        max_redeliveries: int | None = None,
        max_history: int = 1000,
    ) -> None:
        self._declared_topics: set[str] = set(
            (topology or ModelTopologyConfig()).all_topics
        )
        self._topics: set[str] = set()
        self._bindings: dict[str, set[ModelQueueBinding]] = defaultdict(set)
        self._queues: dict[str, asyncio.Queue[ModelBrokerMessage]] = {}
        self._handlers: dict[str, list[BrokerMessageHandler]] = defaultdict(list)
        self._consumer_tasks: dict[int, asyncio.Task[None]] = {}
        self._consumer_owner: dict[int, tuple[str, BrokerMessageHandler]] = {}
        self._requeue_delay = requeue_delay
        self._max_redeliveries = max_redeliveries
        self._max_history = max_history
        self._history: list[ModelBrokerMessage] = []
        self._dispositions: dict[str, dict[EnumMessageDisposition, int]] = defaultdict(
            lambda: defaultdict(int)
        )
        self.available = True
        self.topology_assertions = 0
        self._init_reconnect(
            service_name="inmemory-broker",
            reconnect_interval=reconnect_interval,
            transport_type=EnumInfraTransportType.KAFKA,
        )

    @classmethod
    def from_config(cls, config: ModelIntegrationConfig) -> InMemoryBrokerClient:
        """Build a client with the topology and redelivery settings of ``config``."""
        return cls(
            config.topology,
            reconnect_interval=config.broker.reconnect_interval_seconds,
            requeue_delay=config.broker.requeue_delay_seconds,
            max_redeliveries=config.broker.max_redeliveries,
        )

    # =========================================================================
    # Connection lifecycle
    # =========================================================================

    async def _open_transport(self) -> None:
        if not self.available:
            raise InfraConnectionError(
                "In-memory broker unavailable",
                context=ModelInfraErrorContext.with_correlation(
                    transport_type=EnumInfraTransportType.KAFKA,
                    operation="connect",
                    target_name="inmemory-broker",
                ),
            )
        self._assert_topology()
        # Flipped here so consumers started below see a live broker.
        self._set_connection_state(EnumConnectionState.CONNECTED)
        for queue, handlers in self._handlers.items():
            for handler in handlers:
                self._start_consumer(queue, handler)

    def _assert_topology(self) -> None:
        self._topics |= self._declared_topics
        for queue, bindings in self._bindings.items():
            self._topics |= {binding.topic for binding in bindings}
            self._queues.setdefault(queue, asyncio.Queue())
        self.topology_assertions += 1

    async def simulate_connection_loss(self, reason: str = "simulated") -> None:
        """Drop the transport as a network failure would.

        Consumer tasks stop; unsettled in-flight messages return to their
        queue; a reconnect is scheduled through the normal state machine.
        """
        await self._stop_consumers()
        self._handle_connection_lost(reason)

    async def _teardown_transport(self) -> None:
        await self._stop_consumers()

    async def close(self) -> None:
        await self._shutdown_reconnect()
        await self._teardown_transport()
        logger.info("InMemoryBrokerClient closed")

    # =========================================================================
    # Topology
    # =========================================================================

    async def bind_queue(self, queue: str, topic: str, routing_key: str) -> None:
        validate_routing_key(routing_key, allow_wildcards=True)
        binding = ModelQueueBinding(topic=topic, pattern=routing_key)
        if binding in self._bindings[queue]:
            return
        self._bindings[queue].add(binding)
        self._declared_topics.add(topic)
        if self.is_connected:
            self._topics.add(topic)
            self._queues.setdefault(queue, asyncio.Queue())
        logger.debug(
            "Bound queue",
            extra={"queue": queue, "topic": topic, "routing_key": routing_key},
        )

    @property
    def topics(self) -> frozenset[str]:
        return frozenset(self._topics)

    @property
    def queues(self) -> frozenset[str]:
        return frozenset(self._queues)

    def bindings(self, queue: str) -> frozenset[ModelQueueBinding]:
        return frozenset(self._bindings.get(queue, set()))

    # =========================================================================
    # Publish / subscribe
    # =========================================================================

    async def publish(
        self,
        topic: str,
        routing_key: str,
        payload: dict[str, Any],
        *,
        persistent: bool = True,
        correlation_id: UUID | None = None,
    ) -> bool:
        validate_routing_key(routing_key, correlation_id=correlation_id)
        if not self.is_connected:
            logger.warning(
                f"Broker not connected, dropping publish of {routing_key}",
                extra={"topic": topic, "routing_key": routing_key},
            )
            return False
        if topic not in self._topics:
            logger.warning(
                f"Publish to unknown topic {topic}, dropping",
                extra={"topic": topic, "routing_key": routing_key},
            )
            return False

        message = ModelBrokerMessage(
            topic=topic,
            routing_key=routing_key,
            payload=payload,
            persistent=persistent,
            correlation_id=correlation_id or uuid4(),
        )
        self._history.append(message)
        if len(self._history) > self._max_history:
            self._history.pop(0)

        for queue, bindings in self._bindings.items():
            if any(b.matches(topic, routing_key) for b in bindings):
                self._queues.setdefault(queue, asyncio.Queue()).put_nowait(message)
        return True

    async def subscribe(self, queue: str, handler: BrokerMessageHandler) -> Unsubscribe:
        self._queues.setdefault(queue, asyncio.Queue())
        self._handlers[queue].append(handler)
        if self.is_connected:
            self._start_consumer(queue, handler)

        async def unsubscribe() -> None:
            if handler in self._handlers.get(queue, []):
                self._handlers[queue].remove(handler)
            for key, owner in list(self._consumer_owner.items()):
                if owner == (queue, handler):
                    await self._stop_consumer(key, self._consumer_tasks[key])
                    break

        return unsubscribe

    def _start_consumer(self, queue: str, handler: BrokerMessageHandler) -> int:
        task = asyncio.get_running_loop().create_task(self._consume(queue, handler))
        key = id(task)
        self._consumer_tasks[key] = task
        self._consumer_owner[key] = (queue, handler)
        return key

    async def _stop_consumer(self, key: int, task: asyncio.Task[None]) -> None:
        self._consumer_tasks.pop(key, None)
        self._consumer_owner.pop(key, None)
        if not task.done():
            task.cancel()
            with suppress(asyncio.CancelledError):
                await task

    async def _stop_consumers(self) -> None:
        for key, task in list(self._consumer_tasks.items()):
            await self._stop_consumer(key, task)

    async def _consume(self, queue_name: str, handler: BrokerMessageHandler) -> None:
        queue = self._queues[queue_name]
        while True:
            message = await queue.get()
            settled = False
            try:
                disposition = await dispatch_message(
                    handler,
                    message,
                    queue=queue_name,
                    max_redeliveries=self._max_redeliveries,
                )
                self._dispositions[queue_name][disposition] += 1
                if disposition is EnumMessageDisposition.REQUEUE:
                    # sleep(0) still yields to the loop.
                    await asyncio.sleep(self._requeue_delay)
                    queue.put_nowait(message.for_redelivery())
                settled = True
            except asyncio.CancelledError:
                if not settled:
                    queue.put_nowait(message.for_redelivery())
                raise
            finally:
                queue.task_done()

    # =========================================================================
    # Inspection
    # =========================================================================

    async def join(self) -> None:
        """Wait until every queue has no undelivered or unsettled message."""
        await asyncio.gather(*(q.join() for q in list(self._queues.values())))

    def queue_depth(self, queue: str) -> int:
        q = self._queues.get(queue)
        return q.qsize() if q is not None else 0

    def disposition_count(self, queue: str, disposition: EnumMessageDisposition) -> int:
        return self._dispositions[queue][disposition]

    def published(self, routing_key: str | None = None) -> list[ModelBrokerMessage]:
        """Published messages, optionally filtered by exact routing key."""
        if routing_key is None:
            return list(self._history)
        return [m for m in self._history if m.routing_key == routing_key]

    async def health_check(self) -> dict[str, object]:
        return {
            "healthy": self.is_connected,
            "state": self.connection_state.value,
            "topic_count": len(self._topics),
            "queue_count": len(self._queues),
            "consumer_count": len(self._consumer_tasks),
            "reconnect_pending": self.reconnect_pending,
        }


__all__: list[str] = ["InMemoryBrokerClient"]
