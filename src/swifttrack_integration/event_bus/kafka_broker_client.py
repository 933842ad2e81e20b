# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Kafka-backed topic broker client.

Implements ProtocolBrokerClient on top of aiokafka, giving topic-exchange
semantics with durable, competing-consumer queues:

    Topic        Kafka topic, asserted through TopicProvisioner on every connect
    Routing key  Record key, repeated in the ``routing_key`` header
    Queue        Consumer group named after the queue, subscribed to every
                 topic the queue is bound to
    Binding      (topic, pattern) filter applied to each record; records that
                 match no binding are committed and skipped
    Ack          Commit of ``offset + 1`` (auto-commit disabled)
    Requeue      Seek back to the record offset after ``requeue_delay_ms``
    Drop         Ack plus a warning log line

Connection lifecycle follows MixinReconnectingConnection: any transport
error from the producer or a consumer loop moves the client to
DISCONNECTED and schedules a single reconnect after
``reconnect_interval_ms``. Every reconnect re-asserts topics, rebuilds
consumers and re-applies all recorded bindings.

Environment Variables:
    KAFKA_BOOTSTRAP_SERVERS: Broker addresses (default: localhost:9092)
    BROKER_RECONNECT_MS: Reconnect interval (default: 3000)
    BROKER_REQUEUE_DELAY_MS: Redelivery delay after requeue (default: 1000)
    BROKER_MAX_REDELIVERIES: Redelivery cap (default: unlimited)

Usage:
    ```python
    broker = KafkaBrokerClient.default()
    await broker.bind_queue("wms-adapter-q", "orders", "order.created")
    await broker.subscribe("wms-adapter-q", handler)
    await broker.connect()
    await broker.publish("orders", "wms.package.ack", {"orderId": "o-1"})
    ```
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections import defaultdict
from contextlib import suppress
from datetime import UTC, datetime
from pathlib import Path
from typing import Any
from uuid import UUID, uuid4

from aiokafka import AIOKafkaConsumer, AIOKafkaProducer, TopicPartition
from aiokafka.errors import KafkaError

from swifttrack_integration.enums import (
    EnumInfraTransportType,
    EnumMessageDisposition,
)
from swifttrack_integration.errors import (
    ExternalProtocolError,
    InfraConnectionError,
    ModelInfraErrorContext,
    ProtocolConfigurationError,
)
from swifttrack_integration.event_bus import topic_constants as constants
from swifttrack_integration.event_bus.models import (
    ModelBrokerMessage,
    ModelQueueBinding,
)
from swifttrack_integration.event_bus.protocol_broker_client import (
    BrokerMessageHandler,
    Unsubscribe,
)
from swifttrack_integration.event_bus.service_topic_manager import TopicProvisioner
from swifttrack_integration.event_bus.util_dispatch import dispatch_message
from swifttrack_integration.mixins import MixinReconnectingConnection
from swifttrack_integration.models.config import (
    ModelBrokerConfig,
    ModelIntegrationConfig,
    ModelTopologyConfig,
)
from swifttrack_integration.utils import (
    sanitize_error_message,
    validate_routing_key,
)

logger = logging.getLogger(__name__)


def _sanitize_bootstrap_servers(servers: str) -> str:
    """Strip ``user:pass@`` prefixes from a bootstrap server list."""
    if not servers:
        return "unknown"
    sanitized = []
    for server in (s.strip() for s in servers.split(",")):
        if "@" in server:
            server = server.split("@", 1)[1]
        sanitized.append(server)
    return ",".join(sanitized)


class KafkaBrokerClient(MixinReconnectingConnection):
    """Topic broker client over Kafka.

    Attributes:
        config: Broker connection settings
        topology: Topic names asserted on every connect
    """

    def __init__(
        self,
        config: ModelBrokerConfig | None = None,
        topology: ModelTopologyConfig | None = None,
        *,
        provisioner: TopicProvisioner | None = None,
    ) -> None:
        self.config = config or ModelBrokerConfig.from_env()
        self.topology = topology or ModelTopologyConfig.from_env()
        self._servers = _sanitize_bootstrap_servers(self.config.bootstrap_servers)
        self._provisioner = provisioner or TopicProvisioner(
            bootstrap_servers=self.config.bootstrap_servers,
            request_timeout_ms=int(self.config.timeout_seconds * 1000),
            partitions=self.config.topic_partitions,
            replication_factor=self.config.topic_replication_factor,
            client_id=f"{self.config.client_id}-admin",
        )

        self._known_topics: set[str] = set(self.topology.all_topics)
        self._bindings: dict[str, set[ModelQueueBinding]] = defaultdict(set)
        self._handlers: dict[str, BrokerMessageHandler] = {}

        self._producer: AIOKafkaProducer | None = None
        self._consumers: dict[str, AIOKafkaConsumer] = {}
        self._consumer_tasks: dict[str, asyncio.Task[None]] = {}
        # (queue, topic, partition, offset) -> next delivery count
        self._delivery_counts: dict[tuple[str, str, int, int], int] = {}
        self.topology_assertions = 0

        self._init_reconnect(
            service_name=f"kafka:{self._servers}",
            reconnect_interval=self.config.reconnect_interval_seconds,
            transport_type=EnumInfraTransportType.KAFKA,
        )

    # =========================================================================
    # Factory Methods
    # =========================================================================

    @classmethod
    def from_config(cls, config: ModelIntegrationConfig) -> KafkaBrokerClient:
        return cls(config=config.broker, topology=config.topology)

    @classmethod
    def from_yaml(cls, path: Path) -> KafkaBrokerClient:
        return cls.from_config(ModelIntegrationConfig.from_yaml(path))

    @classmethod
    def default(cls) -> KafkaBrokerClient:
        """Client with default settings and environment overrides."""
        return cls.from_config(ModelIntegrationConfig.default())

    # =========================================================================
    # Connection lifecycle
    # =========================================================================

    async def _open_transport(self) -> None:
        correlation_id = uuid4()
        await self._teardown_transport()

        summary = await self._provisioner.ensure_topics_exist(
            sorted(self._known_topics), correlation_id=correlation_id
        )
        if summary["status"] == "unavailable":
            raise InfraConnectionError(
                "Topic assertion failed, broker unreachable",
                context=self._context("connect", correlation_id),
                servers=self._servers,
            )
        if summary["failed"]:
            logger.warning(
                "Some topics could not be asserted",
                extra={
                    "failed": summary["failed"],
                    "correlation_id": str(correlation_id),
                },
            )
        self.topology_assertions += 1

        producer = AIOKafkaProducer(
            bootstrap_servers=self.config.bootstrap_servers,
            client_id=self.config.client_id,
            acks="all",
        )
        try:
            await asyncio.wait_for(producer.start(), timeout=self.config.timeout_seconds)
        except BaseException:
            await self._stop_quietly(producer, "producer")
            raise
        self._producer = producer

        for queue in list(self._handlers):
            await self._start_queue_consumer(queue)

        logger.info(
            "KafkaBrokerClient connected",
            extra={
                "servers": self._servers,
                "queues": sorted(self._handlers),
                "correlation_id": str(correlation_id),
            },
        )

    async def close(self) -> None:
        """Stop consumers and producer; no further reconnects. Safe to repeat."""
        await self._shutdown_reconnect()
        await self._teardown_transport()
        logger.info("KafkaBrokerClient closed", extra={"servers": self._servers})

    async def _teardown_transport(self) -> None:
        current = asyncio.current_task()
        for queue, task in list(self._consumer_tasks.items()):
            self._consumer_tasks.pop(queue, None)
            if task is not current and not task.done():
                task.cancel()
                with suppress(asyncio.CancelledError):
                    await task
        for queue, consumer in list(self._consumers.items()):
            self._consumers.pop(queue, None)
            await self._stop_quietly(consumer, f"consumer:{queue}")
        if self._producer is not None:
            producer, self._producer = self._producer, None
            await self._stop_quietly(producer, "producer")
        self._delivery_counts.clear()

    async def _stop_quietly(
        self, client: AIOKafkaProducer | AIOKafkaConsumer, name: str
    ) -> None:
        try:
            await client.stop()
        except Exception as e:
            logger.warning(
                f"Error stopping {name}: {type(e).__name__}",
                extra={"error": sanitize_error_message(e)},
            )

    # =========================================================================
    # Topology
    # =========================================================================

    async def bind_queue(self, queue: str, topic: str, routing_key: str) -> None:
        validate_routing_key(routing_key, allow_wildcards=True)
        binding = ModelQueueBinding(topic=topic, pattern=routing_key)
        if binding in self._bindings[queue]:
            return
        self._bindings[queue].add(binding)

        new_topic = topic not in self._known_topics
        self._known_topics.add(topic)
        if not self.is_connected:
            return
        if new_topic:
            await self._provisioner.ensure_topics_exist([topic])
        consumer = self._consumers.get(queue)
        if consumer is not None:
            consumer.subscribe(topics=self._queue_topics(queue))
        elif queue in self._handlers:
            await self._start_queue_consumer(queue)

    def _queue_topics(self, queue: str) -> list[str]:
        return sorted({b.topic for b in self._bindings.get(queue, set())})

    def _binding_matches(self, queue: str, topic: str, routing_key: str) -> bool:
        return any(b.matches(topic, routing_key) for b in self._bindings.get(queue, ()))

    # =========================================================================
    # Publish
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
        """Publish ``payload`` under ``routing_key``; best-effort.

        Returns:
            True once the broker acknowledged the record. False, with a
            warning logged, when not connected or when the send failed.
        """
        validate_routing_key(routing_key, correlation_id=correlation_id)
        producer = self._producer
        if not self.is_connected or producer is None:
            logger.warning(
                f"Broker not connected, dropping publish of {routing_key}",
                extra={"topic": topic, "routing_key": routing_key},
            )
            return False
        if topic not in self._known_topics:
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
        try:
            await asyncio.wait_for(
                producer.send_and_wait(
                    topic,
                    value=json.dumps(payload, default=str).encode("utf-8"),
                    key=routing_key.encode("utf-8"),
                    headers=self._message_headers(message),
                ),
                timeout=self.config.timeout_seconds,
            )
        except (KafkaError, TimeoutError) as e:
            logger.warning(
                f"Publish of {routing_key} failed, dropping",
                extra={
                    "topic": topic,
                    "routing_key": routing_key,
                    "correlation_id": str(message.correlation_id),
                    "error": sanitize_error_message(e),
                },
            )
            self._handle_connection_lost(e)
            return False
        return True

    @staticmethod
    def _message_headers(message: ModelBrokerMessage) -> list[tuple[str, bytes]]:
        return [
            (constants.HEADER_ROUTING_KEY, message.routing_key.encode("utf-8")),
            (constants.HEADER_MESSAGE_ID, str(message.message_id).encode("utf-8")),
            (constants.HEADER_CORRELATION_ID, str(message.correlation_id).encode("utf-8")),
            (constants.HEADER_PERSISTENT, b"1" if message.persistent else b"0"),
            (constants.HEADER_TIMESTAMP, message.timestamp.isoformat().encode("utf-8")),
        ]

    # =========================================================================
    # Subscribe / consume
    # =========================================================================

    async def subscribe(self, queue: str, handler: BrokerMessageHandler) -> Unsubscribe:
        """Register ``handler`` as this client's consumer of ``queue``.

        Raises:
            ProtocolConfigurationError: The queue already has a handler in
                this client. Run another client instance to add a competing
                consumer.
        """
        if queue in self._handlers:
            raise ProtocolConfigurationError(
                f"Queue {queue} already has a subscriber in this client",
                context=self._context("subscribe"),
            )
        self._handlers[queue] = handler
        if self.is_connected:
            await self._start_queue_consumer(queue)

        async def unsubscribe() -> None:
            if self._handlers.get(queue) is handler:
                del self._handlers[queue]
                await self._stop_queue_consumer(queue)

        return unsubscribe

    async def _start_queue_consumer(self, queue: str) -> None:
        topics = self._queue_topics(queue)
        if queue in self._consumers or not topics:
            return

        consumer = AIOKafkaConsumer(
            *topics,
            bootstrap_servers=self.config.bootstrap_servers,
            client_id=self.config.client_id,
            group_id=queue,
            enable_auto_commit=False,
            auto_offset_reset=self.config.auto_offset_reset,
        )
        try:
            await asyncio.wait_for(consumer.start(), timeout=self.config.timeout_seconds)
        except BaseException:
            await self._stop_quietly(consumer, f"consumer:{queue}")
            raise

        self._consumers[queue] = consumer
        self._consumer_tasks[queue] = asyncio.create_task(
            self._consume_loop(queue, consumer)
        )
        logger.info(
            f"Started consumer for queue {queue}",
            extra={"queue": queue, "topics": topics, "servers": self._servers},
        )

    async def _stop_queue_consumer(self, queue: str) -> None:
        task = self._consumer_tasks.pop(queue, None)
        if task is not None and not task.done():
            task.cancel()
            with suppress(asyncio.CancelledError):
                await task
        consumer = self._consumers.pop(queue, None)
        if consumer is not None:
            await self._stop_quietly(consumer, f"consumer:{queue}")

    async def _consume_loop(self, queue: str, consumer: AIOKafkaConsumer) -> None:
        try:
            async for record in consumer:
                await self._handle_record(queue, consumer, record)
        except asyncio.CancelledError:
            logger.debug(f"Consumer loop cancelled for queue {queue}")
            raise
        except Exception as e:
            logger.warning(
                f"Consumer loop for queue {queue} failed",
                extra={
                    "queue": queue,
                    "error": sanitize_error_message(e),
                    "error_type": type(e).__name__,
                },
            )
            self._handle_connection_lost(e)

    async def _handle_record(
        self, queue: str, consumer: AIOKafkaConsumer, record: Any
    ) -> None:
        routing_key = self._record_routing_key(record)
        if routing_key is None or not self._binding_matches(
            queue, record.topic, routing_key
        ):
            await self._commit(consumer, record)
            return

        count_key = (queue, record.topic, record.partition, record.offset)
        try:
            message = self._record_to_message(
                record, routing_key, self._delivery_counts.get(count_key, 1)
            )
        except ExternalProtocolError as e:
            logger.warning(
                f"Malformed message on {queue}, dropping",
                extra={"queue": queue, "routing_key": routing_key, **e.to_log_extra()},
            )
            await self._commit(consumer, record)
            return

        handler = self._handlers.get(queue)
        if handler is None:
            return

        disposition = await dispatch_message(
            handler,
            message,
            queue=queue,
            max_redeliveries=self.config.max_redeliveries,
        )
        if disposition is EnumMessageDisposition.REQUEUE:
            self._delivery_counts[count_key] = message.delivery_count + 1
            if self.config.requeue_delay_seconds:
                await asyncio.sleep(self.config.requeue_delay_seconds)
            consumer.seek(TopicPartition(record.topic, record.partition), record.offset)
            return

        self._delivery_counts.pop(count_key, None)
        await self._commit(consumer, record)

    async def _commit(self, consumer: AIOKafkaConsumer, record: Any) -> None:
        try:
            await consumer.commit(
                {TopicPartition(record.topic, record.partition): record.offset + 1}
            )
        except KafkaError as e:
            # Uncommitted records are redelivered after rebalance.
            logger.warning(
                "Offset commit failed",
                extra={
                    "topic": record.topic,
                    "partition": record.partition,
                    "offset": record.offset,
                    "error": sanitize_error_message(e),
                },
            )

    @staticmethod
    def _header_map(record: Any) -> dict[str, bytes]:
        return {key: value for key, value in (record.headers or ()) if value is not None}

    def _record_routing_key(self, record: Any) -> str | None:
        raw = self._header_map(record).get(constants.HEADER_ROUTING_KEY) or record.key
        if not raw:
            return None
        return raw.decode("utf-8", errors="replace")

    def _record_to_message(
        self, record: Any, routing_key: str, delivery_count: int
    ) -> ModelBrokerMessage:
        try:
            payload = json.loads(record.value)
        except (TypeError, ValueError) as e:
            raise ExternalProtocolError(
                "Message body is not valid JSON",
                context=self._context("consume"),
                topic=record.topic,
            ) from e
        if not isinstance(payload, dict):
            raise ExternalProtocolError(
                "Message body is not a JSON object",
                context=self._context("consume"),
                topic=record.topic,
            )

        meta = self._header_map(record)
        fields: dict[str, Any] = {
            "topic": record.topic,
            "routing_key": routing_key,
            "payload": payload,
            "persistent": meta.get(constants.HEADER_PERSISTENT, b"1") != b"0",
            "delivery_count": delivery_count,
        }
        for name in (constants.HEADER_MESSAGE_ID, constants.HEADER_CORRELATION_ID):
            raw = meta.get(name)
            if raw:
                try:
                    fields[name] = UUID(raw.decode("utf-8"))
                except ValueError:
                    pass  # Foreign producer; a fresh id is generated.
        raw_ts = meta.get(constants.HEADER_TIMESTAMP)
        if raw_ts:
            try:
                fields["timestamp"] = datetime.fromisoformat(raw_ts.decode("utf-8"))
            except ValueError:
                pass
        if "timestamp" not in fields and record.timestamp:
            fields["timestamp"] = datetime.fromtimestamp(record.timestamp / 1000, UTC)
        return ModelBrokerMessage(**fields)

    # =========================================================================
    # Health
    # =========================================================================

    async def health_check(self) -> dict[str, object]:
        return {
            "healthy": self.is_connected and self._producer is not None,
            "state": self.connection_state.value,
            "bootstrap_servers": self._servers,
            "topic_count": len(self._known_topics),
            "queue_count": len(self._bindings),
            "consumer_count": len(self._consumers),
            "reconnect_pending": self.reconnect_pending,
            "reconnect_attempts": self.reconnect_attempts,
        }

    def _context(
        self, operation: str, correlation_id: UUID | None = None
    ) -> ModelInfraErrorContext:
        return ModelInfraErrorContext.with_correlation(
            correlation_id=correlation_id,
            transport_type=EnumInfraTransportType.KAFKA,
            operation=operation,
            target_name=f"kafka:{self._servers}",
        )


__all__: list[str] = ["KafkaBrokerClient"]
