# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Unit tests for KafkaBrokerClient with aiokafka mocked out."""

from __future__ import annotations

import json
from collections.abc import AsyncGenerator
from types import SimpleNamespace
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest
from aiokafka import TopicPartition
from aiokafka.errors import KafkaConnectionError

from swifttrack_integration.enums import EnumConnectionState, EnumMessageDisposition
from swifttrack_integration.errors import ProtocolConfigurationError
from swifttrack_integration.event_bus import KafkaBrokerClient, ModelBrokerMessage
from swifttrack_integration.models.config import (
    ModelBrokerConfig,
    ModelIntegrationConfig,
)

_MODULE = "swifttrack_integration.event_bus.kafka_broker_client"


def _summary(status: str = "success") -> dict[str, Any]:
    return {"created": [], "existing": ["orders"], "failed": [], "status": status}


def _record(
    value: bytes,
    routing_key: str = "order.created",
    *,
    topic: str = "orders",
    offset: int = 7,
    headers: list[tuple[str, bytes]] | None = None,
) -> SimpleNamespace:
    return SimpleNamespace(
        topic=topic,
        partition=0,
        offset=offset,
        key=routing_key.encode("utf-8"),
        value=value,
        timestamp=1_700_000_000_000,
        headers=headers or [],
    )


@pytest.fixture
def provisioner() -> MagicMock:
    mock = MagicMock()
    mock.ensure_topics_exist = AsyncMock(return_value=_summary())
    return mock


@pytest.fixture
def producer() -> MagicMock:
    mock = MagicMock()
    mock.start = AsyncMock()
    mock.stop = AsyncMock()
    mock.send_and_wait = AsyncMock()
    return mock


@pytest.fixture
async def client(
    provisioner: MagicMock, producer: MagicMock
) -> AsyncGenerator[KafkaBrokerClient, None]:
    kafka = KafkaBrokerClient(
        ModelBrokerConfig(reconnect_interval_ms=10_000, requeue_delay_ms=0),
        provisioner=provisioner,
    )
    with patch(f"{_MODULE}.AIOKafkaProducer", return_value=producer):
        yield kafka
        await kafka.close()


class TestConnect:
    """Connection lifecycle."""

    @pytest.mark.asyncio
    async def test_connect_asserts_topics_and_starts_producer(
        self, client: KafkaBrokerClient, provisioner: MagicMock, producer: MagicMock
    ) -> None:
        """Test connect provisions topics then starts the producer."""
        assert await client.connect() is True
        assert client.connection_state is EnumConnectionState.CONNECTED
        assert client.topology_assertions == 1
        topics = provisioner.ensure_topics_exist.await_args.args[0]
        assert topics == ["logistics", "notifications", "orders", "users"]
        producer.start.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_unreachable_broker_schedules_reconnect(
        self, client: KafkaBrokerClient, provisioner: MagicMock
    ) -> None:
        """Test an unavailable provisioning summary fails the connect."""
        provisioner.ensure_topics_exist.return_value = _summary("unavailable")
        assert await client.connect() is False
        assert client.connection_state is EnumConnectionState.DISCONNECTED
        assert client.reconnect_pending is True

    @pytest.mark.asyncio
    async def test_close_is_idempotent(
        self, client: KafkaBrokerClient, producer: MagicMock
    ) -> None:
        """Test repeated close stops the producer once."""
        await client.connect()
        await client.close()
        await client.close()
        producer.stop.assert_awaited_once()
        assert (await client.health_check())["healthy"] is False

    def test_from_config(self) -> None:
        """Test factory wiring from the integration config."""
        config = ModelIntegrationConfig.from_mapping(
            {"broker": {"bootstrap_servers": "user:pw@kafka:9092"}}
        )
        kafka = KafkaBrokerClient.from_config(config)
        assert kafka.config.bootstrap_servers == "user:pw@kafka:9092"
        assert kafka._servers == "kafka:9092"


class TestPublish:
    """Best-effort publishing."""

    @pytest.mark.asyncio
    async def test_publish_sends_record_with_headers(
        self, client: KafkaBrokerClient, producer: MagicMock
    ) -> None:
        """Test body, key and metadata headers of a published record."""
        await client.connect()
        correlation_id = uuid4()
        ok = await client.publish(
            "orders",
            "wms.package.ack",
            {"orderId": "o123"},
            persistent=False,
            correlation_id=correlation_id,
        )
        assert ok is True
        call = producer.send_and_wait.await_args
        assert call.args[0] == "orders"
        assert json.loads(call.kwargs["value"]) == {"orderId": "o123"}
        assert call.kwargs["key"] == b"wms.package.ack"
        headers = dict(call.kwargs["headers"])
        assert headers["persistent"] == b"0"
        assert headers["correlation_id"] == str(correlation_id).encode()
        assert headers["routing_key"] == b"wms.package.ack"

    @pytest.mark.asyncio
    async def test_publish_when_disconnected(
        self, client: KafkaBrokerClient, producer: MagicMock
    ) -> None:
        """Test publish returns False without touching the producer."""
        assert await client.publish("orders", "order.created", {}) is False
        producer.send_and_wait.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_publish_to_unknown_topic(self, client: KafkaBrokerClient) -> None:
        """Test unknown topics are rejected."""
        await client.connect()
        assert await client.publish("nope", "order.created", {}) is False

    @pytest.mark.asyncio
    async def test_send_failure_drops_connection(
        self, client: KafkaBrokerClient, producer: MagicMock
    ) -> None:
        """Test a broker error returns False and schedules a reconnect."""
        await client.connect()
        producer.send_and_wait.side_effect = KafkaConnectionError()
        assert await client.publish("orders", "order.created", {}) is False
        assert client.connection_state is EnumConnectionState.DISCONNECTED
        assert client.reconnect_pending is True


class TestSubscribe:
    """Queue consumers."""

    @pytest.mark.asyncio
    async def test_duplicate_subscriber_rejected(
        self, client: KafkaBrokerClient
    ) -> None:
        """Test a second handler on one queue is a configuration error."""
        handler = AsyncMock(return_value=EnumMessageDisposition.ACK)
        await client.subscribe("q", handler)
        with pytest.raises(ProtocolConfigurationError):
            await client.subscribe("q", handler)

    @pytest.mark.asyncio
    async def test_consumer_started_as_queue_group(
        self, client: KafkaBrokerClient
    ) -> None:
        """Test each queue becomes a consumer group over its bound topics."""
        consumer = MagicMock()
        consumer.start = AsyncMock()
        consumer.stop = AsyncMock()
        consumer.__aiter__.return_value = []
        handler = AsyncMock(return_value=EnumMessageDisposition.ACK)

        await client.bind_queue("wms-adapter-q", "orders", "order.created")
        await client.subscribe("wms-adapter-q", handler)
        with patch(f"{_MODULE}.AIOKafkaConsumer", return_value=consumer) as factory:
            await client.connect()

        assert factory.call_args.args == ("orders",)
        assert factory.call_args.kwargs["group_id"] == "wms-adapter-q"
        assert factory.call_args.kwargs["enable_auto_commit"] is False
        consumer.start.assert_awaited_once()


class TestRecordHandling:
    """Per-record disposition handling."""

    @pytest.fixture
    def consumer(self) -> MagicMock:
        mock = MagicMock()
        mock.commit = AsyncMock()
        return mock

    @pytest.mark.asyncio
    async def test_ack_commits_next_offset(
        self, client: KafkaBrokerClient, consumer: MagicMock
    ) -> None:
        """Test ACK commits offset + 1 and the handler sees the payload."""
        received: list[ModelBrokerMessage] = []

        async def handler(message: ModelBrokerMessage) -> EnumMessageDisposition:
            received.append(message)
            return EnumMessageDisposition.ACK

        correlation_id = uuid4()
        await client.bind_queue("q", "orders", "order.created")
        await client.subscribe("q", handler)
        await client._handle_record(
            "q",
            consumer,
            _record(
                b'{"orderId": "o123"}',
                headers=[
                    ("correlation_id", str(correlation_id).encode()),
                    ("persistent", b"0"),
                ],
            ),
        )

        assert received[0].payload == {"orderId": "o123"}
        assert received[0].correlation_id == correlation_id
        assert received[0].persistent is False
        consumer.commit.assert_awaited_once_with({TopicPartition("orders", 0): 8})

    @pytest.mark.asyncio
    async def test_unbound_routing_key_is_skipped(
        self, client: KafkaBrokerClient, consumer: MagicMock
    ) -> None:
        """Test records outside the queue's bindings are committed unseen."""
        handler = AsyncMock(return_value=EnumMessageDisposition.ACK)
        await client.bind_queue("q", "orders", "order.created")
        await client.subscribe("q", handler)
        await client._handle_record("q", consumer, _record(b"{}", "billing.order.created"))
        handler.assert_not_awaited()
        consumer.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_requeue_seeks_back(
        self, client: KafkaBrokerClient, consumer: MagicMock
    ) -> None:
        """Test REQUEUE seeks to the record and counts the redelivery."""
        seen: list[int] = []

        async def handler(message: ModelBrokerMessage) -> EnumMessageDisposition:
            seen.append(message.delivery_count)
            return EnumMessageDisposition.REQUEUE

        await client.bind_queue("q", "orders", "order.*")
        await client.subscribe("q", handler)
        record = _record(b"{}")
        await client._handle_record("q", consumer, record)
        await client._handle_record("q", consumer, record)

        assert seen == [1, 2]
        consumer.seek.assert_called_with(TopicPartition("orders", 0), 7)
        consumer.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_malformed_body_is_dropped(
        self, client: KafkaBrokerClient, consumer: MagicMock
    ) -> None:
        """Test a non-JSON body is committed without reaching the handler."""
        handler = AsyncMock(return_value=EnumMessageDisposition.ACK)
        await client.bind_queue("q", "orders", "#")
        await client.subscribe("q", handler)
        await client._handle_record("q", consumer, _record(b"not json"))
        await client._handle_record("q", consumer, _record(b"[1, 2]", offset=8))
        handler.assert_not_awaited()
        assert consumer.commit.await_count == 2
