# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Topic broker clients.

Exports:
    ProtocolBrokerClient: Contract used by the adapter runtime
    KafkaBrokerClient: aiokafka implementation
    InMemoryBrokerClient: In-process implementation for development and tests
    TopicProvisioner: Idempotent topic assertion via the Kafka admin client
"""

from swifttrack_integration.event_bus.inmemory_broker_client import (
    InMemoryBrokerClient,
)
from swifttrack_integration.event_bus.kafka_broker_client import KafkaBrokerClient
from swifttrack_integration.event_bus.models import (
    ModelBrokerMessage,
    ModelQueueBinding,
)
from swifttrack_integration.event_bus.protocol_broker_client import (
    BrokerMessageHandler,
    ProtocolBrokerClient,
    Unsubscribe,
)
from swifttrack_integration.event_bus.service_topic_manager import TopicProvisioner

__all__: list[str] = [
    "BrokerMessageHandler",
    "InMemoryBrokerClient",
    "KafkaBrokerClient",
    "ModelBrokerMessage",
    "ModelQueueBinding",
    "ProtocolBrokerClient",
    "TopicProvisioner",
    "Unsubscribe",
]
