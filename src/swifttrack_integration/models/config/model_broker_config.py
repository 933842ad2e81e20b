# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Broker client configuration."""

from __future__ import annotations

from typing import ClassVar, Literal

from pydantic import Field

from swifttrack_integration.models.config.model_env_config_base import (
    ModelEnvConfigBase,
)


class ModelBrokerConfig(ModelEnvConfigBase):
    """Connection and redelivery settings for the broker client.

    Environment Variables:
        KAFKA_BOOTSTRAP_SERVERS: Broker addresses (default: localhost:9092)
        KAFKA_CLIENT_ID: Client identifier (default: swifttrack-integration)
        BROKER_RECONNECT_MS: Fixed reconnect interval (default: 3000)
        BROKER_TIMEOUT_SECONDS: Transport operation timeout (default: 30)
        BROKER_REQUEUE_DELAY_MS: Delay before a requeued message is redelivered
        BROKER_MAX_REDELIVERIES: Redelivery cap; unset means unlimited
    """

    ENV_VARS: ClassVar[dict[str, str]] = {
        "bootstrap_servers": "KAFKA_BOOTSTRAP_SERVERS",
        "client_id": "KAFKA_CLIENT_ID",
        "reconnect_interval_ms": "BROKER_RECONNECT_MS",
        "timeout_seconds": "BROKER_TIMEOUT_SECONDS",
        "requeue_delay_ms": "BROKER_REQUEUE_DELAY_MS",
        "max_redeliveries": "BROKER_MAX_REDELIVERIES",
    }

    bootstrap_servers: str = Field(
        default="localhost:9092",
        min_length=1,
        description="Comma-separated broker addresses",
    )
    client_id: str = Field(default="swifttrack-integration", min_length=1)
    reconnect_interval_ms: int = Field(default=3000, ge=0, le=600_000)
    timeout_seconds: float = Field(default=30.0, gt=0, le=600)
    requeue_delay_ms: int = Field(
        default=1000,
        ge=0,
        le=600_000,
        description="Delay before a negatively-acknowledged message is redelivered",
    )
    max_redeliveries: int | None = Field(
        default=None,
        ge=1,
        description="Redeliveries allowed before a requeue becomes a drop",
    )
    auto_offset_reset: Literal["earliest", "latest"] = Field(
        default="earliest",
        description="Start position for a queue consumer group with no committed offset",
    )
    topic_partitions: int = Field(default=3, ge=1)
    topic_replication_factor: int = Field(default=1, ge=1)

    @property
    def reconnect_interval_seconds(self) -> float:
        return self.reconnect_interval_ms / 1000

    @property
    def requeue_delay_seconds(self) -> float:
        return self.requeue_delay_ms / 1000


__all__ = ["ModelBrokerConfig"]
