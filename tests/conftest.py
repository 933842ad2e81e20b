# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Pytest configuration and shared fixtures for swifttrack_integration tests."""

from __future__ import annotations

from collections.abc import AsyncGenerator

import pytest

from swifttrack_integration.correlation import InMemoryCorrelationStore
from swifttrack_integration.event_bus import InMemoryBrokerClient
from swifttrack_integration.models.config import (
    ModelBillingBridgeConfig,
    ModelBrokerConfig,
    ModelIntegrationConfig,
    ModelRouteOptimizerConfig,
    ModelTopologyConfig,
    ModelWarehouseBridgeConfig,
)
from tests.helpers import FakeWarehouse

_CONFIG_SECTIONS = (
    ModelBrokerConfig,
    ModelTopologyConfig,
    ModelWarehouseBridgeConfig,
    ModelBillingBridgeConfig,
    ModelRouteOptimizerConfig,
)


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove every configuration variable so host settings never leak in."""
    for section in _CONFIG_SECTIONS:
        for env_var in section.ENV_VARS.values():
            monkeypatch.delenv(env_var, raising=False)
    monkeypatch.delenv("INTEGRATION_LOG_LEVEL", raising=False)


@pytest.fixture
def integration_config() -> ModelIntegrationConfig:
    """Defaults with fast timers for tests."""
    return ModelIntegrationConfig.from_mapping(
        {
            "broker": {"reconnect_interval_ms": 10, "requeue_delay_ms": 0},
            "warehouse": {
                "adapter_id": "wms-adp-test",
                "reconnect_interval_ms": 20,
                "request_timeout_ms": 500,
                "max_line_bytes": 4096,
            },
        }
    )


@pytest.fixture
def correlation_store() -> InMemoryCorrelationStore:
    return InMemoryCorrelationStore()


@pytest.fixture
async def broker(
    integration_config: ModelIntegrationConfig,
) -> AsyncGenerator[InMemoryBrokerClient, None]:
    """Connected in-memory broker with the default topology declared."""
    client = InMemoryBrokerClient.from_config(integration_config)
    await client.connect()
    yield client
    await client.close()


@pytest.fixture
async def warehouse() -> AsyncGenerator[FakeWarehouse, None]:
    """Loopback warehouse server on an ephemeral port."""
    server = FakeWarehouse()
    await server.start()
    yield server
    await server.stop()
