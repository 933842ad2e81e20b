# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Line-protocol (warehouse) bridge configuration."""

from __future__ import annotations

import secrets
from typing import ClassVar

from pydantic import Field

from swifttrack_integration.models.config.model_env_config_base import (
    ModelEnvConfigBase,
)


def _generate_adapter_id() -> str:
    return f"wms-adp-{secrets.token_hex(3)}"


class ModelWarehouseBridgeConfig(ModelEnvConfigBase):
    """Settings for the TCP line-protocol bridge.

    Environment Variables:
        WMS_HOST / WMS_PORT: Warehouse TCP endpoint (default: 127.0.0.1:3008)
        ADAPTER_ID: Identity announced in the registration handshake
        WMS_RECONNECT_INTERVAL: Fixed reconnect interval in ms (default: 5000)
        WMS_TIMEOUT: Pending command timeout in ms (default: 30000)
        WMS_QUEUE_NAME: Broker queue for inbound order events
    """

    ENV_VARS: ClassVar[dict[str, str]] = {
        "host": "WMS_HOST",
        "port": "WMS_PORT",
        "adapter_id": "ADAPTER_ID",
        "reconnect_interval_ms": "WMS_RECONNECT_INTERVAL",
        "request_timeout_ms": "WMS_TIMEOUT",
        "queue_name": "WMS_QUEUE_NAME",
    }

    host: str = Field(default="127.0.0.1", min_length=1)
    port: int = Field(default=3008, ge=1, le=65535)
    adapter_id: str = Field(default_factory=_generate_adapter_id, min_length=1)
    capabilities: tuple[str, ...] = ("receive", "scan", "load")
    reconnect_interval_ms: int = Field(default=5000, ge=0, le=600_000)
    request_timeout_ms: int = Field(default=30_000, ge=1)
    connect_timeout_ms: int = Field(default=5000, ge=1)
    max_line_bytes: int = Field(default=1024 * 1024, ge=1024)
    queue_name: str = Field(default="wms-adapter-q", min_length=1)
    publish_topic: str = Field(default="orders", min_length=1)
    unknown_event_prefix: str = Field(
        default="external.package",
        min_length=1,
        description="Routing key prefix for warehouse event types with no mapping",
    )

    @property
    def target_name(self) -> str:
        return f"wms:{self.host}:{self.port}"


__all__ = ["ModelWarehouseBridgeConfig"]
