# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""SOAP (billing) bridge configuration."""

from __future__ import annotations

from typing import ClassVar

from pydantic import Field

from swifttrack_integration.models.config.model_env_config_base import (
    ModelEnvConfigBase,
)


class ModelBillingBridgeConfig(ModelEnvConfigBase):
    """Settings for the billing SOAP bridge.

    Environment Variables:
        CMS_URL: SOAP endpoint (default: http://localhost:3006/soap)
        CMS_CLIENT_ID: Client id used when an order carries none
        CMS_TIMEOUT: Request timeout in ms (default: 5000)
        CMS_QUEUE_NAME: Broker queue for inbound order events
        CMS_CUSTOMER_QUEUE_NAME: Broker queue for inbound user events
    """

    ENV_VARS: ClassVar[dict[str, str]] = {
        "url": "CMS_URL",
        "client_id": "CMS_CLIENT_ID",
        "timeout_ms": "CMS_TIMEOUT",
        "queue_name": "CMS_QUEUE_NAME",
        "customer_queue_name": "CMS_CUSTOMER_QUEUE_NAME",
    }

    url: str = Field(default="http://localhost:3006/soap", min_length=1)
    client_id: str = Field(default="unknown", min_length=1)
    timeout_ms: int = Field(default=5000, ge=1)
    queue_name: str = Field(default="cms-adapter-q", min_length=1)
    customer_queue_name: str = Field(default="cms-customer-q", min_length=1)
    publish_topic: str = Field(default="orders", min_length=1)
    customer_topic: str = Field(default="users", min_length=1)
    availability_threshold: int = Field(default=1, ge=1)
    retry_interval_ms: int = Field(default=5000, ge=0)


__all__ = ["ModelBillingBridgeConfig"]
