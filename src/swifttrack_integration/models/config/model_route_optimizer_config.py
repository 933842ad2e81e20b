# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""REST (route optimizer) bridge configuration."""

from __future__ import annotations

from typing import ClassVar

from pydantic import Field, SecretStr

from swifttrack_integration.enums import EnumOptimizerFallbackMode
from swifttrack_integration.models.config.model_env_config_base import (
    ModelEnvConfigBase,
)


class ModelRouteOptimizerConfig(ModelEnvConfigBase):
    """Settings for the route optimizer REST bridge.

    Environment Variables:
        ROS_API_URL: Optimizer base URL
        ROS_API_KEY: Bearer credential; absent means "not configured"
        ROS_TIMEOUT: Request timeout in ms (default: 45000)
        ROS_FALLBACK_MODE: ``local`` (tolerant, default) or ``strict``
        ROS_QUEUE_NAME: Broker queue for inbound routing requests
    """

    ENV_VARS: ClassVar[dict[str, str]] = {
        "base_url": "ROS_API_URL",
        "api_key": "ROS_API_KEY",
        "timeout_ms": "ROS_TIMEOUT",
        "fallback_mode": "ROS_FALLBACK_MODE",
        "queue_name": "ROS_QUEUE_NAME",
    }

    base_url: str = Field(default="https://api.routeoptimizer.com/v1", min_length=1)
    api_key: SecretStr | None = None
    timeout_ms: int = Field(default=45_000, ge=1)
    fallback_mode: EnumOptimizerFallbackMode = EnumOptimizerFallbackMode.LOCAL
    queue_name: str = Field(default="ros-adapter-q", min_length=1)
    publish_topic: str = Field(default="logistics", min_length=1)
    availability_threshold: int = Field(default=1, ge=1)
    retry_interval_ms: int = Field(default=5000, ge=0)

    @property
    def is_configured(self) -> bool:
        return self.api_key is not None and bool(self.api_key.get_secret_value())


__all__ = ["ModelRouteOptimizerConfig"]
