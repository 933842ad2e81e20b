# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Broker topology: the topic names every adapter knows at startup."""

from __future__ import annotations

from typing import ClassVar

from pydantic import Field

from swifttrack_integration.models.config.model_env_config_base import (
    ModelEnvConfigBase,
)


class ModelTopologyConfig(ModelEnvConfigBase):
    """Stable topic identifiers, asserted idempotently on every connect."""

    ENV_VARS: ClassVar[dict[str, str]] = {
        "orders": "TOPIC_ORDERS",
        "users": "TOPIC_USERS",
        "logistics": "TOPIC_LOGISTICS",
        "notifications": "TOPIC_NOTIFICATIONS",
    }

    orders: str = Field(default="orders", pattern=r"^[a-zA-Z0-9._-]+$")
    users: str = Field(default="users", pattern=r"^[a-zA-Z0-9._-]+$")
    logistics: str = Field(default="logistics", pattern=r"^[a-zA-Z0-9._-]+$")
    notifications: str = Field(default="notifications", pattern=r"^[a-zA-Z0-9._-]+$")

    @property
    def all_topics(self) -> tuple[str, ...]:
        return (self.orders, self.users, self.logistics, self.notifications)


__all__ = ["ModelTopologyConfig"]
