# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Inbound warehouse line and its translated domain event."""

from __future__ import annotations

from typing import Any

from pydantic import ConfigDict, field_validator

from swifttrack_integration.enums import EnumWarehouseEventType
from swifttrack_integration.models.model_camel_base import ModelCamelBase


def _optional_id(value: Any) -> Any:
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    if value == "":
        return None
    return value


class ModelWarehouseEvent(ModelCamelBase):
    """One decoded JSON object received from the warehouse.

    All fields are optional; additional keys are kept so the original line
    can be forwarded as ``raw``.
    """

    model_config = ConfigDict(extra="allow")

    type: str | None = None
    package_id: str | None = None
    order_id: str | None = None
    request_id: str | None = None
    status: str | None = None
    data: Any = None

    @field_validator("package_id", "order_id", "request_id", mode="before")
    @classmethod
    def _normalize_ids(cls, value: Any) -> Any:
        return _optional_id(value)

    @property
    def kind(self) -> EnumWarehouseEventType | None:
        """Known event kind, or None for a type outside the mapping."""
        return EnumWarehouseEventType.parse(self.type) if self.type else None

    @property
    def is_command_result(self) -> bool:
        return self.type == "command_result"


class ModelWarehousePackageEvent(ModelCamelBase):
    """Translated ``wms.package.*`` payload published on the orders topic."""

    package_id: str | None
    order_id: str | None
    raw: dict[str, Any]
    timestamp: str


__all__: list[str] = ["ModelWarehouseEvent", "ModelWarehousePackageEvent"]
