# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Payload of the ``order.created`` domain event."""

from __future__ import annotations

from typing import Any

from pydantic import Field, field_validator

from swifttrack_integration.models.model_camel_base import ModelCamelBase
from swifttrack_integration.models.orders.model_order_item import ModelOrderItem


def _address_text(value: Any) -> Any:
    if isinstance(value, dict):
        if "address" in value:
            return str(value["address"])
        return ", ".join(str(v) for v in value.values() if v is not None)
    return value


class ModelOrderCreatedEvent(ModelCamelBase):
    """An order entering the lifecycle.

    ``order_id`` is the only required field; everything else is forwarded
    to the external systems when present.
    """

    order_id: str = Field(min_length=1)
    client_id: str | None = None
    client_order_ref: str | None = None
    items: list[ModelOrderItem] = Field(default_factory=list)
    pickup: str | None = None
    delivery: str | None = None
    contact: str | None = None

    @field_validator("order_id", "client_id", "client_order_ref", mode="before")
    @classmethod
    def _stringify_ids(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("pickup", "delivery", "contact", mode="before")
    @classmethod
    def _flatten_address(cls, value: Any) -> Any:
        return _address_text(value)

    @property
    def reference(self) -> str:
        return self.client_order_ref or self.order_id


__all__: list[str] = ["ModelOrderCreatedEvent"]
