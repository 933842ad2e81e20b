# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Outbound line-protocol messages sent to the warehouse system."""

from __future__ import annotations

from typing import Any, Literal
from uuid import uuid4

from pydantic import Field

from swifttrack_integration.enums import EnumWarehouseCommand
from swifttrack_integration.models.model_camel_base import ModelCamelBase


class ModelRegisterAdapter(ModelCamelBase):
    """Registration handshake written once per connection."""

    type: Literal["register_adapter"] = "register_adapter"
    adapter_id: str
    capabilities: list[str] = Field(default_factory=list)


class ModelCallbackMeta(ModelCamelBase):
    correlation_id: str


class ModelReceivePackage(ModelCamelBase):
    """Order hand-off; ``client_order_ref`` echoes the internal order id."""

    type: Literal["receive_package"] = "receive_package"
    order_id: str
    client_order_ref: str
    items: list[dict[str, Any]] = Field(default_factory=list)
    pickup: str | None = None
    delivery: str | None = None
    contact: str | None = None
    callback_meta: ModelCallbackMeta


class ModelWarehouseCommand(ModelCamelBase):
    """Request/response command; answered by a ``command_result`` line."""

    type: Literal["command"] = "command"
    request_id: str = Field(default_factory=lambda: str(uuid4()))
    command: EnumWarehouseCommand
    data: dict[str, Any] = Field(default_factory=dict)


__all__: list[str] = [
    "ModelCallbackMeta",
    "ModelReceivePackage",
    "ModelRegisterAdapter",
    "ModelWarehouseCommand",
]
