# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Warehouse line-protocol event kinds and their outbound routing keys."""

from __future__ import annotations

from enum import Enum


class EnumWarehouseEventType(str, Enum):
    """Known event types emitted by the warehouse system.

    Each member carries the routing key its translated domain event is
    published under. Event types outside this enum are not dropped; they
    are routed under a derived default key instead (see
    ``WarehouseLineBridge.routing_key_for``).
    """

    ACK = "ack"
    PACKAGE_RECEIVED = "package_received"
    PACKAGE_READY = "package_ready"
    PACKAGE_SCANNED = "package_scanned"
    PACKAGE_LOADED = "package_loaded"
    ERROR = "error"

    @property
    def routing_key(self) -> str:
        return _ROUTING_KEYS[self]

    @classmethod
    def parse(cls, value: str) -> EnumWarehouseEventType | None:
        """Return the matching member, or None for an unknown type string."""
        try:
            return cls(value)
        except ValueError:
            return None


_ROUTING_KEYS: dict[EnumWarehouseEventType, str] = {
    EnumWarehouseEventType.ACK: "wms.package.ack",
    EnumWarehouseEventType.PACKAGE_RECEIVED: "wms.package.received",
    EnumWarehouseEventType.PACKAGE_READY: "wms.package.ready",
    EnumWarehouseEventType.PACKAGE_SCANNED: "wms.package.scanned",
    EnumWarehouseEventType.PACKAGE_LOADED: "wms.package.loaded",
    EnumWarehouseEventType.ERROR: "wms.package.error",
}


__all__ = ["EnumWarehouseEventType"]
