# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Unit tests for warehouse event kinds and their routing keys."""

import pytest

from swifttrack_integration.enums import EnumWarehouseCommand, EnumWarehouseEventType


class TestEnumWarehouseEventType:
    """Known kinds map to fixed routing keys."""

    @pytest.mark.parametrize(
        ("event_type", "routing_key"),
        [
            (EnumWarehouseEventType.ACK, "wms.package.ack"),
            (EnumWarehouseEventType.PACKAGE_RECEIVED, "wms.package.received"),
            (EnumWarehouseEventType.PACKAGE_READY, "wms.package.ready"),
            (EnumWarehouseEventType.PACKAGE_SCANNED, "wms.package.scanned"),
            (EnumWarehouseEventType.PACKAGE_LOADED, "wms.package.loaded"),
            (EnumWarehouseEventType.ERROR, "wms.package.error"),
        ],
    )
    def test_routing_keys(
        self, event_type: EnumWarehouseEventType, routing_key: str
    ) -> None:
        """Test each known kind's routing key."""
        assert event_type.routing_key == routing_key

    def test_parse_known(self) -> None:
        """Test parse returns the member for a known string."""
        assert EnumWarehouseEventType.parse("package_ready") is (
            EnumWarehouseEventType.PACKAGE_READY
        )

    def test_parse_unknown(self) -> None:
        """Test parse returns None for an unknown string."""
        assert EnumWarehouseEventType.parse("package_teleported") is None


class TestEnumWarehouseCommand:
    """Command codes on the wire."""

    def test_wire_codes(self) -> None:
        """Test the short wire codes."""
        assert EnumWarehouseCommand.CHECK_INVENTORY.value == "INV_CHK"
        assert EnumWarehouseCommand.CREATE_SHIPMENT.value == "CRT_SHP"
        assert EnumWarehouseCommand("PING") is EnumWarehouseCommand.PING
