# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Enumerations for the SwiftTrack integration layer.

Exports:
    EnumConnectionState: Broker/bridge connection lifecycle state
    EnumErrorCode: Error classification codes
    EnumInfraTransportType: Transport type identifiers for error context
    EnumMessageDisposition: Broker handler outcome (ack, drop, requeue)
    EnumOptimizerFallbackMode: Route optimizer tolerant/strict selection
    EnumWarehouseCommand: Warehouse request/response command codes
    EnumWarehouseEventType: Known warehouse event kinds
"""

from swifttrack_integration.enums.enum_connection_state import EnumConnectionState
from swifttrack_integration.enums.enum_error_code import EnumErrorCode
from swifttrack_integration.enums.enum_infra_transport_type import (
    EnumInfraTransportType,
)
from swifttrack_integration.enums.enum_message_disposition import (
    EnumMessageDisposition,
)
from swifttrack_integration.enums.enum_optimizer_fallback_mode import (
    EnumOptimizerFallbackMode,
)
from swifttrack_integration.enums.enum_warehouse_command import EnumWarehouseCommand
from swifttrack_integration.enums.enum_warehouse_event_type import (
    EnumWarehouseEventType,
)

__all__: list[str] = [
    "EnumConnectionState",
    "EnumErrorCode",
    "EnumInfraTransportType",
    "EnumMessageDisposition",
    "EnumOptimizerFallbackMode",
    "EnumWarehouseCommand",
    "EnumWarehouseEventType",
]
