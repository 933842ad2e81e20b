# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Connection state enumeration shared by the broker client and all bridges."""

from enum import Enum


class EnumConnectionState(str, Enum):
    """Lifecycle state of a broker link or external-system bridge.

    Transitions:
        DISCONNECTED -> CONNECTING: connect() called or reconnect timer fired
        CONNECTING -> CONNECTED: transport handshake succeeded
        CONNECTING -> DISCONNECTED: handshake failed (reconnect scheduled)
        CONNECTED -> DISCONNECTED: transport error or close
    """

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


__all__ = ["EnumConnectionState"]
