# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Broker message disposition returned by subscription handlers."""

from enum import Enum


class EnumMessageDisposition(str, Enum):
    """Outcome of handling one delivered broker message.

    Attributes:
        ACK: Processed; remove the message from its queue.
        DROP: Unprocessable; acknowledge and discard with a warning.
        REQUEUE: Transient failure; negative-acknowledge for redelivery.
    """

    ACK = "ack"
    DROP = "drop"
    REQUEUE = "requeue"


__all__ = ["EnumMessageDisposition"]
