# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Error codes carried by RuntimeHostError and its subclasses."""

from enum import Enum


class EnumErrorCode(str, Enum):
    """Error classification codes for integration-layer failures."""

    OPERATION_FAILED = "OPERATION_FAILED"
    INVALID_CONFIGURATION = "INVALID_CONFIGURATION"
    NOT_CONFIGURED = "NOT_CONFIGURED"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    TIMEOUT_ERROR = "TIMEOUT_ERROR"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    PROTOCOL_VIOLATION = "PROTOCOL_VIOLATION"
    COMMAND_REJECTED = "COMMAND_REJECTED"
    VALIDATION_ERROR = "VALIDATION_ERROR"


__all__ = ["EnumErrorCode"]
