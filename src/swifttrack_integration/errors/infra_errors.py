# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Integration-Layer Error Classes.

Error Hierarchy:
    RuntimeHostError (base integration error)
    ├── ProtocolConfigurationError
    │   └── OptimizerNotConfiguredError
    ├── InfraConnectionError
    ├── InfraTimeoutError
    ├── InfraUnavailableError
    ├── ExternalProtocolError
    │   └── ExternalCommandError
    └── MessageValidationError

Failure categories map onto the hierarchy as follows:
    - Transport failure: InfraConnectionError, InfraTimeoutError
    - Protocol violation: ExternalProtocolError
    - Business/validation failure: MessageValidationError
    - Downstream unavailable at call time: InfraUnavailableError
    - Timeout on a pending external request: InfraTimeoutError

All errors:
    - Use EnumErrorCode for error classification
    - Support proper error chaining with `raise ... from e`
    - Include structured context for debugging
    - Support correlation IDs for request tracking
    - Accept ModelInfraErrorContext for bundled context parameters
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from swifttrack_integration.enums import EnumErrorCode
from swifttrack_integration.errors.model_infra_error_context import (
    ModelInfraErrorContext,
)


class RuntimeHostError(Exception):
    """Base error class for integration-layer errors.

    Structured Fields (via ModelInfraErrorContext):
        transport_type: Type of transport (kafka, tcp, soap, http)
        operation: Operation being performed
        correlation_id: Request correlation ID for tracking
        target_name: Target resource/endpoint name

    Example:
        >>> context = ModelInfraErrorContext(
        ...     transport_type=EnumInfraTransportType.SOAP,
        ...     operation="create_order",
        ...     target_name="http://cms:3006/soap",
        ... )
        >>> raise RuntimeHostError("Operation failed", context=context, order_id="o-1")
    """

    default_error_code: EnumErrorCode = EnumErrorCode.OPERATION_FAILED

    def __init__(
        self,
        message: str,
        error_code: Optional[EnumErrorCode] = None,
        context: Optional[ModelInfraErrorContext] = None,
        **extra_context: object,
    ) -> None:
        """Initialize RuntimeHostError with structured fields.

        Args:
            message: Human-readable error message
            error_code: Error code (defaults to the class default)
            context: Bundled infrastructure context (transport_type, operation, etc.)
            **extra_context: Additional context information
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.default_error_code

        structured_context: dict[str, object] = dict(extra_context)
        self.correlation_id: Optional[UUID] = None
        if context is not None:
            if context.transport_type is not None:
                structured_context["transport_type"] = context.transport_type.value
            if context.operation is not None:
                structured_context["operation"] = context.operation
            if context.target_name is not None:
                structured_context["target_name"] = context.target_name
            self.correlation_id = context.correlation_id
        self.context: dict[str, object] = structured_context

    def to_log_extra(self) -> dict[str, object]:
        """Flatten the error into a dict suitable for ``logger.*(extra=...)``."""
        extra: dict[str, object] = {
            "error_code": self.error_code.value,
            "error_type": type(self).__name__,
        }
        if self.correlation_id is not None:
            extra["correlation_id"] = str(self.correlation_id)
        for key, value in self.context.items():
            extra.setdefault(key, value)
        return extra

    def __str__(self) -> str:
        return self.message


class ProtocolConfigurationError(RuntimeHostError):
    """Raised when configuration validation fails.

    Used for configuration parsing errors, missing required fields,
    invalid values, and invalid topic or routing-key declarations.
    """

    default_error_code = EnumErrorCode.INVALID_CONFIGURATION


class OptimizerNotConfiguredError(ProtocolConfigurationError):
    """Raised by the strict route optimizer when no API credential is set."""

    default_error_code = EnumErrorCode.NOT_CONFIGURED


class InfraConnectionError(RuntimeHostError):
    """Raised when a transport connection fails or is lost.

    Covers refused, reset and closed connections as well as HTTP status
    errors returned by a reachable peer.
    """

    default_error_code = EnumErrorCode.CONNECTION_ERROR


class InfraTimeoutError(RuntimeHostError):
    """Raised when a transport operation or pending request times out.

    A pending-request timeout rejects the waiting caller only; it never
    changes the owning bridge's connection state.
    """

    default_error_code = EnumErrorCode.TIMEOUT_ERROR


class InfraUnavailableError(RuntimeHostError):
    """Raised when a downstream system is unavailable at call time.

    Raised for disconnected line-protocol bridges and for HTTP bridges whose
    availability circuit is open.
    """

    default_error_code = EnumErrorCode.SERVICE_UNAVAILABLE


class ExternalProtocolError(RuntimeHostError):
    """Raised when an external reply violates its wire protocol.

    Unparseable lines, malformed XML, SOAP faults and unexpected JSON
    shapes. Only the offending unit is discarded; connections stay up.
    """

    default_error_code = EnumErrorCode.PROTOCOL_VIOLATION


class ExternalCommandError(ExternalProtocolError):
    """Raised when the warehouse answers a command with a non-OK status."""

    default_error_code = EnumErrorCode.COMMAND_REJECTED


class MessageValidationError(RuntimeHostError):
    """Raised when an inbound broker message is structurally invalid.

    The triggering message is acknowledged and dropped; redelivery cannot
    repair it.
    """

    default_error_code = EnumErrorCode.VALIDATION_ERROR


__all__ = [
    "ExternalCommandError",
    "ExternalProtocolError",
    "InfraConnectionError",
    "InfraTimeoutError",
    "InfraUnavailableError",
    "MessageValidationError",
    "OptimizerNotConfiguredError",
    "ProtocolConfigurationError",
    "RuntimeHostError",
]
