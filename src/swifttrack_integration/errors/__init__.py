# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""SwiftTrack Integration Errors Module.

Exports:
    ModelInfraErrorContext: Configuration model for bundled error context
    RuntimeHostError: Base integration error class
    ProtocolConfigurationError: Configuration validation errors
    OptimizerNotConfiguredError: Strict route optimizer without credentials
    InfraConnectionError: Transport connection errors
    InfraTimeoutError: Transport and pending-request timeouts
    InfraUnavailableError: Downstream unavailable at call time
    ExternalProtocolError: Wire-protocol violations by an external system
    ExternalCommandError: Warehouse command rejected by the external system
    MessageValidationError: Structurally invalid inbound broker message

Correlation ID Assignment:
    - Propagate correlation_id from the inbound broker message to error context
    - If none exists, generate one using uuid4()
    - Keep correlation IDs as UUID objects until they are written to a log

    Example::

        from uuid import uuid4
        from swifttrack_integration.errors import (
            InfraConnectionError,
            ModelInfraErrorContext,
        )
        from swifttrack_integration.enums import EnumInfraTransportType

        context = ModelInfraErrorContext(
            transport_type=EnumInfraTransportType.TCP,
            operation="connect",
            target_name="wms:127.0.0.1:3008",
            correlation_id=message.correlation_id or uuid4(),
        )
        raise InfraConnectionError("Failed to connect", context=context) from e

Error Sanitization Guidelines:
    NEVER include API keys, bearer tokens or credentials embedded in URLs in
    error messages or context. Pass exception text through
    ``swifttrack_integration.utils.sanitize_error_message`` before logging
    or publishing it.
"""

from swifttrack_integration.errors.infra_errors import (
    ExternalCommandError,
    ExternalProtocolError,
    InfraConnectionError,
    InfraTimeoutError,
    InfraUnavailableError,
    MessageValidationError,
    OptimizerNotConfiguredError,
    ProtocolConfigurationError,
    RuntimeHostError,
)
from swifttrack_integration.errors.model_infra_error_context import (
    ModelInfraErrorContext,
)

__all__: list[str] = [
    "ExternalCommandError",
    "ExternalProtocolError",
    "InfraConnectionError",
    "InfraTimeoutError",
    "InfraUnavailableError",
    "MessageValidationError",
    "ModelInfraErrorContext",
    "OptimizerNotConfiguredError",
    "ProtocolConfigurationError",
    "RuntimeHostError",
]
