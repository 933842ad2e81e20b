# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Unit tests for the integration error hierarchy and error context."""

from __future__ import annotations

from uuid import UUID, uuid4

import pytest

from swifttrack_integration.enums import EnumErrorCode, EnumInfraTransportType
from swifttrack_integration.errors import (
    ExternalCommandError,
    ExternalProtocolError,
    InfraConnectionError,
    InfraTimeoutError,
    InfraUnavailableError,
    MessageValidationError,
    ModelInfraErrorContext,
    OptimizerNotConfiguredError,
    ProtocolConfigurationError,
    RuntimeHostError,
)


class TestErrorHierarchy:
    """Every error derives from RuntimeHostError with its own code."""

    @pytest.mark.parametrize(
        ("error_cls", "code"),
        [
            (ProtocolConfigurationError, EnumErrorCode.INVALID_CONFIGURATION),
            (OptimizerNotConfiguredError, EnumErrorCode.NOT_CONFIGURED),
            (InfraConnectionError, EnumErrorCode.CONNECTION_ERROR),
            (InfraTimeoutError, EnumErrorCode.TIMEOUT_ERROR),
            (InfraUnavailableError, EnumErrorCode.SERVICE_UNAVAILABLE),
            (ExternalProtocolError, EnumErrorCode.PROTOCOL_VIOLATION),
            (ExternalCommandError, EnumErrorCode.COMMAND_REJECTED),
            (MessageValidationError, EnumErrorCode.VALIDATION_ERROR),
        ],
    )
    def test_default_error_codes(
        self, error_cls: type[RuntimeHostError], code: EnumErrorCode
    ) -> None:
        """Test each class carries its default error code."""
        error = error_cls("boom")
        assert isinstance(error, RuntimeHostError)
        assert error.error_code is code
        assert str(error) == "boom"

    def test_subclass_relationships(self) -> None:
        """Test the nested branches of the hierarchy."""
        assert issubclass(OptimizerNotConfiguredError, ProtocolConfigurationError)
        assert issubclass(ExternalCommandError, ExternalProtocolError)

    def test_explicit_error_code_overrides_default(self) -> None:
        """Test an explicit error_code wins over the class default."""
        error = InfraConnectionError("x", error_code=EnumErrorCode.TIMEOUT_ERROR)
        assert error.error_code is EnumErrorCode.TIMEOUT_ERROR


class TestErrorContext:
    """Context fields flow into the error and its log extra."""

    def test_context_fields_are_flattened(self) -> None:
        """Test transport, operation and target land in ``context``."""
        correlation_id = uuid4()
        error = InfraTimeoutError(
            "no reply",
            context=ModelInfraErrorContext(
                transport_type=EnumInfraTransportType.TCP,
                operation="send_command",
                target_name="wms:127.0.0.1:3008",
                correlation_id=correlation_id,
            ),
            timeout_seconds=5.0,
        )
        assert error.correlation_id == correlation_id
        assert error.context == {
            "timeout_seconds": 5.0,
            "transport_type": "tcp",
            "operation": "send_command",
            "target_name": "wms:127.0.0.1:3008",
        }

    def test_to_log_extra(self) -> None:
        """Test the log extra carries code, type and correlation id."""
        correlation_id = uuid4()
        error = ExternalProtocolError(
            "bad xml",
            context=ModelInfraErrorContext.with_correlation(
                correlation_id=correlation_id,
                transport_type=EnumInfraTransportType.SOAP,
            ),
        )
        extra = error.to_log_extra()
        assert extra["error_code"] == "PROTOCOL_VIOLATION"
        assert extra["error_type"] == "ExternalProtocolError"
        assert extra["correlation_id"] == str(correlation_id)
        assert extra["transport_type"] == "soap"

    def test_no_context(self) -> None:
        """Test errors without context have no correlation id."""
        error = RuntimeHostError("plain")
        assert error.correlation_id is None
        assert "correlation_id" not in error.to_log_extra()

    def test_with_correlation_generates_id(self) -> None:
        """Test with_correlation generates a UUID when none is given."""
        context = ModelInfraErrorContext.with_correlation(operation="connect")
        assert isinstance(context.correlation_id, UUID)

    def test_with_correlation_keeps_given_id(self) -> None:
        """Test with_correlation keeps a supplied UUID."""
        correlation_id = uuid4()
        context = ModelInfraErrorContext.with_correlation(correlation_id=correlation_id)
        assert context.correlation_id == correlation_id
