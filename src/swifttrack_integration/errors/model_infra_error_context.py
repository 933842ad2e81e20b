# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Infrastructure Error Context Model.

Bundles the structured fields shared by every integration-layer error so
that constructors stay small while log lines remain correlatable across
the broker client and the three bridges.
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

from swifttrack_integration.enums import EnumInfraTransportType


class ModelInfraErrorContext(BaseModel):
    """Structured context attached to RuntimeHostError and subclasses.

    Attributes:
        transport_type: Transport the failing operation used (KAFKA, TCP, ...)
        operation: Operation being performed (connect, publish, create_order, ...)
        target_name: Target resource or endpoint name
        correlation_id: Correlation ID for cross-bridge tracing

    Example:
        >>> context = ModelInfraErrorContext(
        ...     transport_type=EnumInfraTransportType.TCP,
        ...     operation="send_command",
        ...     target_name="wms:127.0.0.1:3008",
        ...     correlation_id=uuid4(),
        ... )
        >>> raise InfraTimeoutError("No reply", context=context)
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    transport_type: Optional[EnumInfraTransportType] = Field(
        default=None,
        description="Type of transport (KAFKA, TCP, SOAP, HTTP, RUNTIME)",
    )
    operation: Optional[str] = Field(
        default=None,
        description="Operation being performed (connect, publish, send_command, ...)",
    )
    target_name: Optional[str] = Field(
        default=None,
        description="Target resource or endpoint name",
    )
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="Request correlation ID for distributed tracing",
    )

    @classmethod
    def with_correlation(
        cls,
        correlation_id: UUID | None = None,
        **kwargs: object,
    ) -> ModelInfraErrorContext:
        """Build a context, generating a correlation ID when none is given."""
        return cls(correlation_id=correlation_id or uuid4(), **kwargs)


__all__ = ["ModelInfraErrorContext"]
