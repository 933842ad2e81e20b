# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Base model for camelCase JSON payloads on the broker and line protocol."""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

from swifttrack_integration.enums import EnumInfraTransportType
from swifttrack_integration.errors import (
    MessageValidationError,
    ModelInfraErrorContext,
)

_ModelT = TypeVar("_ModelT", bound="ModelCamelBase")


class ModelCamelBase(BaseModel):
    """Snake_case fields, camelCase on the wire; unknown keys ignored."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    @classmethod
    def from_payload(
        cls: type[_ModelT],
        payload: dict[str, Any],
        *,
        operation: str = "validate_payload",
        correlation_id: Any = None,
    ) -> _ModelT:
        """Validate a broker payload.

        Raises:
            MessageValidationError: The payload is structurally invalid.
        """
        try:
            return cls.model_validate(payload)
        except ValidationError as e:
            missing = [
                ".".join(str(p) for p in err["loc"])
                for err in e.errors()
                if err["type"] == "missing"
            ]
            raise MessageValidationError(
                f"Invalid {cls.__name__} payload"
                + (f": missing {', '.join(missing)}" if missing else ""),
                context=ModelInfraErrorContext.with_correlation(
                    correlation_id=correlation_id,
                    transport_type=EnumInfraTransportType.RUNTIME,
                    operation=operation,
                ),
                order_id=payload.get("orderId"),
            ) from e

    def to_wire(self, *, exclude_none: bool = True) -> dict[str, Any]:
        """JSON-ready dict with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=exclude_none)


__all__: list[str] = ["ModelCamelBase"]
