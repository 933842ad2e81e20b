# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Base class for configuration sections that accept environment overrides."""

from __future__ import annotations

import os
from typing import ClassVar, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError

from swifttrack_integration.enums import EnumInfraTransportType
from swifttrack_integration.errors import (
    ModelInfraErrorContext,
    ProtocolConfigurationError,
)


_ConfigT = TypeVar("_ConfigT", bound="ModelEnvConfigBase")


class ModelEnvConfigBase(BaseModel):
    """Frozen configuration section with an env-var override table.

    Subclasses declare ``ENV_VARS`` mapping field name to environment
    variable. Values are passed through pydantic validation, so "3008" in
    ``WMS_PORT`` becomes the integer 3008 and bad values fail loudly.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    ENV_VARS: ClassVar[dict[str, str]] = {}

    @classmethod
    def env_overrides(cls) -> dict[str, str]:
        """Return ``{field: raw value}`` for every non-empty mapped variable."""
        overrides: dict[str, str] = {}
        for field_name, env_var in cls.ENV_VARS.items():
            raw = os.environ.get(env_var)
            if raw is not None and raw.strip() != "":
                overrides[field_name] = raw.strip()
        return overrides

    @classmethod
    def from_mapping(
        cls: type[_ConfigT],
        data: dict[str, object] | None = None,
        *,
        apply_env: bool = True,
    ) -> _ConfigT:
        """Validate ``data`` with environment overrides layered on top.

        Raises:
            ProtocolConfigurationError: If validation fails.
        """
        merged: dict[str, object] = dict(data or {})
        if apply_env:
            merged.update(cls.env_overrides())
        try:
            return cls.model_validate(merged)
        except ValidationError as e:
            context = ModelInfraErrorContext.with_correlation(
                transport_type=EnumInfraTransportType.RUNTIME,
                operation="load_config",
                target_name=cls.__name__,
            )
            raise ProtocolConfigurationError(
                f"Invalid {cls.__name__}: {e.error_count()} validation error(s)",
                context=context,
                errors=[
                    f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
                    for err in e.errors()
                ],
            ) from e

    @classmethod
    def from_env(cls: type[_ConfigT]) -> _ConfigT:
        """Defaults with environment overrides applied."""
        return cls.from_mapping({})


__all__ = ["ModelEnvConfigBase"]
