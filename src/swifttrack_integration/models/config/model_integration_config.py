# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Top-level configuration for one integration adapter process.

Resolution order (later wins):
    1. Field defaults
    2. YAML file sections (``from_yaml``)
    3. Environment variables

Example YAML::

    broker:
      bootstrap_servers: kafka:9092
      max_redeliveries: 20
    warehouse:
      host: wms
      port: 3008
    route_optimizer:
      fallback_mode: strict
"""

from __future__ import annotations

from pathlib import Path
from typing import ClassVar

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from swifttrack_integration.enums import EnumInfraTransportType
from swifttrack_integration.errors import (
    ModelInfraErrorContext,
    ProtocolConfigurationError,
)
from swifttrack_integration.models.config.model_billing_bridge_config import (
    ModelBillingBridgeConfig,
)
from swifttrack_integration.models.config.model_broker_config import (
    ModelBrokerConfig,
)
from swifttrack_integration.models.config.model_route_optimizer_config import (
    ModelRouteOptimizerConfig,
)
from swifttrack_integration.models.config.model_topology_config import (
    ModelTopologyConfig,
)
from swifttrack_integration.models.config.model_warehouse_bridge_config import (
    ModelWarehouseBridgeConfig,
)


class ModelIntegrationConfig(BaseModel):
    """All configuration sections for an adapter process."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    SECTIONS: ClassVar[dict[str, type]] = {
        "broker": ModelBrokerConfig,
        "topology": ModelTopologyConfig,
        "warehouse": ModelWarehouseBridgeConfig,
        "billing": ModelBillingBridgeConfig,
        "route_optimizer": ModelRouteOptimizerConfig,
    }

    broker: ModelBrokerConfig = Field(default_factory=ModelBrokerConfig)
    topology: ModelTopologyConfig = Field(default_factory=ModelTopologyConfig)
    warehouse: ModelWarehouseBridgeConfig = Field(
        default_factory=ModelWarehouseBridgeConfig
    )
    billing: ModelBillingBridgeConfig = Field(default_factory=ModelBillingBridgeConfig)
    route_optimizer: ModelRouteOptimizerConfig = Field(
        default_factory=ModelRouteOptimizerConfig
    )
    status_interval_seconds: float = Field(default=15.0, gt=0)

    @classmethod
    def from_mapping(cls, data: dict[str, object]) -> ModelIntegrationConfig:
        """Build every section from ``data`` with environment overrides applied."""
        unknown = set(data) - set(cls.SECTIONS) - {"status_interval_seconds"}
        if unknown:
            raise ProtocolConfigurationError(
                f"Unknown configuration section(s): {', '.join(sorted(unknown))}",
                context=ModelInfraErrorContext.with_correlation(
                    transport_type=EnumInfraTransportType.RUNTIME,
                    operation="load_config",
                ),
            )
        sections: dict[str, object] = {}
        for name, section_cls in cls.SECTIONS.items():
            raw = data.get(name) or {}
            if not isinstance(raw, dict):
                raise ProtocolConfigurationError(
                    f"Configuration section '{name}' must be a mapping",
                    context=ModelInfraErrorContext.with_correlation(
                        transport_type=EnumInfraTransportType.RUNTIME,
                        operation="load_config",
                        target_name=name,
                    ),
                )
            sections[name] = section_cls.from_mapping(raw)  # type: ignore[attr-defined]
        if "status_interval_seconds" in data:
            sections["status_interval_seconds"] = data["status_interval_seconds"]
        try:
            return cls.model_validate(sections)
        except ValidationError as e:
            raise ProtocolConfigurationError(
                f"Invalid {cls.__name__}: {e.error_count()} validation error(s)",
                context=ModelInfraErrorContext.with_correlation(
                    transport_type=EnumInfraTransportType.RUNTIME,
                    operation="load_config",
                ),
                errors=[
                    f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
                    for err in e.errors()
                ],
            ) from e

    @classmethod
    def default(cls) -> ModelIntegrationConfig:
        """Defaults with environment overrides applied."""
        return cls.from_mapping({})

    @classmethod
    def from_yaml(cls, path: Path) -> ModelIntegrationConfig:
        """Load a YAML file, then apply environment overrides.

        Raises:
            ProtocolConfigurationError: Missing file, invalid YAML, or
                invalid values.
        """
        context = ModelInfraErrorContext.with_correlation(
            transport_type=EnumInfraTransportType.RUNTIME,
            operation="load_config",
            target_name=str(path),
        )
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except FileNotFoundError as e:
            raise ProtocolConfigurationError(
                f"Configuration file not found: {path}", context=context
            ) from e
        except yaml.YAMLError as e:
            raise ProtocolConfigurationError(
                f"Invalid YAML in {path}", context=context
            ) from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ProtocolConfigurationError(
                f"Configuration root in {path} must be a mapping", context=context
            )
        return cls.from_mapping(data)

    def masked_dump(self) -> dict[str, object]:
        """Dump for display with secrets masked."""
        return self.model_dump(mode="json")


__all__ = ["ModelIntegrationConfig"]
