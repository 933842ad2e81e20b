# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Configuration models for the integration layer."""

from swifttrack_integration.models.config.model_billing_bridge_config import (
    ModelBillingBridgeConfig,
)
from swifttrack_integration.models.config.model_broker_config import (
    ModelBrokerConfig,
)
from swifttrack_integration.models.config.model_env_config_base import (
    ModelEnvConfigBase,
)
from swifttrack_integration.models.config.model_integration_config import (
    ModelIntegrationConfig,
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

__all__: list[str] = [
    "ModelBillingBridgeConfig",
    "ModelBrokerConfig",
    "ModelEnvConfigBase",
    "ModelIntegrationConfig",
    "ModelRouteOptimizerConfig",
    "ModelTopologyConfig",
    "ModelWarehouseBridgeConfig",
]
