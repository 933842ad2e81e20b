# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Pydantic models for configuration and for payloads crossing each boundary.

Subpackages:
    - config: Configuration sections
    - orders: Order lifecycle events consumed by the bridges
    - warehouse: Line-protocol messages
    - billing: SOAP responses and billing events
    - routing: Route optimization and ETA requests/results
"""

from swifttrack_integration.models.model_camel_base import ModelCamelBase

__all__: list[str] = ["ModelCamelBase"]
