# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Billing (SOAP) models."""

from swifttrack_integration.models.billing.model_billing_results import (
    ModelBillingCustomerCreated,
    ModelBillingOrderCreated,
    ModelCreateCustomerResponse,
    ModelCreateOrderResponse,
)
from swifttrack_integration.models.billing.model_user_created_event import (
    ModelUserCreatedEvent,
)

__all__: list[str] = [
    "ModelBillingCustomerCreated",
    "ModelBillingOrderCreated",
    "ModelCreateCustomerResponse",
    "ModelCreateOrderResponse",
    "ModelUserCreatedEvent",
]
