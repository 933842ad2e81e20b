# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Parsed SOAP responses and the domain events derived from them."""

from __future__ import annotations

from typing import Literal
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

from swifttrack_integration.models.model_camel_base import ModelCamelBase
from swifttrack_integration.utils import utc_now_iso


class ModelCreateOrderResponse(BaseModel):
    """``CreateOrderResponse`` body."""

    model_config = ConfigDict(frozen=True)

    success: bool
    cms_order_id: str | None = None
    billing_ref: str | None = None
    message: str = ""


class ModelCreateCustomerResponse(BaseModel):
    """``CreateCustomerResponse`` body."""

    model_config = ConfigDict(frozen=True)

    success: bool
    customer_id: str | None = None
    message: str = ""


class ModelBillingOrderCreated(ModelCamelBase):
    """``billing.order.created`` payload.

    ``correlation_id`` is freshly generated per event; it is not the
    inbound message's correlation id.
    """

    order_id: str
    billing_order_id: str | None
    billing_ref: str | None
    client_id: str
    status: Literal["billing_created"] = "billing_created"
    message: str = ""
    correlation_id: UUID = Field(default_factory=uuid4)
    timestamp: str = Field(default_factory=utc_now_iso)


class ModelBillingCustomerCreated(ModelCamelBase):
    """``billing.customer.created`` payload."""

    user_id: str
    billing_customer_id: str | None
    message: str = ""
    timestamp: str = Field(default_factory=utc_now_iso)


__all__: list[str] = [
    "ModelBillingCustomerCreated",
    "ModelBillingOrderCreated",
    "ModelCreateCustomerResponse",
    "ModelCreateOrderResponse",
]
