# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Order line item."""

from __future__ import annotations

from pydantic import AliasChoices, ConfigDict, Field

from swifttrack_integration.models.model_camel_base import ModelCamelBase


class ModelOrderItem(ModelCamelBase):
    """One item of an order; extra item fields are carried through untouched."""

    model_config = ConfigDict(extra="allow")

    name: str = Field(default="item", validation_alias=AliasChoices("name", "sku"))
    qty: int = Field(default=1, ge=0, validation_alias=AliasChoices("qty", "quantity"))


__all__: list[str] = ["ModelOrderItem"]
