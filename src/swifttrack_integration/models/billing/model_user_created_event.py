# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Payload of the ``user.created`` domain event."""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, Field, field_validator

from swifttrack_integration.models.model_camel_base import ModelCamelBase


class ModelUserCreatedEvent(ModelCamelBase):
    user_id: str = Field(
        min_length=1, validation_alias=AliasChoices("userId", "user_id", "id")
    )
    name: str | None = None
    email: str | None = None
    phone: str | None = None
    role: str = "client"
    active: bool = True

    @field_validator("user_id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @property
    def customer_type(self) -> str:
        return "INDIVIDUAL" if self.role == "client" else "BUSINESS"

    @property
    def customer_status(self) -> str:
        return "ACTIVE" if self.active else "INACTIVE"


__all__: list[str] = ["ModelUserCreatedEvent"]
