# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""An outstanding warehouse command awaiting its ``command_result``."""

from __future__ import annotations

import asyncio
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from swifttrack_integration.enums import EnumWarehouseCommand
from swifttrack_integration.utils import utc_now


class ModelPendingRequest(BaseModel):
    """Pending request record; the future is resolved by the reader task."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    request_id: str
    command: EnumWarehouseCommand
    issued_at: datetime = Field(default_factory=utc_now)
    future: asyncio.Future  # type: ignore[type-arg]


__all__: list[str] = ["ModelPendingRequest"]
