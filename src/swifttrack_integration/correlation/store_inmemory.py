# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""In-memory Correlation Store.

Process-lifetime map with no eviction. All access happens on the adapter's
single event loop and no method awaits, so no lock is taken.

Mappings are lost on restart; events arriving afterwards with only one id
are republished with the other id set to null.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


class InMemoryCorrelationStore:
    """Dict-backed ProtocolCorrelationStore implementation."""

    def __init__(self) -> None:
        self._external_by_internal: dict[str, str] = {}

    async def record_ack(self, internal_id: str, external_id: str) -> None:
        previous = self._external_by_internal.get(internal_id)
        self._external_by_internal[internal_id] = external_id
        if previous is not None and previous != external_id:
            logger.info(
                "Correlation overwritten",
                extra={
                    "order_id": internal_id,
                    "external_id": external_id,
                    "previous_external_id": previous,
                },
            )

    async def resolve_external(self, internal_id: str) -> str | None:
        return self._external_by_internal.get(internal_id)

    async def resolve_internal(self, external_id: str) -> str | None:
        # Reverse scan, newest insertion first; bounded by in-flight orders.
        for internal_id, mapped in reversed(self._external_by_internal.items()):
            if mapped == external_id:
                return internal_id
        return None

    async def count(self) -> int:
        return len(self._external_by_internal)

    def clear(self) -> None:
        """Drop all mappings (test helper)."""
        self._external_by_internal.clear()


__all__: list[str] = ["InMemoryCorrelationStore"]
