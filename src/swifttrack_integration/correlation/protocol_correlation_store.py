# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Protocol definition for the Correlation Store.

A correlation store maps an internal order identifier to the identifier an
external system assigned to it (warehouse package id, billing order id).
Bridges record a mapping when an acknowledgement carries both ids and
consult it to fill in whichever id a later event omits.

Each adapter instance owns its store; it is injected into bridge
constructors, never shared through module state.

Protocol Methods:
    - record_ack: Insert or overwrite a mapping
    - resolve_external: Internal id -> external id
    - resolve_internal: External id -> internal id
    - count: Number of tracked mappings

Implementations:
    - InMemoryCorrelationStore: Process-lifetime dict (default)
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class ProtocolCorrelationStore(Protocol):
    """Bidirectional internal/external identifier map.

    Example:
        >>> store: ProtocolCorrelationStore = InMemoryCorrelationStore()
        >>> await store.record_ack("o-1", "pkg-1")
        >>> await store.resolve_internal("pkg-1")
        'o-1'
    """

    async def record_ack(self, internal_id: str, external_id: str) -> None:
        """Insert or overwrite the mapping for ``internal_id``."""
        ...

    async def resolve_external(self, internal_id: str) -> str | None:
        """Return the external id recorded for ``internal_id``, if any."""
        ...

    async def resolve_internal(self, external_id: str) -> str | None:
        """Return the internal id whose mapping points at ``external_id``, if any."""
        ...

    async def count(self) -> int:
        """Number of tracked mappings."""
        ...


__all__: list[str] = ["ProtocolCorrelationStore"]
