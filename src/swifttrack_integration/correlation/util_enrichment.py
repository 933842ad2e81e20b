# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Identifier enrichment applied before a translated event is republished."""

from __future__ import annotations

from swifttrack_integration.correlation.protocol_correlation_store import (
    ProtocolCorrelationStore,
)


async def enrich_identifiers(
    store: ProtocolCorrelationStore,
    internal_id: str | None,
    external_id: str | None,
) -> tuple[str | None, str | None]:
    """Fill in whichever of the two ids is missing.

    A failed lookup leaves the field as None; enrichment never blocks
    republishing.

    Returns:
        ``(internal_id, external_id)``
    """
    if internal_id and not external_id:
        external_id = await store.resolve_external(internal_id)
    elif external_id and not internal_id:
        internal_id = await store.resolve_internal(external_id)
    return internal_id or None, external_id or None


__all__: list[str] = ["enrich_identifiers"]
