# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Correlation between internal order ids and external system ids."""

from swifttrack_integration.correlation.protocol_correlation_store import (
    ProtocolCorrelationStore,
)
from swifttrack_integration.correlation.store_inmemory import (
    InMemoryCorrelationStore,
)
from swifttrack_integration.correlation.util_enrichment import enrich_identifiers

__all__: list[str] = [
    "InMemoryCorrelationStore",
    "ProtocolCorrelationStore",
    "enrich_identifiers",
]
