# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""SwiftTrack Integration Layer - Event-driven bridges to external systems.

This package connects the SwiftTrack topic broker to three external
systems, each through its own adapter process:

- Warehouse (WMS): TCP newline-delimited JSON protocol
- Billing (CMS): SOAP 1.1 over HTTP
- Route optimizer (ROS): REST/JSON with a local nearest-neighbour fallback

Key Components:
    - event_bus: Broker client protocol, Kafka and in-memory implementations
    - correlation: Internal/external identifier store and enrichment
    - bridges: The three protocol bridges
    - runtime: Adapter process lifecycle and factories
    - errors: Transport-aware error taxonomy with ModelInfraErrorContext
"""

__version__ = "0.1.0"

__all__: list[str] = ["__version__"]
