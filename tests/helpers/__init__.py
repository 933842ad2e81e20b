# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Test helpers for swifttrack_integration tests.

Available Utilities:
    Fake Warehouse:
        - FakeWarehouse: Loopback line-protocol server
        - wait_until: Poll a predicate with a timeout
"""

from tests.helpers.fake_warehouse import FakeWarehouse, wait_until

__all__: list[str] = ["FakeWarehouse", "wait_until"]
