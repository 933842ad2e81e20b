# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Command line interface for running adapters and operating the topology."""

from swifttrack_integration.cli.commands import cli

__all__: list[str] = ["cli"]
