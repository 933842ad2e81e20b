# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""UTC timestamp helpers.

All translated domain events are stamped with timezone-aware UTC times.
Use ``utc_now()`` instead of ``datetime.utcnow()`` (deprecated in 3.12).
"""

from __future__ import annotations

from datetime import UTC, datetime


def utc_now() -> datetime:
    return datetime.now(UTC)


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string with millisecond precision."""
    return utc_now().isoformat(timespec="milliseconds")


__all__: list[str] = ["utc_now", "utc_now_iso"]
