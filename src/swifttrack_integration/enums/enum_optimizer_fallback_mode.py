# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Route optimizer behaviour when the remote service is unusable."""

from enum import Enum


class EnumOptimizerFallbackMode(str, Enum):
    """Selects between the tolerant and strict route optimizer variants.

    Attributes:
        LOCAL: Tolerant. Missing credentials or remote failures fall back to
            the local nearest-neighbour computation.
        STRICT: Missing credentials raise OptimizerNotConfiguredError and
            remote failures propagate to the caller.
    """

    LOCAL = "local"
    STRICT = "strict"


__all__ = ["EnumOptimizerFallbackMode"]
