# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Process-wide logging setup for adapter processes and the CLI."""

from __future__ import annotations

import logging
import os
import sys

LOG_LEVEL_ENV_VAR = "INTEGRATION_LOG_LEVEL"
_VALID_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def configure_logging(level: str | None = None) -> None:
    """Configure root logging.

    The level comes from ``level`` or, when omitted, from the
    INTEGRATION_LOG_LEVEL environment variable (default: INFO). Called
    before configuration is loaded so configuration errors are logged.

    Log Format Example:
        2025-01-15 10:30:45 [INFO] swifttrack_integration.runtime: [STATUS] adapter=wms-adapter ...
    """
    log_level = (level or os.getenv(LOG_LEVEL_ENV_VAR, "INFO")).upper()
    if log_level not in _VALID_LEVELS:
        print(
            f"Warning: Invalid {LOG_LEVEL_ENV_VAR} '{log_level}', using INFO. "
            f"Valid levels: {', '.join(sorted(_VALID_LEVELS))}",
            file=sys.stderr,
        )
        log_level = "INFO"

    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    # aiokafka logs every coordinator rejoin at INFO.
    logging.getLogger("aiokafka").setLevel(max(logging.WARNING, logging.root.level))


__all__: list[str] = ["LOG_LEVEL_ENV_VAR", "configure_logging"]
