# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Unit tests for configure_logging."""

import logging
from unittest.mock import patch

import pytest

from swifttrack_integration.runtime import configure_logging


class TestConfigureLogging:
    def test_explicit_level(self) -> None:
        with patch("logging.basicConfig") as basic_config:
            configure_logging("debug")
        assert basic_config.call_args.kwargs["level"] == logging.DEBUG

    def test_level_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("INTEGRATION_LOG_LEVEL", "warning")
        with patch("logging.basicConfig") as basic_config:
            configure_logging()
        assert basic_config.call_args.kwargs["level"] == logging.WARNING

    def test_invalid_level_falls_back_to_info(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Test an unknown level warns on stderr and uses INFO."""
        with patch("logging.basicConfig") as basic_config:
            configure_logging("chatty")
        assert basic_config.call_args.kwargs["level"] == logging.INFO
        assert "Invalid INTEGRATION_LOG_LEVEL 'CHATTY'" in capsys.readouterr().err

    def test_aiokafka_is_quieted(self) -> None:
        with patch("logging.basicConfig"):
            configure_logging("DEBUG")
        assert logging.getLogger("aiokafka").level >= logging.WARNING
