# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Unit tests for the swifttrack-integration CLI (Click runner)."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from click.testing import CliRunner

from swifttrack_integration.cli import cli


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


class TestShowConfig:
    """show-config command."""

    def test_secrets_are_masked(self, runner: CliRunner) -> None:
        """Test the optimizer API key never reaches the output."""
        result = runner.invoke(
            cli, ["show-config"], env={"ROS_API_KEY": "super-private-value"}
        )
        assert result.exit_code == 0, result.output
        assert "super-private-value" not in result.output
        assert "**********" in result.output
        assert "wms-adapter-q" in result.output

    def test_yaml_values_are_used(self, runner: CliRunner, tmp_path: Path) -> None:
        config_file = tmp_path / "integration.yaml"
        config_file.write_text("warehouse:\n  port: 7001\n", encoding="utf-8")
        result = runner.invoke(cli, ["show-config", "--config", str(config_file)])
        assert result.exit_code == 0, result.output
        assert "7001" in result.output

    def test_unknown_section_exits_2(self, runner: CliRunner, tmp_path: Path) -> None:
        config_file = tmp_path / "integration.yaml"
        config_file.write_text("warehous:\n  port: 7001\n", encoding="utf-8")
        result = runner.invoke(cli, ["show-config", "--config", str(config_file)])
        assert result.exit_code == 2
        assert "warehous" in result.output

    def test_invalid_value_lists_errors(self, runner: CliRunner, tmp_path: Path) -> None:
        """Test field-level errors are printed."""
        config_file = tmp_path / "integration.yaml"
        config_file.write_text("warehouse:\n  port: not-a-port\n", encoding="utf-8")
        result = runner.invoke(cli, ["show-config", "--config", str(config_file)])
        assert result.exit_code == 2
        assert "port" in result.output


class TestEta:
    """eta command."""

    def test_local_fallback_without_key(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["eta", "6.9271", "79.8612", "7.2906", "80.6337"])
        assert result.exit_code == 0, result.output
        assert "fallback" in result.output
        assert "Distance (km)" in result.output

    def test_strict_mode_without_key_fails(self, runner: CliRunner) -> None:
        result = runner.invoke(
            cli,
            ["eta", "6.9", "79.8", "7.2", "80.6"],
            env={"ROS_FALLBACK_MODE": "strict"},
        )
        assert result.exit_code == 1
        assert "not configured" in result.output

    def test_out_of_range_coordinate(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["eta", "95", "79.8", "7.2", "80.6"])
        assert result.exit_code == 2


class TestProvisionTopics:
    """provision-topics command with a mocked provisioner."""

    def _invoke(self, runner: CliRunner, outcome: dict[str, object]) -> tuple[object, MagicMock]:
        provisioner = MagicMock()
        provisioner.ensure_topics_exist = AsyncMock(return_value=outcome)
        with patch(
            "swifttrack_integration.event_bus.TopicProvisioner",
            return_value=provisioner,
        ):
            result = runner.invoke(cli, ["provision-topics"])
        return result, provisioner

    def test_success(self, runner: CliRunner) -> None:
        """Test every default topic is requested and reported."""
        result, provisioner = self._invoke(
            runner,
            {
                "status": "success",
                "created": ["orders", "users"],
                "existing": ["logistics", "notifications"],
                "failed": [],
            },
        )
        assert result.exit_code == 0, result.output
        provisioner.ensure_topics_exist.assert_awaited_once_with(
            ["orders", "users", "logistics", "notifications"]
        )
        assert "created" in result.output
        assert "existing" in result.output

    def test_unavailable_exits_1(self, runner: CliRunner) -> None:
        result, _ = self._invoke(
            runner,
            {"status": "unavailable", "created": [], "existing": [], "failed": []},
        )
        assert result.exit_code == 1


class TestRun:
    """run command."""

    def test_runs_selected_adapter(self, runner: CliRunner) -> None:
        runtime = MagicMock()
        runtime.name = "ros-adapter"
        runtime.run_until_stopped = AsyncMock()
        with patch(
            "swifttrack_integration.runtime.build_route_runtime", return_value=runtime
        ) as build:
            result = runner.invoke(cli, ["run", "routes"])
        assert result.exit_code == 0, result.output
        build.assert_called_once()
        runtime.run_until_stopped.assert_awaited_once()
        assert "ros-adapter stopped" in result.output

    def test_unknown_adapter(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["run", "payments"])
        assert result.exit_code == 2
