# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Unit tests for configuration loading: defaults, YAML and environment."""

from __future__ import annotations

from pathlib import Path

import pytest

from swifttrack_integration.enums import EnumOptimizerFallbackMode
from swifttrack_integration.errors import ProtocolConfigurationError
from swifttrack_integration.models.config import (
    ModelBrokerConfig,
    ModelIntegrationConfig,
    ModelRouteOptimizerConfig,
    ModelWarehouseBridgeConfig,
)


class TestDefaults:
    """Defaults without any environment or file."""

    def test_default_sections(self) -> None:
        """Test the documented defaults."""
        config = ModelIntegrationConfig.default()
        assert config.broker.bootstrap_servers == "localhost:9092"
        assert config.broker.max_redeliveries is None
        assert config.topology.all_topics == (
            "orders",
            "users",
            "logistics",
            "notifications",
        )
        assert config.warehouse.port == 3008
        assert config.warehouse.adapter_id.startswith("wms-adp-")
        assert config.billing.url == "http://localhost:3006/soap"
        assert config.route_optimizer.fallback_mode is EnumOptimizerFallbackMode.LOCAL
        assert config.route_optimizer.is_configured is False

    def test_interval_properties(self) -> None:
        """Test ms fields are exposed in seconds."""
        broker = ModelBrokerConfig(reconnect_interval_ms=3000, requeue_delay_ms=250)
        assert broker.reconnect_interval_seconds == 3.0
        assert broker.requeue_delay_seconds == 0.25

    def test_warehouse_target_name(self) -> None:
        """Test the target name used in error context."""
        config = ModelWarehouseBridgeConfig(host="wms", port=4000)
        assert config.target_name == "wms:wms:4000"


class TestEnvironmentOverrides:
    """Environment variables win over file and defaults."""

    def test_env_overrides_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test string values are coerced by validation."""
        monkeypatch.setenv("WMS_PORT", "4010")
        monkeypatch.setenv("KAFKA_BOOTSTRAP_SERVERS", "kafka:29092")
        monkeypatch.setenv("BROKER_MAX_REDELIVERIES", "7")
        config = ModelIntegrationConfig.default()
        assert config.warehouse.port == 4010
        assert config.broker.bootstrap_servers == "kafka:29092"
        assert config.broker.max_redeliveries == 7

    def test_blank_env_is_ignored(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test empty variables fall through to the default."""
        monkeypatch.setenv("WMS_HOST", "   ")
        assert ModelIntegrationConfig.default().warehouse.host == "127.0.0.1"

    def test_invalid_env_value(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test a bad value raises ProtocolConfigurationError with details."""
        monkeypatch.setenv("WMS_PORT", "not-a-port")
        with pytest.raises(ProtocolConfigurationError) as exc_info:
            ModelIntegrationConfig.default()
        errors = exc_info.value.context["errors"]
        assert isinstance(errors, list)
        assert any(e.startswith("port") for e in errors)

    def test_api_key_marks_optimizer_configured(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test ROS_API_KEY enables the remote optimizer."""
        monkeypatch.setenv("ROS_API_KEY", "k-123")
        monkeypatch.setenv("ROS_FALLBACK_MODE", "strict")
        config = ModelRouteOptimizerConfig.from_env()
        assert config.is_configured is True
        assert config.fallback_mode is EnumOptimizerFallbackMode.STRICT


class TestYamlLoading:
    """YAML file sections."""

    def test_from_yaml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test file values apply and env still wins."""
        path = tmp_path / "integration.yaml"
        path.write_text(
            "broker:\n"
            "  bootstrap_servers: kafka:9092\n"
            "  max_redeliveries: 20\n"
            "warehouse:\n"
            "  host: wms\n"
            "  port: 3008\n"
            "route_optimizer:\n"
            "  fallback_mode: strict\n"
            "status_interval_seconds: 5\n",
            encoding="utf-8",
        )
        monkeypatch.setenv("WMS_HOST", "wms-override")
        config = ModelIntegrationConfig.from_yaml(path)
        assert config.broker.bootstrap_servers == "kafka:9092"
        assert config.broker.max_redeliveries == 20
        assert config.warehouse.host == "wms-override"
        assert config.route_optimizer.fallback_mode is EnumOptimizerFallbackMode.STRICT
        assert config.status_interval_seconds == 5

    def test_empty_yaml(self, tmp_path: Path) -> None:
        """Test an empty file yields defaults."""
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert ModelIntegrationConfig.from_yaml(path).warehouse.port == 3008

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test a missing file raises ProtocolConfigurationError."""
        with pytest.raises(ProtocolConfigurationError, match="not found"):
            ModelIntegrationConfig.from_yaml(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        """Test malformed YAML raises ProtocolConfigurationError."""
        path = tmp_path / "bad.yaml"
        path.write_text("broker: [unclosed\n", encoding="utf-8")
        with pytest.raises(ProtocolConfigurationError, match="Invalid YAML"):
            ModelIntegrationConfig.from_yaml(path)

    def test_non_mapping_root(self, tmp_path: Path) -> None:
        """Test a list at the root is rejected."""
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ProtocolConfigurationError, match="must be a mapping"):
            ModelIntegrationConfig.from_yaml(path)

    def test_unknown_section(self) -> None:
        """Test unknown top-level sections are rejected."""
        with pytest.raises(ProtocolConfigurationError, match="Unknown"):
            ModelIntegrationConfig.from_mapping({"postgres": {}})

    def test_unknown_field_in_section(self) -> None:
        """Test unknown keys inside a section are rejected."""
        with pytest.raises(ProtocolConfigurationError):
            ModelIntegrationConfig.from_mapping({"warehouse": {"hots": "typo"}})


class TestMaskedDump:
    """Secrets never appear in the display dump."""

    def test_api_key_masked(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test the optimizer key is masked."""
        monkeypatch.setenv("ROS_API_KEY", "super-secret-key")
        dump = ModelIntegrationConfig.default().masked_dump()
        assert "super-secret-key" not in str(dump)
        route_optimizer = dump["route_optimizer"]
        assert isinstance(route_optimizer, dict)
        assert route_optimizer["api_key"] == "**********"
