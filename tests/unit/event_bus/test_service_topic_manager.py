# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Unit tests for TopicProvisioner with the admin client mocked out."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from aiokafka.errors import KafkaConnectionError, TopicAlreadyExistsError

from swifttrack_integration.event_bus import TopicProvisioner

_ADMIN = "swifttrack_integration.event_bus.service_topic_manager.AIOKafkaAdminClient"


@pytest.fixture
def admin() -> MagicMock:
    mock = MagicMock()
    mock.start = AsyncMock()
    mock.close = AsyncMock()
    mock.create_topics = AsyncMock()
    return mock


class TestEnsureTopicsExist:
    """Idempotent topic assertion."""

    @pytest.mark.asyncio
    async def test_creates_missing_topics(self, admin: MagicMock) -> None:
        """Test every topic is created with the configured partitions."""
        with patch(_ADMIN, return_value=admin):
            result = await TopicProvisioner("kafka:9092", partitions=6).ensure_topics_exist(
                ["orders", "users"]
            )
        assert result == {
            "created": ["orders", "users"],
            "existing": [],
            "failed": [],
            "status": "success",
        }
        new_topic = admin.create_topics.await_args_list[0].args[0][0]
        assert new_topic.num_partitions == 6
        admin.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_existing_topics_are_not_failures(self, admin: MagicMock) -> None:
        """Test TopicAlreadyExistsError counts as existing."""
        admin.create_topics.side_effect = [TopicAlreadyExistsError(), None]
        with patch(_ADMIN, return_value=admin):
            result = await TopicProvisioner("kafka:9092").ensure_topics_exist(
                ["orders", "users"]
            )
        assert result["existing"] == ["orders"]
        assert result["created"] == ["users"]
        assert result["status"] == "success"

    @pytest.mark.asyncio
    async def test_unreachable_broker(self, admin: MagicMock) -> None:
        """Test a failed admin start reports every topic as failed."""
        admin.start.side_effect = KafkaConnectionError()
        with patch(_ADMIN, return_value=admin):
            result = await TopicProvisioner("kafka:9092").ensure_topics_exist(
                ["orders", "users"]
            )
        assert result["status"] == "unavailable"
        assert result["failed"] == ["orders", "users"]

    @pytest.mark.asyncio
    async def test_partial_failure(self, admin: MagicMock) -> None:
        """Test one failed topic yields a partial status."""
        admin.create_topics.side_effect = [None, RuntimeError("policy violation")]
        with patch(_ADMIN, return_value=admin):
            result = await TopicProvisioner("kafka:9092").ensure_topics_exist(
                ["orders", "users"]
            )
        assert result["status"] == "partial"
        assert result["failed"] == ["users"]
