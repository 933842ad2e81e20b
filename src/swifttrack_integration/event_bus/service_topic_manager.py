# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Kafka topic provisioning for the broker topology.

Asserts the configured topics (``orders``, ``users``, ``logistics``,
``notifications``) with AIOKafkaAdminClient. Creating a topic that already
exists is a no-op, so the broker client calls this on every connect.

Design:
    - Idempotent: TopicAlreadyExistsError counts as "existing"
    - Per-topic failures are logged and reported, never raised
    - An unreachable broker is reported as status "unavailable"
"""

from __future__ import annotations

import logging
from uuid import UUID, uuid4

from aiokafka.admin import AIOKafkaAdminClient, NewTopic
from aiokafka.errors import TopicAlreadyExistsError

from swifttrack_integration.utils import sanitize_error_message

logger = logging.getLogger(__name__)

DEFAULT_TOPIC_PARTITIONS = 3
DEFAULT_TOPIC_REPLICATION_FACTOR = 1


class TopicProvisioner:
    """Creates missing broker topics.

    Example:
        >>> provisioner = TopicProvisioner("localhost:9092")
        >>> await provisioner.ensure_topics_exist(["orders", "users"])
    """

    def __init__(
        self,
        bootstrap_servers: str,
        request_timeout_ms: int = 30000,
        partitions: int = DEFAULT_TOPIC_PARTITIONS,
        replication_factor: int = DEFAULT_TOPIC_REPLICATION_FACTOR,
        client_id: str = "swifttrack-integration-admin",
    ) -> None:
        self._bootstrap_servers = bootstrap_servers
        self._request_timeout_ms = request_timeout_ms
        self._partitions = partitions
        self._replication_factor = replication_factor
        self._client_id = client_id

    async def ensure_topics_exist(
        self,
        topics: list[str],
        correlation_id: UUID | None = None,
    ) -> dict[str, list[str] | str]:
        """Ensure every topic in ``topics`` exists.

        Returns:
            Summary dict with:
                - created: Newly created topic names
                - existing: Topics that already existed
                - failed: Topics that could not be created or were not attempted
                - status: "success", "partial", or "unavailable"
        """
        correlation_id = correlation_id or uuid4()
        created: list[str] = []
        existing: list[str] = []
        failed: list[str] = []

        admin = AIOKafkaAdminClient(
            bootstrap_servers=self._bootstrap_servers,
            request_timeout_ms=self._request_timeout_ms,
            client_id=self._client_id,
        )
        try:
            await admin.start()

            for topic in topics:
                try:
                    await admin.create_topics(
                        [
                            NewTopic(
                                name=topic,
                                num_partitions=self._partitions,
                                replication_factor=self._replication_factor,
                            )
                        ]
                    )
                    created.append(topic)
                    logger.info(
                        "Created topic: %s (partitions=%d)",
                        topic,
                        self._partitions,
                        extra={"correlation_id": str(correlation_id)},
                    )
                except TopicAlreadyExistsError:
                    existing.append(topic)
                    logger.debug(
                        "Topic already exists: %s",
                        topic,
                        extra={"correlation_id": str(correlation_id)},
                    )
                except Exception as e:
                    failed.append(topic)
                    logger.warning(
                        "Failed to create topic %s: %s",
                        topic,
                        type(e).__name__,
                        extra={
                            "correlation_id": str(correlation_id),
                            "error": sanitize_error_message(e),
                        },
                    )

        except Exception as e:
            logger.warning(
                "Topic assertion interrupted by %s",
                type(e).__name__,
                extra={
                    "correlation_id": str(correlation_id),
                    "error": sanitize_error_message(e),
                },
            )
            resolved = set(created) | set(existing) | set(failed)
            not_attempted = [t for t in topics if t not in resolved]
            return {
                "created": created,
                "existing": existing,
                "failed": failed + not_attempted,
                "status": "partial" if (created or existing) else "unavailable",
            }

        finally:
            try:
                await admin.close()
            except Exception as e:
                logger.debug(
                    "Error closing admin client: %s",
                    type(e).__name__,
                    extra={"correlation_id": str(correlation_id)},
                )

        status = (
            "success"
            if not failed
            else ("partial" if created or existing else "unavailable")
        )
        logger.info(
            "Topic assertion complete",
            extra={
                "created_count": len(created),
                "existing_count": len(existing),
                "failed_count": len(failed),
                "status": status,
                "correlation_id": str(correlation_id),
            },
        )
        return {
            "created": created,
            "existing": existing,
            "failed": failed,
            "status": status,
        }


__all__: list[str] = ["TopicProvisioner"]
