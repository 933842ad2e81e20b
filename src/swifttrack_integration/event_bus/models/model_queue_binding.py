# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Queue binding declaration."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from swifttrack_integration.utils import routing_key_matches


class ModelQueueBinding(BaseModel):
    """A (topic, routing-key pattern) pair a queue receives copies from.

    Frozen and therefore hashable, so a queue's bindings form a set and
    re-declaring an existing binding is a no-op.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    topic: str
    pattern: str

    def matches(self, topic: str, routing_key: str) -> bool:
        return topic == self.topic and routing_key_matches(self.pattern, routing_key)


__all__ = ["ModelQueueBinding"]
