# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Routing key validation and topic-pattern matching.

Routing keys are dot-separated words (``order.created``,
``wms.package.ready``). Binding patterns use two wildcards:

    ``*``  matches exactly one word
    ``#``  matches zero or more words

Example:
    >>> routing_key_matches("order.*", "order.created")
    True
    >>> routing_key_matches("order.*", "order.status.updated")
    False
    >>> routing_key_matches("wms.#", "wms.package.ready")
    True
    >>> routing_key_matches("#", "anything.at.all")
    True
"""

from __future__ import annotations

import re
from functools import lru_cache
from uuid import UUID

from swifttrack_integration.enums import EnumInfraTransportType
from swifttrack_integration.errors import (
    ModelInfraErrorContext,
    ProtocolConfigurationError,
)

_VALID_WORD_RE = re.compile(r"^[A-Za-z0-9_-]+$")
_MAX_ROUTING_KEY_LENGTH = 255
_INVALID_WORD_CHARS_RE = re.compile(r"[^A-Za-z0-9_-]+")
_MAX_SUFFIX_LENGTH = 128


def validate_routing_key(
    routing_key: str,
    *,
    allow_wildcards: bool = False,
    correlation_id: UUID | None = None,
) -> None:
    """Validate a routing key, or a binding pattern when ``allow_wildcards``.

    Raises:
        ProtocolConfigurationError: On an empty key, an empty word (``a..b``),
            a word with characters outside ``[A-Za-z0-9_-]``, or a wildcard
            where wildcards are not allowed.
    """
    context = ModelInfraErrorContext.with_correlation(
        correlation_id=correlation_id,
        transport_type=EnumInfraTransportType.KAFKA,
        operation="validate_routing_key",
    )
    if not routing_key:
        raise ProtocolConfigurationError(
            "Routing key cannot be empty", context=context
        )
    if len(routing_key) > _MAX_ROUTING_KEY_LENGTH:
        raise ProtocolConfigurationError(
            f"Routing key exceeds {_MAX_ROUTING_KEY_LENGTH} characters",
            context=context,
            routing_key=routing_key[:64],
        )
    for word in routing_key.split("."):
        if allow_wildcards and word in ("*", "#"):
            continue
        if not _VALID_WORD_RE.match(word):
            raise ProtocolConfigurationError(
                f"Invalid routing key '{routing_key}': bad word '{word}'",
                context=context,
                routing_key=routing_key,
            )


def normalize_routing_key_suffix(text: str, *, fallback: str = "unknown") -> str:
    """Turn free text into dot-separated words that pass ``validate_routing_key``.

    Runs of invalid characters become ``_`` and empty words are dropped.

    Example:
        >>> normalize_routing_key_suffix("package ready!")
        'package_ready_'
        >>> normalize_routing_key_suffix("..")
        'unknown'
    """
    words = [
        _INVALID_WORD_CHARS_RE.sub("_", word)
        for word in text[:_MAX_SUFFIX_LENGTH].split(".")
        if word
    ]
    return ".".join(words) or fallback


def _match_words(pattern: tuple[str, ...], words: tuple[str, ...]) -> bool:
    if not pattern:
        return not words
    head, rest = pattern[0], pattern[1:]
    if head == "#":
        return any(_match_words(rest, words[i:]) for i in range(len(words) + 1))
    if not words:
        return False
    if head == "*" or head == words[0]:
        return _match_words(rest, words[1:])
    return False


@lru_cache(maxsize=1024)
def routing_key_matches(pattern: str, routing_key: str) -> bool:
    """Return True when ``routing_key`` matches the binding ``pattern``."""
    if pattern == routing_key or pattern == "#":
        return True
    return _match_words(tuple(pattern.split(".")), tuple(routing_key.split(".")))


__all__: list[str] = [
    "normalize_routing_key_suffix",
    "routing_key_matches",
    "validate_routing_key",
]
