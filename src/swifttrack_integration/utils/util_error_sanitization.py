# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Error message sanitization utilities.

Error text is sanitized before it is:
- Logged by a bridge or the broker client
- Published inside a failure event (e.g. ``route.optimization.failed``)

Sanitization protects against leaking the optimizer API key, bearer tokens
and credentials embedded in broker or endpoint URLs.

Example:
    >>> try:
    ...     raise ValueError("Auth failed with Bearer abc123")
    ... except Exception as e:
    ...     safe_msg = sanitize_error_message(e)
    >>> "abc123" not in safe_msg
    True
"""

from __future__ import annotations

# Checked case-insensitively against the error text.
SENSITIVE_PATTERNS: tuple[str, ...] = (
    "password",
    "passwd",
    "secret",
    "token",
    "api_key",
    "apikey",
    "api-key",
    "x-api-key",
    "credential",
    "bearer",
    "authorization",
    "user:pass",
    "sasl",
    "amqp://",
    "amqps://",
    "kafka://",
)


def sanitize_error_string(error_str: str, max_length: int = 500) -> str:
    """Sanitize a raw error string for safe inclusion in logs and events.

    Args:
        error_str: The error string to sanitize
        max_length: Maximum length of the sanitized message (default 500)

    Returns:
        The string unchanged, truncated, or replaced by a redaction marker.
    """
    if not error_str:
        return ""

    error_lower = error_str.lower()
    for pattern in SENSITIVE_PATTERNS:
        if pattern in error_lower:
            return "[REDACTED - potentially sensitive data]"

    if len(error_str) > max_length:
        return error_str[:max_length] + "... [truncated]"

    return error_str


def sanitize_error_message(exception: BaseException, max_length: int = 500) -> str:
    """Sanitize an exception for logs and published failure events.

    Returns:
        ``"{ExceptionType}: {sanitized_message}"``

    Example:
        >>> sanitize_error_message(ValueError("bad input"))
        'ValueError: bad input'
    """
    exception_type = type(exception).__name__
    exception_str = str(exception)

    exception_lower = exception_str.lower()
    for pattern in SENSITIVE_PATTERNS:
        if pattern in exception_lower:
            return f"{exception_type}: [REDACTED - potentially sensitive data]"

    if len(exception_str) > max_length:
        exception_str = exception_str[:max_length] + "... [truncated]"

    return f"{exception_type}: {exception_str}"


__all__: list[str] = [
    "SENSITIVE_PATTERNS",
    "sanitize_error_message",
    "sanitize_error_string",
]
