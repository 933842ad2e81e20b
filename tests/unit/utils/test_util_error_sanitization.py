# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Unit tests for error message sanitization."""

from swifttrack_integration.utils import sanitize_error_message, sanitize_error_string


class TestSanitizeErrorMessage:
    """Exceptions are rendered as ``Type: message`` with secrets redacted."""

    def test_plain_message(self) -> None:
        """Test a harmless message passes through with its type."""
        assert sanitize_error_message(ValueError("bad input")) == "ValueError: bad input"

    def test_bearer_token_redacted(self) -> None:
        """Test bearer credentials never reach the output."""
        result = sanitize_error_message(RuntimeError("Bearer abc123 rejected"))
        assert "abc123" not in result
        assert result.startswith("RuntimeError: [REDACTED")

    def test_truncation(self) -> None:
        """Test long messages are truncated."""
        result = sanitize_error_message(ValueError("x" * 50), max_length=10)
        assert result == "ValueError: " + "x" * 10 + "... [truncated]"


class TestSanitizeErrorString:
    """Raw strings follow the same rules without a type prefix."""

    def test_empty(self) -> None:
        """Test empty input yields empty output."""
        assert sanitize_error_string("") == ""

    def test_kafka_url_redacted(self) -> None:
        """Test broker URLs with credentials are redacted."""
        assert "REDACTED" in sanitize_error_string("kafka://user:pw@host:9092")
