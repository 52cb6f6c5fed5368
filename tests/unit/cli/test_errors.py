"""Tests for CLI error handling module."""

from __future__ import annotations

import pytest

from claude_sessions.cli.errors import (
    AliasError,
    CLIError,
    ErrorCategory,
    SessionNotFoundError,
    SessionWriteError,
    ValidationError,
    handle_exception,
)


class TestErrorCategory:
    """Tests for ErrorCategory enum."""

    def test_categories_exist(self):
        """Test that all expected categories exist."""
        assert ErrorCategory.NOT_FOUND.value == "not_found"
        assert ErrorCategory.VALIDATION.value == "validation"
        assert ErrorCategory.FILE_SYSTEM.value == "file_system"
        assert ErrorCategory.RUNTIME.value == "runtime"


class TestCLIError:
    """Tests for base CLIError class."""

    def test_basic_error(self):
        error = CLIError(category=ErrorCategory.RUNTIME, message="Something went wrong")

        assert error.category == ErrorCategory.RUNTIME
        assert error.message == "Something went wrong"
        assert error.exit_code == 1
        assert error.suggestion is None

    def test_is_raisable(self):
        with pytest.raises(CLIError, match="boom"):
            raise CLIError(category=ErrorCategory.RUNTIME, message="boom")

    def test_format_without_color(self):
        """Test formatting includes suggestion and details lines."""
        error = CLIError(
            category=ErrorCategory.RUNTIME,
            message="Something went wrong",
            suggestion="Try again",
            details={"key": "value"},
        )
        formatted = error.format(use_color=False)

        assert "Error: Something went wrong" in formatted
        assert "Suggestion: Try again" in formatted
        assert "key: value" in formatted
        assert "\033[" not in formatted

    def test_format_with_color(self):
        error = CLIError(category=ErrorCategory.RUNTIME, message="Oops")
        assert "\033[91m" in error.format(use_color=True)

    def test_str_is_plain(self):
        error = CLIError(category=ErrorCategory.RUNTIME, message="Oops")
        assert str(error) == "Error: Oops"


class TestSpecificErrors:
    """Tests for the store-specific error classes."""

    def test_session_not_found(self):
        error = SessionNotFoundError("a1b2")

        assert error.category == ErrorCategory.NOT_FOUND
        assert "a1b2" in error.message
        assert "claude-sessions list" in error.suggestion
        assert error.details == {"session": "a1b2"}

    def test_alias_error(self):
        error = AliasError("Alias 'x' not found", alias="x")

        assert error.category == ErrorCategory.VALIDATION
        assert error.details == {"alias": "x"}
        assert error.exit_code == 1

    def test_alias_error_without_alias(self):
        assert not AliasError("Failed").details

    def test_session_write_error(self):
        error = SessionWriteError("Could not delete", path="/tmp/x.tmp")

        assert error.category == ErrorCategory.FILE_SYSTEM
        assert error.details == {"path": "/tmp/x.tmp"}

    def test_validation_error_exit_code(self):
        error = ValidationError("Bad option")

        assert error.exit_code == 2
        assert "--help" in error.suggestion


class TestHandleException:
    """Tests for handle_exception function."""

    def test_cli_error(self):
        message, code = handle_exception(ValidationError("Bad"), use_color=False)

        assert "Error: Bad" in message
        assert code == 2

    def test_generic_exception(self):
        message, code = handle_exception(RuntimeError("kaboom"), use_color=False)

        assert message == "Error: kaboom"
        assert code == 1

    def test_verbose_appends_traceback(self):
        try:
            raise RuntimeError("kaboom")
        except RuntimeError as e:
            message, _ = handle_exception(e, use_color=False, verbose=True)

        assert "Traceback" in message
