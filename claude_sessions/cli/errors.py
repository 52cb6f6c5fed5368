"""Structured error types for the CLI with recovery suggestions.

The session and alias stores never raise; the CLI turns their falsy results
into these errors so that every failure prints consistently and maps to an
exit code.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(Enum):
    """Categories of CLI errors for organization and handling."""

    NOT_FOUND = "not_found"  # Missing session or alias
    VALIDATION = "validation"  # Invalid arguments or alias names
    FILE_SYSTEM = "file_system"  # Write/delete failures
    RUNTIME = "runtime"  # Unexpected errors


@dataclass
class CLIError(Exception):
    """Base class for structured CLI errors with recovery suggestions.

    Attributes:
        category: Error category for grouping.
        message: Human-readable error message.
        suggestion: Optional actionable recovery suggestion.
        details: Optional additional details dict.
        exit_code: Exit code to use when this error causes termination.
    """

    category: ErrorCategory
    message: str
    suggestion: str | None = None
    details: dict[str, Any] | None = field(default_factory=dict)
    exit_code: int = 1

    def __post_init__(self) -> None:
        super().__init__(self.message)

    def format(self, use_color: bool = True) -> str:
        """Format the error for display.

        Args:
            use_color: Whether to include ANSI color codes.

        Returns:
            Formatted error string with suggestion if available.
        """
        red = "\033[91m" if use_color else ""
        cyan = "\033[96m" if use_color else ""
        dim = "\033[2m" if use_color else ""
        reset = "\033[0m" if use_color else ""

        lines = [f"{red}Error:{reset} {self.message}"]

        if self.suggestion:
            lines.append(f"{cyan}Suggestion:{reset} {self.suggestion}")

        if self.details:
            for key, value in self.details.items():
                lines.append(f"{dim}  {key}: {value}{reset}")

        return "\n".join(lines)

    def __str__(self) -> str:
        return self.format(use_color=False)


class SessionNotFoundError(CLIError):
    """No session matched the given id or alias."""

    def __init__(self, session_id: str):
        super().__init__(
            category=ErrorCategory.NOT_FOUND,
            message=f"Session not found: {session_id}",
            suggestion="Run 'claude-sessions list' to see available sessions",
            details={"session": session_id},
            exit_code=1,
        )


class AliasError(CLIError):
    """An alias operation was rejected or could not be saved."""

    def __init__(self, message: str, alias: str | None = None):
        super().__init__(
            category=ErrorCategory.VALIDATION,
            message=message,
            suggestion="Run 'claude-sessions alias list' to see existing aliases",
            details={"alias": alias} if alias else None,
            exit_code=1,
        )


class SessionWriteError(CLIError):
    """A session file could not be changed."""

    def __init__(self, message: str, path: str | None = None):
        super().__init__(
            category=ErrorCategory.FILE_SYSTEM,
            message=message,
            suggestion="Check that the sessions directory is writable",
            details={"path": path} if path else None,
            exit_code=1,
        )


class ValidationError(CLIError):
    """Error for invalid CLI arguments or input."""

    def __init__(self, message: str, suggestion: str | None = None):
        super().__init__(
            category=ErrorCategory.VALIDATION,
            message=message,
            suggestion=suggestion or "Check the command syntax with --help",
            exit_code=2,
        )


def handle_exception(
    error: Exception,
    use_color: bool = True,
    verbose: bool = False,
) -> tuple[str, int]:
    """Convert any exception to formatted output and exit code.

    Args:
        error: The exception to handle.
        use_color: Whether to use color in output.
        verbose: Whether to include full traceback.

    Returns:
        Tuple of (formatted_message, exit_code).
    """
    import traceback

    if isinstance(error, CLIError):
        message = error.format(use_color=use_color)
        exit_code = error.exit_code
    else:
        red = "\033[91m" if use_color else ""
        reset = "\033[0m" if use_color else ""
        message = f"{red}Error:{reset} {str(error)}"
        exit_code = 1

    if verbose:
        message += "\n\nTraceback:\n" + traceback.format_exc()

    return message, exit_code
