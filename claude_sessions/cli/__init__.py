"""CLI utilities package for the session store.

Modules:
    output: OutputManager for consistent CLI output with color/quiet support
    errors: Structured error types with recovery suggestions
"""

from .errors import (
    AliasError,
    CLIError,
    ErrorCategory,
    SessionNotFoundError,
    SessionWriteError,
    ValidationError,
    handle_exception,
)
from .output import OutputConfig, OutputManager, should_use_color

__all__ = [
    # Output
    "OutputConfig",
    "OutputManager",
    "should_use_color",
    # Errors
    "CLIError",
    "ErrorCategory",
    "AliasError",
    "SessionNotFoundError",
    "SessionWriteError",
    "ValidationError",
    "handle_exception",
]
