"""Centralized output manager for the CLI with color and quiet mode support.

Supports the NO_COLOR environment variable, a --no-color flag, quiet mode,
and plain-text symbol fallbacks.

Following the NO_COLOR standard: https://no-color.org/
"""

from __future__ import annotations

import json
import os
import sys
from dataclasses import dataclass, field
from typing import Any, TextIO

import click


def should_use_color(
    explicit_flag: bool | None = None,
    stream: TextIO | None = None,
) -> bool:
    """Determine if color output should be used.

    Priority order:
    1. Explicit flag (if passed)
    2. NO_COLOR / FORCE_COLOR environment variables
    3. TTY detection (only colorize if output is a terminal)

    Args:
        explicit_flag: True = force colors, False = no colors, None = auto-detect
        stream: Output stream to check for TTY. Defaults to stdout.

    Returns:
        True if colors should be used, False otherwise.
    """
    if explicit_flag is not None:
        return explicit_flag

    # Any value (including empty) means "no color"
    if "NO_COLOR" in os.environ:
        return False

    if "FORCE_COLOR" in os.environ:
        return True

    if stream is None:
        stream = sys.stdout
    if hasattr(stream, "isatty") and not stream.isatty():
        return False

    return True


@dataclass
class OutputConfig:
    """Configuration for CLI output behavior.

    Attributes:
        use_color: Whether to use ANSI color codes in output.
        quiet: Suppress all output except errors and requested data.
        verbose: Enable detailed debug output.
        stream: Output stream (default: stdout).
        err_stream: Error stream (default: stderr).
    """

    use_color: bool = True
    quiet: bool = False
    verbose: bool = False
    stream: TextIO = field(default_factory=lambda: sys.stdout)
    err_stream: TextIO = field(default_factory=lambda: sys.stderr)

    @classmethod
    def from_flags(
        cls,
        verbose: bool = False,
        quiet: bool = False,
        no_color: bool = False,
    ) -> OutputConfig:
        """Create OutputConfig from CLI flags."""
        use_color = should_use_color(explicit_flag=False if no_color else None)
        return cls(use_color=use_color, quiet=quiet, verbose=verbose)


class OutputManager:
    """Centralized output handler for the CLI.

    Example:
        >>> output = OutputManager(OutputConfig(use_color=False))
        >>> output.success("Alias 'work' created")
        [OK] Alias 'work' created
    """

    COLORS = {
        "green": "\033[92m",
        "red": "\033[91m",
        "yellow": "\033[93m",
        "cyan": "\033[96m",
        "bold": "\033[1m",
        "dim": "\033[2m",
        "reset": "\033[0m",
    }

    SYMBOLS = {
        "success": {"color": "\033[92m✓\033[0m", "plain": "[OK]"},
        "error": {"color": "\033[91m✗\033[0m", "plain": "[FAIL]"},
        "warning": {"color": "\033[93m⚠\033[0m", "plain": "[WARN]"},
        "info": {"color": "\033[94mℹ\033[0m", "plain": "[INFO]"},
    }

    def __init__(self, config: OutputConfig | None = None):
        self.config = config or OutputConfig()

    def _get_symbol(self, symbol_type: str) -> str:
        symbol_data = self.SYMBOLS.get(symbol_type, self.SYMBOLS["info"])
        return symbol_data["color"] if self.config.use_color else symbol_data["plain"]

    def colorize(self, text: str, color: str) -> str:
        """Apply color to text if colors are enabled.

        Args:
            text: Text to colorize.
            color: Key into COLORS (e.g. "cyan").

        Returns:
            Colored text, or the text unchanged when colors are off.
        """
        if not self.config.use_color:
            return text
        return f"{self.COLORS.get(color, '')}{text}{self.COLORS['reset']}"

    def _output(
        self,
        message: str,
        symbol_type: str | None = None,
        err: bool = False,
        force: bool = False,
    ) -> None:
        """Output a message with optional symbol prefix.

        Args:
            message: Message to output.
            symbol_type: Type of symbol to prefix (or None for no symbol).
            err: Output to stderr instead of stdout.
            force: Output even in quiet mode.
        """
        if self.config.quiet and not err and not force:
            return

        stream = self.config.err_stream if err else self.config.stream
        line = f"{self._get_symbol(symbol_type)} {message}" if symbol_type else message
        click.echo(line, file=stream)

    def success(self, message: str, force: bool = False) -> None:
        """Output a success message.

        Args:
            message: Success message.
            force: Output even in quiet mode.
        """
        self._output(message, symbol_type="success", force=force)

    def error(self, message: str) -> None:
        """Output an error message (always shown, even in quiet mode).

        Args:
            message: Error message.
        """
        self._output(message, symbol_type="error", err=True, force=True)

    def warning(self, message: str, force: bool = False) -> None:
        """Output a warning message.

        Args:
            message: Warning message.
            force: Output even in quiet mode.
        """
        self._output(message, symbol_type="warning", force=force)

    def info(self, message: str) -> None:
        """Output an info message (suppressed in quiet mode).

        Args:
            message: Info message.
        """
        self._output(message, symbol_type="info")

    def debug(self, message: str) -> None:
        """Output a debug message (only in verbose mode).

        Args:
            message: Debug message.
        """
        if not self.config.verbose:
            return
        self._output(f"DEBUG: {self.colorize(message, 'dim')}")

    def header(self, title: str) -> None:
        """Output a header line (bold if colors enabled).

        Args:
            title: Header title, underlined with '='.
        """
        if self.config.quiet:
            return
        self._output(self.colorize(title, "bold"))
        self._output("=" * len(title))

    def plain(self, message: str, force: bool = False) -> None:
        """Output plain text without symbol prefix.

        Args:
            message: Plain text message.
            force: Output even in quiet mode.
        """
        self._output(message, force=force)

    def json(self, data: Any) -> None:
        """Output data as indented JSON (shown even in quiet mode).

        Args:
            data: JSON-serializable value, e.g. a SessionPage.to_dict().
        """
        self._output(json.dumps(data, indent=2), force=True)
