"""Centralized logging configuration for the session store.

Provides:
- Structured JSON logging support
- Rotating file logs under ~/.claude/logs/
- Category loggers for the session, alias and CLI components
"""

import json
import logging
import logging.handlers
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path

LOGGER_NAME = "claude_sessions"


class LogCategory(Enum):
    """Log categories for the store components."""

    SESSION = "session"
    ALIASES = "aliases"
    CLI = "cli"


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record as JSON.

        Args:
            record: The log record to format.

        Returns:
            JSON string representation of the log entry.
        """
        log_entry: dict = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "message": record.getMessage(),
        }

        extra_fields = ["session_path", "alias", "operation"]
        for field in extra_fields:
            if hasattr(record, field):
                log_entry[field] = getattr(record, field)

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry)


def get_default_log_file(claude_dir: Path | None = None) -> Path:
    """Get the default log file path (~/.claude/logs/claude-sessions.log)."""
    base = claude_dir or Path.home() / ".claude"
    log_dir = base / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir / "claude-sessions.log"


def setup_logging(
    level: str = "INFO",
    quiet: bool = False,
    verbose: bool = False,
    log_file: Path | None = None,
    log_format: str = "text",
    rotation_count: int = 3,
    max_bytes: int = 1048576,
) -> "logging.Logger":
    """Setup global logging configuration.

    Args:
        level: Base log level (DEBUG, INFO, WARNING, ERROR).
        quiet: Suppress console output.
        verbose: Enable debug-level console output.
        log_file: Optional log file path; no file logging when None.
        log_format: File output format ("text" or "json").
        rotation_count: Number of backup files (default 3).
        max_bytes: Max file size before rotation (default 1MB).

    Returns:
        Configured logger instance.
    """
    import logging.config

    if verbose:
        effective_level = "DEBUG"
    else:
        effective_level = level.upper()

    config: dict = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "detailed": {
                "format": "%(asctime)s | %(levelname)-8s | %(name)s:%(funcName)s:%(lineno)d - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "simple": {"format": "%(levelname)s | %(message)s"},
            "json": {
                "()": JSONFormatter,
            },
        },
        "handlers": {},
        "loggers": {LOGGER_NAME: {"handlers": [], "level": "DEBUG", "propagate": False}},
    }

    file_formatter = "json" if log_format == "json" else "detailed"

    if not quiet:
        config["handlers"]["console"] = {
            "class": "logging.StreamHandler",
            "formatter": "simple",
            "level": effective_level,
            "stream": "ext://sys.stderr",
        }
        config["loggers"][LOGGER_NAME]["handlers"].append("console")

    if log_file:
        config["handlers"]["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "formatter": file_formatter,
            "level": "DEBUG",
            "filename": str(log_file),
            "maxBytes": max_bytes,
            "backupCount": rotation_count,
        }
        config["loggers"][LOGGER_NAME]["handlers"].append("file")

    logging.config.dictConfig(config)
    return logging.getLogger(LOGGER_NAME)


def get_logger() -> "logging.Logger":
    """Get the global logger instance."""
    return logging.getLogger(LOGGER_NAME)


def get_category_logger(category: LogCategory) -> "logging.Logger":
    """Get a logger for a specific category.

    Category loggers are children of the global logger, so they share its
    handlers.

    Example:
        >>> logger = get_category_logger(LogCategory.ALIASES)
        >>> logger.debug("Saved alias index")
    """
    return logging.getLogger(f"{LOGGER_NAME}.{category.value}")
