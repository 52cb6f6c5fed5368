"""Configuration model for the session store."""

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator


def default_claude_dir() -> Path:
    """Return the per-user Claude directory (~/.claude)."""
    return Path.home() / ".claude"


class StoreConfig(BaseModel):
    """Store configuration with validation.

    `sessions_dir` and `aliases_file` default to locations under
    `claude_dir` when left unset.
    """

    claude_dir: Path = Field(default_factory=default_claude_dir)
    sessions_dir: Path | None = Field(default=None)
    aliases_file: Path | None = Field(default=None)

    session_extension: str = Field(default=".tmp")

    # Query defaults
    default_list_limit: int = Field(default=50, ge=1, le=10000)
    recent_days: int = Field(default=7, ge=0)

    # Logging
    log_level: str = Field(default="WARNING")
    log_format: str = Field(default="text")
    log_to_file: bool = Field(default=False)

    @field_validator("session_extension")
    @classmethod
    def validate_extension(cls, v: Any) -> str:
        v = str(v).strip()
        if not v:
            raise ValueError("Session extension cannot be empty")
        return v if v.startswith(".") else f".{v}"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: Any) -> str:
        level = str(v).upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: Any) -> str:
        if v not in ("text", "json"):
            raise ValueError("Log format must be 'text' or 'json'")
        return v

    @property
    def resolved_sessions_dir(self) -> Path:
        """Sessions directory (explicit or <claude_dir>/sessions)."""
        return Path(self.sessions_dir) if self.sessions_dir else self.claude_dir / "sessions"

    @property
    def resolved_aliases_file(self) -> Path:
        """Alias index path (explicit or <claude_dir>/session-aliases.json)."""
        if self.aliases_file:
            return Path(self.aliases_file)
        return self.claude_dir / "session-aliases.json"
