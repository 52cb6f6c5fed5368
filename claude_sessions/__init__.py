"""Claude Sessions - session notes and session aliases for Claude Code."""

__version__ = "1.0.0"
