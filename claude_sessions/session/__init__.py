"""
Session files for Claude Code.

Sessions are Markdown documents stored one per file in ~/.claude/sessions/,
named either:
- YYYY-MM-DD-session.tmp (legacy)
- YYYY-MM-DD-<short-id>-session.tmp (current)

Key components:
- SessionRepository: list, resolve, read and write session files
- parse_session_filename: filename to LegacyIdentity / CurrentIdentity
- parse_session_metadata: lenient extraction of title, checklists and notes
"""

from .identity import (
    NO_ID,
    CurrentIdentity,
    LegacyIdentity,
    SessionIdentity,
    ShortIdResolver,
    build_session_filename,
    parse_session_filename,
)
from .metadata import (
    SessionMetadata,
    SessionStats,
    compute_session_stats,
    parse_session_metadata,
)
from .repository import Session, SessionPage, SessionRepository
from .template import render_session_template

__all__ = [
    "NO_ID",
    "CurrentIdentity",
    "LegacyIdentity",
    "SessionIdentity",
    "ShortIdResolver",
    "build_session_filename",
    "parse_session_filename",
    "SessionMetadata",
    "SessionStats",
    "compute_session_stats",
    "parse_session_metadata",
    "Session",
    "SessionPage",
    "SessionRepository",
    "render_session_template",
]
