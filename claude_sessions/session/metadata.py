"""
Best-effort metadata extraction from session documents.

Session documents follow a loose Markdown convention:

    # Session: 2026-01-17
    **Date:** 2026-01-17
    **Started:** 09:30
    **Last Updated:** 11:05

    ### Completed
    - [x] Wire up the alias index

    ### In Progress
    - [ ] Pagination

    ### Notes for Next Session
    Check the backup path on Windows.

    ### Context to Load
    ```
    claude_sessions/aliases/index.py
    ```

Each field has its own extractor; a missing or malformed field falls back to
its default and never raises.
"""

import re
from dataclasses import asdict, dataclass, field
from typing import Any

TITLE_RE = re.compile(r"^#\s+(.+)$", re.MULTILINE)
DATE_RE = re.compile(r"\*\*Date:\*\*\s*(\d{4}-\d{2}-\d{2})")
STARTED_RE = re.compile(r"\*\*Started:\*\*\s*([\d:]+)")
LAST_UPDATED_RE = re.compile(r"\*\*Last Updated:\*\*\s*([\d:]+)")
LAST_UPDATED_LINE_RE = re.compile(r"\*\*Last Updated:\*\*.*")

COMPLETED_ITEM_RE = re.compile(r"- \[x\][ \t]*(.+)")
IN_PROGRESS_ITEM_RE = re.compile(r"- \[ \][ \t]*(.+)")
CONTEXT_RE = re.compile(r"### Context to Load\s*\n```\n(.*?)```", re.DOTALL)


def _section_re(heading: str) -> re.Pattern[str]:
    # Body runs until the next ###, a blank line, or end of content
    return re.compile(
        rf"### {re.escape(heading)}\s*\n(.*?)(?=###|\n\n|\Z)",
        re.DOTALL,
    )


COMPLETED_SECTION_RE = _section_re("Completed")
IN_PROGRESS_SECTION_RE = _section_re("In Progress")
NOTES_SECTION_RE = _section_re("Notes for Next Session")


@dataclass
class SessionMetadata:
    """Fields parsed from a session document."""

    title: str | None = None
    date: str | None = None
    started: str | None = None
    last_updated: str | None = None
    completed: list[str] = field(default_factory=list)
    in_progress: list[str] = field(default_factory=list)
    notes: str = ""
    context: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dictionary."""
        return asdict(self)


@dataclass
class SessionStats:
    """Summary counts for a session document."""

    total_items: int = 0
    completed_items: int = 0
    in_progress_items: int = 0
    line_count: int = 0
    has_notes: bool = False
    has_context: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dictionary."""
        return asdict(self)


def _first_group(pattern: re.Pattern[str], content: str) -> str | None:
    match = pattern.search(content)
    return match.group(1).strip() if match else None


def _checklist(
    section: re.Pattern[str], item: re.Pattern[str], content: str
) -> list[str]:
    match = section.search(content)
    if not match:
        return []
    return [m.group(1).strip() for m in item.finditer(match.group(1))]


def parse_session_metadata(content: str | None) -> SessionMetadata:
    """Extract metadata from session content.

    Args:
        content: Session document text (None is treated as empty)

    Returns:
        SessionMetadata with defaults for anything not found
    """
    metadata = SessionMetadata()
    if not content:
        return metadata

    metadata.title = _first_group(TITLE_RE, content)
    metadata.date = _first_group(DATE_RE, content)
    metadata.started = _first_group(STARTED_RE, content)
    metadata.last_updated = _first_group(LAST_UPDATED_RE, content)

    metadata.completed = _checklist(COMPLETED_SECTION_RE, COMPLETED_ITEM_RE, content)
    metadata.in_progress = _checklist(
        IN_PROGRESS_SECTION_RE, IN_PROGRESS_ITEM_RE, content
    )

    metadata.notes = _first_group(NOTES_SECTION_RE, content) or ""
    metadata.context = _first_group(CONTEXT_RE, content) or ""

    return metadata


def compute_session_stats(content: str | None) -> SessionStats:
    """Compute item counts and flags for session content."""
    metadata = parse_session_metadata(content)
    return SessionStats(
        total_items=len(metadata.completed) + len(metadata.in_progress),
        completed_items=len(metadata.completed),
        in_progress_items=len(metadata.in_progress),
        line_count=len(content.split("\n")) if content else 0,
        has_notes=bool(metadata.notes),
        has_context=bool(metadata.context),
    )


def replace_last_updated(content: str, time_str: str) -> str:
    """Replace the first **Last Updated:** line with a new time."""
    return LAST_UPDATED_LINE_RE.sub(f"**Last Updated:** {time_str}", content, count=1)
