"""
Filename-derived session identity.

Session files come in two generations:
- YYYY-MM-DD-session.tmp (legacy, no short id)
- YYYY-MM-DD-<short-id>-session.tmp (current, short id of 8+ lowercase
  alphanumerics)

Both are modelled as separate identity types so that matching logic can
branch on the variant instead of comparing against a placeholder id.
"""

import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import ClassVar

SESSION_EXTENSION = ".tmp"
NO_ID = "no-id"
SHORT_ID_LENGTH = 8


def session_filename_regex(extension: str = SESSION_EXTENSION) -> re.Pattern[str]:
    """Build the two-generation session filename pattern, for use with fullmatch."""
    return re.compile(
        r"(\d{4}-\d{2}-\d{2})(?:-([a-z0-9]{8,}))?-session" + re.escape(extension)
    )


SESSION_FILENAME_REGEX = session_filename_regex()


@dataclass(frozen=True)
class LegacyIdentity:
    """Identity of a session file predating short ids."""

    filename: str
    date_str: str
    date: date

    is_legacy: ClassVar[bool] = True

    @property
    def short_id(self) -> str:
        """Display id for legacy files."""
        return NO_ID

    def matches(self, session_id: str, extension: str = SESSION_EXTENSION) -> bool:
        """Check if a user-supplied id refers to this file.

        Legacy files match by exact filename (with or without extension) or
        by the date prefix that reconstructs the legacy filename.
        """
        return (
            self.filename in (session_id, f"{session_id}{extension}")
            or self.filename == f"{session_id}-session{extension}"
        )


@dataclass(frozen=True)
class CurrentIdentity:
    """Identity of a session file carrying a short id."""

    filename: str
    date_str: str
    date: date
    short_id: str

    is_legacy: ClassVar[bool] = False

    def matches(self, session_id: str, extension: str = SESSION_EXTENSION) -> bool:
        """Check if a user-supplied id refers to this file.

        Current files match by short id prefix or by exact filename (with or
        without extension).
        """
        if session_id and self.short_id.startswith(session_id):
            return True
        return self.filename in (session_id, f"{session_id}{extension}")


SessionIdentity = LegacyIdentity | CurrentIdentity


def parse_session_filename(
    filename: str,
    extension: str = SESSION_EXTENSION,
) -> SessionIdentity | None:
    """Parse a session filename into its identity.

    Args:
        filename: Bare filename, e.g. "2026-01-17-abc12345-session.tmp"
        extension: Session file extension

    Returns:
        LegacyIdentity or CurrentIdentity, or None when the name does not
        follow either generation (including impossible calendar dates)
    """
    pattern = (
        SESSION_FILENAME_REGEX
        if extension == SESSION_EXTENSION
        else session_filename_regex(extension)
    )
    match = pattern.fullmatch(filename)
    if not match:
        return None

    date_str, short_id = match.group(1), match.group(2)
    try:
        parsed_date = datetime.strptime(date_str, "%Y-%m-%d").date()
    except ValueError:
        return None

    if short_id is None:
        return LegacyIdentity(filename=filename, date_str=date_str, date=parsed_date)
    return CurrentIdentity(
        filename=filename,
        date_str=date_str,
        date=parsed_date,
        short_id=short_id,
    )


def build_session_filename(
    date_str: str,
    short_id: str | None = None,
    extension: str = SESSION_EXTENSION,
) -> str:
    """Build a session filename for either generation."""
    if short_id:
        return f"{date_str}-{short_id}-session{extension}"
    return f"{date_str}-session{extension}"


class ShortIdResolver:
    """Derive the short id for the running session.

    Uses the last characters of CLAUDE_SESSION_ID when present, then the
    project name, then a literal fallback.
    """

    ENV_VAR: ClassVar[str] = "CLAUDE_SESSION_ID"

    @classmethod
    def resolve(
        cls,
        environ: dict[str, str],
        project_name: str | None = None,
        fallback: str = "default",
    ) -> str:
        session_id = environ.get(cls.ENV_VAR, "")
        if session_id:
            return session_id[-SHORT_ID_LENGTH:]
        return project_name or fallback
