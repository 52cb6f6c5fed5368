"""
Session repository for Claude Code session files.

Session files live in a single directory (~/.claude/sessions by default) and
are named after their date and optional short id. The repository lists,
resolves, reads and writes those files. It keeps no cache: every call goes to
the filesystem, and filesystem errors degrade to None/False/empty results.
"""

import os
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any

from ..sessions_logging import LogCategory, get_category_logger
from .identity import (
    SESSION_EXTENSION,
    SessionIdentity,
    build_session_filename,
    parse_session_filename,
)
from .metadata import (
    SessionMetadata,
    SessionStats,
    compute_session_stats,
    parse_session_metadata,
    replace_last_updated,
)
from .template import render_session_template

logger = get_category_logger(LogCategory.SESSION)

KB = 1024
MB = 1024 * 1024


@dataclass
class Session:
    """A session file on disk plus optional loaded content."""

    identity: SessionIdentity
    session_path: Path
    size: int
    modified_time: float
    created_time: float
    content: str | None = None
    metadata: SessionMetadata | None = None
    stats: SessionStats | None = None

    @property
    def filename(self) -> str:
        return self.identity.filename

    @property
    def short_id(self) -> str:
        return self.identity.short_id

    @property
    def date(self) -> str:
        return self.identity.date_str

    @property
    def is_legacy(self) -> bool:
        return self.identity.is_legacy

    @property
    def has_content(self) -> bool:
        return self.size > 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dictionary."""
        data: dict[str, Any] = {
            "filename": self.filename,
            "short_id": self.short_id,
            "date": self.date,
            "legacy": self.is_legacy,
            "session_path": str(self.session_path),
            "size": self.size,
            "has_content": self.has_content,
            "modified_time": datetime.fromtimestamp(self.modified_time).isoformat(),
            "created_time": datetime.fromtimestamp(self.created_time).isoformat(),
        }
        if self.content is not None:
            data["content"] = self.content
        if self.metadata is not None:
            data["metadata"] = self.metadata.to_dict()
        if self.stats is not None:
            data["stats"] = self.stats.to_dict()
        return data


@dataclass
class SessionPage:
    """One page of a session listing."""

    sessions: list[Session] = field(default_factory=list)
    total: int = 0
    offset: int = 0
    limit: int = 50
    has_more: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dictionary."""
        return {
            "sessions": [s.to_dict() for s in self.sessions],
            "total": self.total,
            "offset": self.offset,
            "limit": self.limit,
            "has_more": self.has_more,
        }


class SessionRepository:
    """Owns the session files in a sessions directory.

    Example:
        repo = SessionRepository(Path.home() / ".claude" / "sessions")
        page = repo.list_sessions(limit=10)
        for session in page.sessions:
            print(session.short_id, repo.format_size(session.session_path))

        session = repo.get_by_id("a1b2c3d4", include_content=True)
    """

    UNTITLED = "Untitled Session"

    def __init__(
        self,
        sessions_dir: Path,
        extension: str = SESSION_EXTENSION,
        clock: Callable[[], datetime] | None = None,
    ):
        """Initialize repository.

        Args:
            sessions_dir: Directory holding session files
            extension: Session file extension (default: .tmp)
            clock: Returns the current local time (default: datetime.now)
        """
        self.sessions_dir = Path(sessions_dir)
        self.extension = extension
        self._clock = clock or datetime.now

    def session_path(self, filename: str) -> Path:
        """Get the full path for a session filename."""
        return self.sessions_dir / filename

    def _iter_sessions(self) -> Iterator[Session]:
        """Yield every well-formed session file in enumeration order."""
        try:
            with os.scandir(self.sessions_dir) as it:
                entries = list(it)
        except OSError as e:
            logger.debug(f"Cannot scan sessions directory {self.sessions_dir}: {e}")
            return

        for entry in entries:
            try:
                if not entry.is_file() or not entry.name.endswith(self.extension):
                    continue
                identity = parse_session_filename(entry.name, self.extension)
                if identity is None:
                    continue
                stat = entry.stat()
            except OSError as e:
                logger.debug(f"Skipping {entry.name}: {e}")
                continue

            yield Session(
                identity=identity,
                session_path=Path(entry.path),
                size=stat.st_size,
                modified_time=stat.st_mtime,
                created_time=getattr(stat, "st_birthtime", stat.st_ctime),
            )

    @staticmethod
    def _newest_first(sessions: list[Session]) -> list[Session]:
        # sorted() is stable, so equal mtimes keep enumeration order
        return sorted(sessions, key=lambda s: s.modified_time, reverse=True)

    def list_sessions(
        self,
        limit: int = 50,
        offset: int = 0,
        date: str | None = None,
        search: str | None = None,
    ) -> SessionPage:
        """List sessions, newest first, with filtering and pagination.

        Args:
            limit: Maximum number of sessions to return
            offset: Number of sessions to skip
            date: Only include sessions for this YYYY-MM-DD date
            search: Only include sessions whose short id contains this text

        Returns:
            SessionPage with the requested slice and pagination info
        """
        limit = max(0, limit)
        offset = max(0, offset)

        matching = []
        for session in self._iter_sessions():
            if date and session.date != date:
                continue
            if search and (session.is_legacy or search not in session.short_id):
                continue
            matching.append(session)

        ordered = self._newest_first(matching)
        return SessionPage(
            sessions=ordered[offset : offset + limit],
            total=len(ordered),
            offset=offset,
            limit=limit,
            has_more=offset + limit < len(ordered),
        )

    def recent_sessions(self, max_age_days: int = 7) -> list[Session]:
        """Sessions modified within the last `max_age_days` days, newest first."""
        cutoff = (self._clock() - timedelta(days=max_age_days)).timestamp()
        return self._newest_first(
            [s for s in self._iter_sessions() if s.modified_time >= cutoff]
        )

    def get_by_id(self, session_id: str, include_content: bool = False) -> Session | None:
        """Find a single session by short id, filename or legacy date.

        Matches a prefix of a current short id, the exact filename (with or
        without extension), or for legacy files the date part of the name.
        When several files match, the most recently modified one wins.

        Args:
            session_id: Short id (or prefix), filename, or legacy date
            include_content: Also load content, metadata and stats

        Returns:
            Session or None if nothing matches
        """
        if not session_id:
            return None

        candidates = [
            s
            for s in self._iter_sessions()
            if s.identity.matches(session_id, self.extension)
        ]
        if not candidates:
            return None

        session = self._newest_first(candidates)[0]
        if include_content:
            session.content = self.read(session.session_path)
            session.metadata = parse_session_metadata(session.content)
            session.stats = compute_session_stats(session.content)
        return session

    def read(self, path: Path) -> str | None:
        """Read session content, or None if missing or unreadable."""
        path = Path(path)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Error reading session {path}: {e}")
            return None

    def write(self, path: Path, content: str) -> bool:
        """Overwrite session content."""
        try:
            Path(path).write_text(content, encoding="utf-8")
            return True
        except OSError as e:
            logger.warning(f"Error writing session {path}: {e}")
            return False

    def append(self, path: Path, content: str) -> bool:
        """Append content to a session file, creating it if needed."""
        try:
            with open(path, "a", encoding="utf-8") as f:
                f.write(content)
            return True
        except OSError as e:
            logger.warning(f"Error appending to session {path}: {e}")
            return False

    def delete(self, path: Path) -> bool:
        """Delete a session file.

        Returns:
            True if the file was removed, False if missing or on error
        """
        path = Path(path)
        try:
            path.unlink()
            logger.debug(f"Deleted session {path}")
            return True
        except FileNotFoundError:
            return False
        except OSError as e:
            logger.warning(f"Error deleting session {path}: {e}")
            return False

    def exists(self, path: str | Path) -> bool:
        """Check that a session path is an existing regular file."""
        try:
            return Path(path).is_file()
        except OSError:
            return False

    def get_stats(self, path: Path) -> SessionStats:
        """Compute item counts for a session file."""
        return compute_session_stats(self.read(path))

    def get_title(self, path: Path) -> str:
        """Get the session title, or a placeholder when it has none."""
        return parse_session_metadata(self.read(path)).title or self.UNTITLED

    def format_size(self, path: Path) -> str:
        """Human-readable file size using 1024-based units."""
        try:
            size = Path(path).stat().st_size
        except OSError:
            return "0 B"

        if size < KB:
            return f"{size} B"
        if size < MB:
            return f"{size / KB:.1f} KB"
        return f"{size / MB:.1f} MB"

    def ensure_session(
        self,
        short_id: str,
        now: datetime | None = None,
    ) -> tuple[Path, bool] | None:
        """Create today's session file, or refresh its Last Updated time.

        Args:
            short_id: Short id for the filename
            now: Current time (default: the repository clock)

        Returns:
            (path, created) tuple, or None if the file could not be written
        """
        now = now or self._clock()
        date_str = now.strftime("%Y-%m-%d")
        time_str = now.strftime("%H:%M")
        path = self.session_path(build_session_filename(date_str, short_id, self.extension))

        try:
            self.sessions_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.warning(f"Cannot create sessions directory {self.sessions_dir}: {e}")
            return None

        content = self.read(path)
        if content is None:
            if not self.write(path, render_session_template(date_str, time_str)):
                return None
            logger.debug(f"Created session file: {path}")
            return path, True

        if not self.write(path, replace_last_updated(content, time_str)):
            return None
        logger.debug(f"Updated session file: {path}")
        return path, False
