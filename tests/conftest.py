"""
Shared fixtures for the session store test suite.

Provides test fixtures for:
- Temporary sessions directories with controllable modification times
- Alias indexes with a deterministic clock
- Environment isolation for configuration and CLI tests
"""

import logging
import os
from collections.abc import Callable, Iterator
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

from claude_sessions.aliases import AliasIndex
from claude_sessions.session import SessionRepository

SAMPLE_SESSION = """# Session: Auth refactor
**Date:** 2026-01-17
**Started:** 09:30
**Last Updated:** 11:05

---

### Completed
- [x] Extract token validation
- [x] Add refresh endpoint

### In Progress
- [ ] Migrate session cookies

### Notes for Next Session
Check the cookie domain on staging.

### Context to Load
```
auth/tokens.py
auth/views.py
```
"""


class StepClock:
    """Deterministic clock that advances one second per call."""

    def __init__(self, start: datetime | None = None):
        self.current = start or datetime(2026, 1, 17, 9, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        value = self.current
        self.current += timedelta(seconds=1)
        return value


@pytest.fixture(autouse=True)
def _reset_store_logging() -> Iterator[None]:
    """Drop handlers installed by CLI runs so later tests don't log to closed streams."""
    yield
    logger = logging.getLogger("claude_sessions")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture()
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove environment variables that change store locations."""
    for var in (
        "CLAUDE_DIR",
        "CLAUDE_SESSIONS_DIR",
        "CLAUDE_SESSION_ALIASES",
        "CLAUDE_SESSIONS_LOG_LEVEL",
        "CLAUDE_SESSION_ID",
        "NO_COLOR",
        "FORCE_COLOR",
    ):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture()
def sample_content() -> str:
    """A complete session document."""
    return SAMPLE_SESSION


@pytest.fixture()
def claude_dir(tmp_path: Path) -> Path:
    """A Claude directory with an empty sessions folder."""
    root = tmp_path / ".claude"
    (root / "sessions").mkdir(parents=True)
    return root


@pytest.fixture()
def sessions_dir(claude_dir: Path) -> Path:
    return claude_dir / "sessions"


@pytest.fixture()
def make_session(sessions_dir: Path) -> Callable[..., Path]:
    """Factory writing a session file with an optional modification time."""

    def _make(filename: str, content: str = "", mtime: float | None = None) -> Path:
        path = sessions_dir / filename
        path.write_text(content, encoding="utf-8")
        if mtime is not None:
            os.utime(path, (mtime, mtime))
        return path

    return _make


@pytest.fixture()
def repository(sessions_dir: Path) -> SessionRepository:
    return SessionRepository(sessions_dir)


@pytest.fixture()
def clock() -> StepClock:
    return StepClock()


@pytest.fixture()
def alias_index(claude_dir: Path, clock: StepClock) -> AliasIndex:
    return AliasIndex(claude_dir / "session-aliases.json", clock=clock)
