"""
Session alias index.

Aliases are short human-chosen names for session files, stored in a single
JSON document (~/.claude/session-aliases.json by default):

    {
      "version": "1.0",
      "aliases": {
        "auth-work": {
          "sessionPath": "/home/me/.claude/sessions/2026-01-17-a1b2c3d4-session.tmp",
          "createdAt": "2026-01-17T09:30:00+00:00",
          "updatedAt": "2026-01-18T14:02:11+00:00",
          "title": "Auth refactor"
        }
      },
      "metadata": {"totalCount": 1, "lastUpdated": "2026-01-18T14:02:11+00:00"}
    }

Every mutation loads the whole index, changes it in memory and rewrites the
file. Rewrites go through a temp file with a backup of the previous version,
so a reader sees either the old or the new document, never a partial one.
There is no cross-process lock; concurrent writers are last-writer-wins.
"""

import json
import os
import re
import shutil
from collections.abc import Callable
from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, ClassVar

from ..sessions_logging import LogCategory, get_category_logger

logger = get_category_logger(LogCategory.ALIASES)

ALIAS_VERSION = "1.0"
ALIAS_NAME_RE = re.compile(r"[a-zA-Z0-9_-]+")
RESERVED_ALIASES = frozenset({"list", "help", "remove", "delete", "create", "set"})


def validate_alias_name(name: str | None) -> str | None:
    """Validate an alias name.

    Returns:
        An error message, or None if the name is acceptable
    """
    if not name:
        return "Alias name cannot be empty"
    if not ALIAS_NAME_RE.fullmatch(name):
        return "Alias name must contain only letters, numbers, dashes, and underscores"
    if name.lower() in RESERVED_ALIASES:
        return f"'{name}' is a reserved alias name"
    return None


@dataclass
class ResolvedAlias:
    """An alias looked up by name."""

    alias: str
    session_path: str
    created_at: str | None = None
    title: str | None = None


@dataclass
class AliasSummary:
    """One entry of an alias listing."""

    name: str
    session_path: str
    created_at: str | None = None
    updated_at: str | None = None
    title: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dictionary."""
        return asdict(self)


@dataclass
class AliasResult:
    """Outcome of an alias mutation.

    Validation and not-found problems are reported through `error` with
    `success=False` instead of raising.
    """

    success: bool
    error: str | None = None
    alias: str | None = None
    session_path: str | None = None
    title: str | None = None
    is_new: bool | None = None
    old_alias: str | None = None

    @classmethod
    def failure(cls, error: str) -> "AliasResult":
        return cls(success=False, error=error)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary, dropping unset fields."""
        return {k: v for k, v in asdict(self).items() if v is not None}


@dataclass
class CleanupResult:
    """Outcome of removing aliases that point at missing sessions."""

    total_checked: int = 0
    removed: int = 0
    removed_aliases: list[dict[str, str | None]] = field(default_factory=list)
    saved: bool = True

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dictionary."""
        return asdict(self)


def _timestamp_key(value: Any) -> float:
    """Sort key for ISO-8601 timestamps; unparseable values sort last."""
    if not isinstance(value, str):
        return 0.0
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return 0.0
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed.timestamp()


class AliasIndex:
    """Named aliases for session files, persisted as one JSON document.

    Example:
        index = AliasIndex(Path.home() / ".claude" / "session-aliases.json")
        result = index.set("auth-work", "/path/to/2026-01-17-a1b2c3d4-session.tmp")
        if not result.success:
            print(result.error)

        path = index.resolve_alias_or_id("auth-work")
        index.cleanup(lambda p: Path(p).is_file())
    """

    VERSION: ClassVar[str] = ALIAS_VERSION

    def __init__(
        self,
        aliases_path: Path,
        clock: Callable[[], datetime] | None = None,
    ):
        """Initialize the index.

        Args:
            aliases_path: Path to the alias JSON document
            clock: Returns the current time (default: UTC now)
        """
        self.aliases_path = Path(aliases_path)
        self.temp_path = self.aliases_path.with_name(self.aliases_path.name + ".tmp")
        self.backup_path = self.aliases_path.with_name(self.aliases_path.name + ".bak")
        self._clock = clock or (lambda: datetime.now(UTC))

    def _now(self) -> str:
        return self._clock().isoformat()

    def default_index(self) -> dict[str, Any]:
        """Empty index structure."""
        return {
            "version": self.VERSION,
            "aliases": {},
            "metadata": {"totalCount": 0, "lastUpdated": self._now()},
        }

    def load(self) -> dict[str, Any]:
        """Load the index, falling back to an empty one.

        A missing, empty, unreadable or malformed file yields a fresh index.
        Missing version or metadata fields are filled in.
        """
        try:
            content = self.aliases_path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return self.default_index()
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Error reading aliases file {self.aliases_path}: {e}")
            return self.default_index()

        if not content.strip():
            return self.default_index()

        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            logger.warning(f"Error parsing aliases file: {e}")
            return self.default_index()

        if not isinstance(data, dict) or not isinstance(data.get("aliases"), dict):
            logger.warning("Invalid aliases file structure, resetting")
            return self.default_index()

        if not data.get("version"):
            data["version"] = self.VERSION
        if not isinstance(data.get("metadata"), dict):
            data["metadata"] = {
                "totalCount": len(data["aliases"]),
                "lastUpdated": self._now(),
            }
        return data

    def save(self, data: dict[str, Any]) -> bool:
        """Persist the index atomically.

        Writes to a .tmp sibling and renames it over the destination, keeping
        a .bak copy of the previous file until the rename succeeds. On
        failure the destination is restored from the backup and the temp file
        is removed.

        Returns:
            True if the index was written
        """
        try:
            data["metadata"] = {
                "totalCount": len(data["aliases"]),
                "lastUpdated": self._now(),
            }
            content = json.dumps(data, indent=2)

            self.aliases_path.parent.mkdir(parents=True, exist_ok=True)

            if self.aliases_path.exists():
                shutil.copyfile(self.aliases_path, self.backup_path)

            self.temp_path.write_text(content, encoding="utf-8")

            # Some filesystems refuse to rename over an existing file
            if self.aliases_path.exists():
                self.aliases_path.unlink()
            os.replace(self.temp_path, self.aliases_path)

            if self.backup_path.exists():
                self.backup_path.unlink()

            logger.debug(f"Saved {data['metadata']['totalCount']} aliases")
            return True
        except Exception as e:
            logger.warning(f"Error saving aliases: {e}")
            self._recover()
            return False

    def _recover(self) -> None:
        """Restore the index from its backup and drop the temp file."""
        if self.backup_path.exists():
            try:
                shutil.copyfile(self.backup_path, self.aliases_path)
                logger.info("Restored aliases from backup")
            except OSError as e:
                logger.error(f"Failed to restore aliases backup: {e}")

        if self.temp_path.exists():
            try:
                self.temp_path.unlink()
            except OSError as e:
                logger.debug(f"Could not remove temp aliases file: {e}")

    def resolve(self, alias: str) -> ResolvedAlias | None:
        """Look up an alias by name.

        Returns:
            ResolvedAlias, or None for invalid or unknown names
        """
        if not alias or not ALIAS_NAME_RE.fullmatch(alias):
            return None

        entry = self.load()["aliases"].get(alias)
        if not isinstance(entry, dict):
            return None

        return ResolvedAlias(
            alias=alias,
            session_path=entry.get("sessionPath"),
            created_at=entry.get("createdAt"),
            title=entry.get("title") or None,
        )

    def set(self, alias: str, session_path: str, title: str | None = None) -> AliasResult:
        """Create or update an alias.

        Updating keeps the original createdAt and refreshes updatedAt.
        """
        error = validate_alias_name(alias)
        if error:
            return AliasResult.failure(error)

        data = self.load()
        existing = data["aliases"].get(alias)
        is_new = not isinstance(existing, dict)
        now = self._now()

        data["aliases"][alias] = {
            "sessionPath": str(session_path),
            "createdAt": now if is_new else existing.get("createdAt", now),
            "updatedAt": now,
            "title": title or None,
        }

        if not self.save(data):
            return AliasResult.failure("Failed to save alias")

        logger.debug(f"{'Created' if is_new else 'Updated'} alias {alias}")
        return AliasResult(
            success=True,
            alias=alias,
            session_path=str(session_path),
            title=title or None,
            is_new=is_new,
        )

    def list_aliases(
        self, search: str | None = None, limit: int | None = None
    ) -> list[AliasSummary]:
        """List aliases, most recently touched first.

        Args:
            search: Case-insensitive substring matched against name or title
            limit: Maximum number of aliases (ignored unless positive)
        """
        summaries = [
            AliasSummary(
                name=name,
                session_path=info.get("sessionPath"),
                created_at=info.get("createdAt"),
                updated_at=info.get("updatedAt"),
                title=info.get("title"),
            )
            for name, info in self.load()["aliases"].items()
            if isinstance(info, dict)
        ]

        summaries.sort(
            key=lambda a: _timestamp_key(a.updated_at or a.created_at),
            reverse=True,
        )

        if search:
            needle = search.lower()
            summaries = [
                a
                for a in summaries
                if needle in a.name.lower()
                or (isinstance(a.title, str) and needle in a.title.lower())
            ]

        if limit and limit > 0:
            summaries = summaries[:limit]

        return summaries

    def delete(self, alias: str) -> AliasResult:
        """Remove an alias."""
        data = self.load()
        if alias not in data["aliases"]:
            return AliasResult.failure(f"Alias '{alias}' not found")

        deleted = data["aliases"].pop(alias)
        if not self.save(data):
            return AliasResult.failure("Failed to delete alias")

        session_path = deleted.get("sessionPath") if isinstance(deleted, dict) else None
        return AliasResult(success=True, alias=alias, session_path=session_path)

    def rename(self, old_alias: str, new_alias: str) -> AliasResult:
        """Rename an alias, keeping its target and createdAt.

        Either both the removal of the old name and the insertion of the new
        one are persisted, or neither is.
        """
        data = self.load()
        if not isinstance(data["aliases"].get(old_alias), dict):
            return AliasResult.failure(f"Alias '{old_alias}' not found")

        if new_alias in data["aliases"]:
            return AliasResult.failure(f"Alias '{new_alias}' already exists")

        error = validate_alias_name(new_alias)
        if error:
            return AliasResult.failure(f"New alias name is invalid: {error}")

        entry = data["aliases"].pop(old_alias)
        entry["updatedAt"] = self._now()
        data["aliases"][new_alias] = entry

        if not self.save(data):
            del data["aliases"][new_alias]
            data["aliases"][old_alias] = entry
            return AliasResult.failure("Failed to rename alias")

        return AliasResult(
            success=True,
            alias=new_alias,
            old_alias=old_alias,
            session_path=entry.get("sessionPath"),
        )

    def update_title(self, alias: str, title: str | None) -> AliasResult:
        """Change an alias title."""
        data = self.load()
        entry = data["aliases"].get(alias)
        if not isinstance(entry, dict):
            return AliasResult.failure(f"Alias '{alias}' not found")

        entry["title"] = title or None
        entry["updatedAt"] = self._now()

        if not self.save(data):
            return AliasResult.failure("Failed to update alias title")

        return AliasResult(success=True, alias=alias, title=title or None)

    def aliases_for_session(self, session_path: str | Path) -> list[AliasSummary]:
        """All aliases pointing at a session path."""
        target = str(session_path)
        return [
            AliasSummary(
                name=name,
                session_path=info.get("sessionPath"),
                created_at=info.get("createdAt"),
                updated_at=info.get("updatedAt"),
                title=info.get("title"),
            )
            for name, info in self.load()["aliases"].items()
            if isinstance(info, dict) and info.get("sessionPath") == target
        ]

    def cleanup(self, session_exists: Callable[[str], bool]) -> CleanupResult:
        """Remove aliases whose session no longer exists.

        Args:
            session_exists: Called with each alias's sessionPath

        Returns:
            CleanupResult; the index is saved only if something was removed
        """
        data = self.load()
        aliases = data["aliases"]
        removed = []

        for name, info in list(aliases.items()):
            session_path = info.get("sessionPath") if isinstance(info, dict) else None
            try:
                keep = bool(session_path) and session_exists(session_path)
            except Exception as e:
                logger.warning(f"Existence check failed for alias {name}: {e}")
                keep = True
            if not keep:
                removed.append({"name": name, "sessionPath": session_path})
                del aliases[name]

        result = CleanupResult(
            total_checked=len(aliases) + len(removed),
            removed=len(removed),
            removed_aliases=removed,
        )

        if removed:
            result.saved = self.save(data)
            if result.saved:
                logger.info(f"Removed {len(removed)} stale alias(es)")
            else:
                logger.warning("Stale aliases found but index could not be saved")

        return result

    def resolve_alias_or_id(self, alias_or_id: str) -> str:
        """Resolve an alias to its session path, or return the input as-is."""
        resolved = self.resolve(alias_or_id)
        if resolved and resolved.session_path:
            return resolved.session_path
        return alias_or_id
