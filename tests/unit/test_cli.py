"""Unit tests for CLI functionality."""

import json
from collections.abc import Callable
from pathlib import Path

import pytest
from click.testing import CliRunner, Result

from claude_sessions.aliases import AliasIndex
from claude_sessions.cli_full import cli


@pytest.fixture
def run(clean_env: None, claude_dir: Path) -> Callable[..., Result]:
    """Invoke the CLI against the temporary Claude directory."""
    runner = CliRunner()

    def _run(*args: str, input: str | None = None) -> Result:
        return runner.invoke(
            cli, ["--no-color", "--claude-dir", str(claude_dir), *args], input=input
        )

    return _run


@pytest.fixture
def aliases(claude_dir: Path) -> AliasIndex:
    return AliasIndex(claude_dir / "session-aliases.json")


class TestMainCLI:
    """Test main CLI group functionality."""

    def test_cli_help(self) -> None:
        result = CliRunner().invoke(cli, ["--help"])

        assert result.exit_code == 0
        assert "session aliases" in result.output

    def test_cli_version(self) -> None:
        result = CliRunner().invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert "1.0.0" in result.output


class TestListCommand:
    """Test the list command."""

    def test_empty(self, run: Callable[..., Result]) -> None:
        result = run("list")

        assert result.exit_code == 0
        assert "No sessions found" in result.output

    def test_lists_sessions_with_titles(
        self,
        run: Callable[..., Result],
        make_session: Callable[..., Path],
        sample_content: str,
    ) -> None:
        make_session("2026-01-17-a1b2c3d4-session.tmp", sample_content)
        make_session("2026-01-16-session.tmp", "", mtime=1_700_000_000)

        result = run("list")

        assert result.exit_code == 0
        assert "Sessions (2)" in result.output
        assert "a1b2c3d4" in result.output
        assert "Session: Auth refactor" in result.output
        assert "no-id" in result.output
        assert "Showing 1-2 of 2" in result.output

    def test_pagination_hint(
        self, run: Callable[..., Result], make_session: Callable[..., Path]
    ) -> None:
        for i in range(3):
            make_session(f"2026-01-1{i}-sess{i:04d}-session.tmp", mtime=1_700_000_000 + i)

        result = run("list", "--limit", "2")

        assert "Showing 1-2 of 3" in result.output
        assert "More available: --offset 2" in result.output

    def test_json(self, run: Callable[..., Result], make_session: Callable[..., Path]) -> None:
        make_session("2026-01-17-a1b2c3d4-session.tmp", "# t")

        result = run("list", "--json")

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["total"] == 1
        assert data["has_more"] is False
        assert data["sessions"][0]["short_id"] == "a1b2c3d4"

    def test_shows_aliases(
        self,
        run: Callable[..., Result],
        make_session: Callable[..., Path],
        aliases: AliasIndex,
    ) -> None:
        path = make_session("2026-01-17-a1b2c3d4-session.tmp")
        aliases.set("auth", str(path))

        assert "[auth]" in run("list").output

    def test_search(self, run: Callable[..., Result], make_session: Callable[..., Path]) -> None:
        make_session("2026-01-17-a1b2c3d4-session.tmp")
        make_session("2026-01-17-ffffffff-session.tmp")

        result = run("list", "--search", "a1b2", "--json")

        assert [s["short_id"] for s in json.loads(result.output)["sessions"]] == ["a1b2c3d4"]


class TestShowCommand:
    """Test the show command."""

    def test_show_by_short_id(
        self,
        run: Callable[..., Result],
        make_session: Callable[..., Path],
        sample_content: str,
    ) -> None:
        make_session("2026-01-17-a1b2c3d4-session.tmp", sample_content)

        result = run("show", "a1b2")

        assert result.exit_code == 0
        assert "Session: Auth refactor" in result.output
        assert "2 completed, 1 in progress" in result.output
        assert "- [ ] Migrate session cookies" in result.output

    def test_show_by_alias(
        self,
        run: Callable[..., Result],
        make_session: Callable[..., Path],
        aliases: AliasIndex,
        sample_content: str,
    ) -> None:
        path = make_session("2026-01-17-a1b2c3d4-session.tmp", sample_content)
        aliases.set("auth", str(path))

        result = run("show", "auth", "--json")

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["filename"] == path.name
        assert data["metadata"]["notes"] == "Check the cookie domain on staging."
        assert data["stats"]["total_items"] == 3

    def test_show_content(
        self,
        run: Callable[..., Result],
        make_session: Callable[..., Path],
        sample_content: str,
    ) -> None:
        make_session("2026-01-17-a1b2c3d4-session.tmp", sample_content)

        assert "auth/views.py" in run("show", "a1b2", "--content").output

    def test_not_found(self, run: Callable[..., Result]) -> None:
        result = run("show", "zzzz")

        assert result.exit_code == 1
        assert "Session not found: zzzz" in result.output


class TestDeleteCommand:
    """Test the delete command."""

    def test_delete_with_yes(
        self, run: Callable[..., Result], make_session: Callable[..., Path]
    ) -> None:
        path = make_session("2026-01-17-a1b2c3d4-session.tmp")

        result = run("delete", "a1b2c3d4", "--yes")

        assert result.exit_code == 0
        assert not path.exists()

    def test_delete_aborted(
        self, run: Callable[..., Result], make_session: Callable[..., Path]
    ) -> None:
        path = make_session("2026-01-17-a1b2c3d4-session.tmp")

        result = run("delete", "a1b2c3d4", input="n\n")

        assert result.exit_code == 1
        assert path.exists()

    def test_warns_about_dangling_aliases(
        self,
        run: Callable[..., Result],
        make_session: Callable[..., Path],
        aliases: AliasIndex,
    ) -> None:
        path = make_session("2026-01-17-a1b2c3d4-session.tmp")
        aliases.set("auth", str(path))

        result = run("delete", "auth", "-y")

        assert result.exit_code == 0
        assert "Aliases still point at this session: auth" in result.output

    def test_not_found(self, run: Callable[..., Result]) -> None:
        assert run("delete", "zzzz", "-y").exit_code == 1


class TestTouchCommand:
    """Test the touch command."""

    def test_create_then_update(self, run: Callable[..., Result], sessions_dir: Path) -> None:
        first = run("touch", "--id", "a1b2c3d4")
        second = run("touch", "--id", "a1b2c3d4")

        assert first.exit_code == 0
        assert "Created session file" in first.output
        assert "Updated session file" in second.output
        assert len(list(sessions_dir.glob("*-a1b2c3d4-session.tmp"))) == 1


class TestAliasCommands:
    """Test the alias command group."""

    def test_set_and_resolve(
        self, run: Callable[..., Result], make_session: Callable[..., Path]
    ) -> None:
        path = make_session("2026-01-17-a1b2c3d4-session.tmp")

        created = run("alias", "set", "auth", "a1b2", "--title", "Auth work")
        resolved = run("alias", "resolve", "auth")

        assert created.exit_code == 0
        assert "Created alias 'auth'" in created.output
        assert resolved.output.strip() == str(path)

    def test_set_reserved_name(
        self, run: Callable[..., Result], make_session: Callable[..., Path]
    ) -> None:
        make_session("2026-01-17-a1b2c3d4-session.tmp")

        result = run("alias", "set", "list", "a1b2")

        assert result.exit_code == 1
        assert "reserved" in result.output

    def test_set_unknown_session(self, run: Callable[..., Result]) -> None:
        result = run("alias", "set", "auth", "zzzz")

        assert result.exit_code == 1
        assert "Session not found" in result.output

    def test_list_json(
        self,
        run: Callable[..., Result],
        make_session: Callable[..., Path],
        aliases: AliasIndex,
    ) -> None:
        path = make_session("2026-01-17-a1b2c3d4-session.tmp")
        aliases.set("auth", str(path), title="Auth work")

        data = json.loads(run("alias", "list", "--json").output)

        assert data[0]["name"] == "auth"
        assert data[0]["title"] == "Auth work"

    def test_list_empty(self, run: Callable[..., Result]) -> None:
        assert "No aliases found" in run("alias", "list").output

    def test_rename_and_remove(
        self,
        run: Callable[..., Result],
        aliases: AliasIndex,
    ) -> None:
        aliases.set("old", "/tmp/x.tmp")

        renamed = run("alias", "rename", "old", "new")
        removed = run("alias", "remove", "new")

        assert renamed.exit_code == 0
        assert removed.exit_code == 0
        assert aliases.list_aliases() == []

    def test_rename_collision(self, run: Callable[..., Result], aliases: AliasIndex) -> None:
        aliases.set("a", "/tmp/a.tmp")
        aliases.set("b", "/tmp/b.tmp")

        result = run("alias", "rename", "a", "b")

        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_title(self, run: Callable[..., Result], aliases: AliasIndex) -> None:
        aliases.set("auth", "/tmp/a.tmp")

        assert run("alias", "title", "auth", "New title").exit_code == 0
        assert aliases.resolve("auth").title == "New title"

    def test_resolve_unknown(self, run: Callable[..., Result]) -> None:
        result = run("alias", "resolve", "missing")

        assert result.exit_code == 1
        assert "not found" in result.output

    def test_cleanup(
        self,
        run: Callable[..., Result],
        make_session: Callable[..., Path],
        aliases: AliasIndex,
        sessions_dir: Path,
    ) -> None:
        path = make_session("2026-01-17-a1b2c3d4-session.tmp")
        aliases.set("alive", str(path))
        aliases.set("gone", str(sessions_dir / "2026-01-01-deadbeef-session.tmp"))

        result = run("alias", "cleanup")

        assert result.exit_code == 0
        assert "removed 1" in result.output
        assert [a.name for a in aliases.list_aliases()] == ["alive"]
