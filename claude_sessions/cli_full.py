"""Click-based CLI for Claude Code sessions and session aliases."""

import functools
import os
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import click

from . import __version__
from .aliases import AliasIndex
from .cli.errors import (
    AliasError,
    CLIError,
    SessionNotFoundError,
    SessionWriteError,
    handle_exception,
)
from .cli.output import OutputConfig, OutputManager
from .config import StoreConfig, load_config
from .session import Session, SessionRepository, ShortIdResolver
from .sessions_logging import get_default_log_file, setup_logging


@dataclass
class AppContext:
    """Objects shared by every command."""

    config: StoreConfig
    repository: SessionRepository
    aliases: AliasIndex
    output: OutputManager
    verbose: bool = False


def cli_errors(f: Callable[..., Any]) -> Callable[..., Any]:
    """Print CLIErrors through the output manager and exit with their code."""

    @functools.wraps(f)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return f(*args, **kwargs)
        except CLIError as e:
            ctx = click.get_current_context()
            app: AppContext = ctx.obj
            message, exit_code = handle_exception(
                e, use_color=app.output.config.use_color, verbose=app.verbose
            )
            click.echo(message, err=True)
            ctx.exit(exit_code)

    return wrapper


def json_option(f: Any) -> Any:
    """Common --json flag."""
    return click.option("--json", "as_json", is_flag=True, help="Output as JSON")(f)


def _find_session(app: AppContext, ref: str, include_content: bool = False) -> Session | None:
    """Resolve an alias, short id, filename or path to a session."""
    target = app.aliases.resolve_alias_or_id(ref)
    if target != ref or os.sep in target:
        target = Path(target).name
    return app.repository.get_by_id(target, include_content=include_content)


def _session_line(app: AppContext, session: Session) -> str:
    title = app.repository.get_title(session.session_path)
    size = app.repository.format_size(session.session_path)
    line = f"{session.short_id:<12} {session.date}  {size:>8}  {title}"
    names = [a.name for a in app.aliases.aliases_for_session(session.session_path)]
    if names:
        line += "  " + app.output.colorize(f"[{', '.join(names)}]", "cyan")
    return line


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-error output")
@click.option("--no-color", is_flag=True, help="Disable colored output")
@click.option(
    "--claude-dir",
    type=click.Path(file_okay=False, path_type=Path),
    help="Claude directory (default: ~/.claude)",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, quiet: bool, no_color: bool, claude_dir: Path | None) -> None:
    """Claude Sessions - browse session notes and manage session aliases."""
    config = load_config(claude_dir=claude_dir)

    log_file = get_default_log_file(config.claude_dir) if config.log_to_file else None
    setup_logging(
        level=config.log_level,
        quiet=quiet,
        verbose=verbose,
        log_file=log_file,
        log_format=config.log_format,
    )

    ctx.obj = AppContext(
        config=config,
        repository=SessionRepository(
            config.resolved_sessions_dir, extension=config.session_extension
        ),
        aliases=AliasIndex(config.resolved_aliases_file),
        output=OutputManager(OutputConfig.from_flags(verbose, quiet, no_color)),
        verbose=verbose,
    )


@cli.command("list")
@click.option("--limit", "-n", type=int, default=None, help="Maximum sessions to show")
@click.option("--offset", type=int, default=0, show_default=True, help="Sessions to skip")
@click.option("--date", "date_filter", help="Only sessions from this date (YYYY-MM-DD)")
@click.option("--search", "-s", help="Only sessions whose short id contains this text")
@json_option
@click.pass_obj
def list_sessions(
    app: AppContext,
    limit: int | None,
    offset: int,
    date_filter: str | None,
    search: str | None,
    as_json: bool,
) -> None:
    """List sessions, most recently modified first."""
    page = app.repository.list_sessions(
        limit=limit if limit is not None else app.config.default_list_limit,
        offset=offset,
        date=date_filter,
        search=search,
    )

    if as_json:
        app.output.json(page.to_dict())
        return

    if not page.sessions:
        app.output.info("No sessions found")
        return

    app.output.header(f"Sessions ({page.total})")
    for session in page.sessions:
        app.output.plain(_session_line(app, session), force=True)

    start = page.offset + 1
    end = page.offset + len(page.sessions)
    app.output.info(f"Showing {start}-{end} of {page.total}")
    if page.has_more:
        app.output.info(f"More available: --offset {end}")


@cli.command("recent")
@click.option("--days", type=int, default=None, help="Age limit in days")
@click.pass_obj
def recent_sessions(app: AppContext, days: int | None) -> None:
    """List sessions modified in the last few days."""
    max_age = days if days is not None else app.config.recent_days
    sessions = app.repository.recent_sessions(max_age_days=max_age)
    if not sessions:
        app.output.info(f"No sessions in the last {max_age} day(s)")
        return
    for session in sessions:
        app.output.plain(_session_line(app, session), force=True)


@cli.command("show")
@click.argument("session_ref")
@click.option("--content", "show_content", is_flag=True, help="Print the full document")
@json_option
@click.pass_obj
@cli_errors
def show_session(app: AppContext, session_ref: str, show_content: bool, as_json: bool) -> None:
    """Show a session by alias, short id or filename."""
    session = _find_session(app, session_ref, include_content=True)
    if session is None:
        raise SessionNotFoundError(session_ref)

    if as_json:
        app.output.json(session.to_dict())
        return

    metadata = session.metadata
    stats = session.stats
    app.output.header(metadata.title or app.repository.UNTITLED)
    app.output.plain(f"File:      {session.filename}", force=True)
    app.output.plain(f"Short ID:  {session.short_id}", force=True)
    app.output.plain(f"Date:      {session.date}", force=True)
    app.output.plain(f"Size:      {app.repository.format_size(session.session_path)}", force=True)
    if metadata.started:
        app.output.plain(f"Started:   {metadata.started}", force=True)
    if metadata.last_updated:
        app.output.plain(f"Updated:   {metadata.last_updated}", force=True)
    app.output.plain(
        f"Items:     {stats.completed_items} completed, {stats.in_progress_items} in progress",
        force=True,
    )
    for item in metadata.in_progress:
        app.output.plain(f"  - [ ] {item}", force=True)
    if metadata.notes:
        app.output.plain(f"Notes:     {metadata.notes}", force=True)

    if show_content and session.content:
        app.output.plain("", force=True)
        app.output.plain(session.content, force=True)


@cli.command("delete")
@click.argument("session_ref")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_obj
@cli_errors
def delete_session(app: AppContext, session_ref: str, yes: bool) -> None:
    """Delete a session file."""
    session = _find_session(app, session_ref)
    if session is None:
        raise SessionNotFoundError(session_ref)

    if not yes:
        click.confirm(f"Delete {session.filename}?", abort=True)

    if not app.repository.delete(session.session_path):
        raise SessionWriteError("Failed to delete session", str(session.session_path))

    app.output.success(f"Deleted {session.filename}")
    dangling = app.aliases.aliases_for_session(session.session_path)
    if dangling:
        names = ", ".join(a.name for a in dangling)
        app.output.warning(
            f"Aliases still point at this session: {names} "
            "(run 'claude-sessions alias cleanup')"
        )


@cli.command("touch")
@click.option("--id", "short_id", help="Short id (default: from CLAUDE_SESSION_ID)")
@click.pass_obj
@cli_errors
def touch_session(app: AppContext, short_id: str | None) -> None:
    """Create today's session file or refresh its Last Updated time."""
    short_id = short_id or ShortIdResolver.resolve(dict(os.environ), Path.cwd().name)
    result = app.repository.ensure_session(short_id)
    if result is None:
        raise SessionWriteError(
            "Failed to write session file", str(app.repository.sessions_dir)
        )

    path, created = result
    app.output.success(f"{'Created' if created else 'Updated'} session file: {path}")


@cli.group("alias")
def alias_group() -> None:
    """Manage session aliases."""


@alias_group.command("set")
@click.argument("name")
@click.argument("session_ref")
@click.option("--title", "-t", help="Optional alias title")
@click.pass_obj
@cli_errors
def alias_set(app: AppContext, name: str, session_ref: str, title: str | None) -> None:
    """Point alias NAME at a session."""
    session = _find_session(app, session_ref)
    if session is None:
        raise SessionNotFoundError(session_ref)

    result = app.aliases.set(name, str(session.session_path), title)
    if not result.success:
        raise AliasError(result.error, name)

    verb = "Created" if result.is_new else "Updated"
    app.output.success(f"{verb} alias '{name}' -> {session.filename}")


@alias_group.command("list")
@click.option("--search", "-s", help="Filter by name or title")
@click.option("--limit", "-n", type=int, default=None, help="Maximum aliases to show")
@json_option
@click.pass_obj
def alias_list(app: AppContext, search: str | None, limit: int | None, as_json: bool) -> None:
    """List aliases, most recently updated first."""
    aliases = app.aliases.list_aliases(search=search, limit=limit)

    if as_json:
        app.output.json([a.to_dict() for a in aliases])
        return

    if not aliases:
        app.output.info("No aliases found")
        return

    for alias in aliases:
        line = f"{alias.name:<20} {Path(alias.session_path or '').name}"
        if alias.title:
            line += f"  {alias.title}"
        app.output.plain(line, force=True)


@alias_group.command("remove")
@click.argument("name")
@click.pass_obj
@cli_errors
def alias_remove(app: AppContext, name: str) -> None:
    """Remove an alias."""
    result = app.aliases.delete(name)
    if not result.success:
        raise AliasError(result.error, name)
    app.output.success(f"Removed alias '{name}'")


@alias_group.command("rename")
@click.argument("old_name")
@click.argument("new_name")
@click.pass_obj
@cli_errors
def alias_rename(app: AppContext, old_name: str, new_name: str) -> None:
    """Rename an alias."""
    result = app.aliases.rename(old_name, new_name)
    if not result.success:
        raise AliasError(result.error, old_name)
    app.output.success(f"Renamed alias '{old_name}' to '{new_name}'")


@alias_group.command("title")
@click.argument("name")
@click.argument("title")
@click.pass_obj
@cli_errors
def alias_title(app: AppContext, name: str, title: str) -> None:
    """Change an alias title."""
    result = app.aliases.update_title(name, title)
    if not result.success:
        raise AliasError(result.error, name)
    app.output.success(f"Updated title of '{name}'")


@alias_group.command("resolve")
@click.argument("name")
@click.pass_obj
@cli_errors
def alias_resolve(app: AppContext, name: str) -> None:
    """Print the session path an alias points at."""
    resolved = app.aliases.resolve(name)
    if resolved is None:
        raise AliasError(f"Alias '{name}' not found", name)
    app.output.plain(resolved.session_path, force=True)


@alias_group.command("cleanup")
@click.pass_obj
@cli_errors
def alias_cleanup(app: AppContext) -> None:
    """Remove aliases whose session file no longer exists."""
    result = app.aliases.cleanup(app.repository.exists)
    if not result.saved:
        raise AliasError("Stale aliases found but the alias file could not be saved")
    for removed in result.removed_aliases:
        app.output.info(f"Removed '{removed['name']}' ({removed['sessionPath']})")
    app.output.success(
        f"Checked {result.total_checked} alias(es), removed {result.removed}"
    )


def main() -> None:
    """Console script entry point."""
    cli()


if __name__ == "__main__":
    main()
