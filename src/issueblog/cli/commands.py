"""CLI command implementations"""

import sys
from pathlib import Path
from typing import Annotated, Optional

import typer
from sqlmodel import Session

from issueblog.config import Settings, load_config
from issueblog.core.issue import issue_from_env
from issueblog.core.pipeline import run_publish, run_rebuild, run_unpublish
from issueblog.core.render.render import render
from issueblog.core.utils.dates import long_date
from issueblog.crud.database import init_db, make_engine, reset_db
from issueblog.crud.posts import get_by_number, get_published
from issueblog.crud.versioning import diff_current, diff_versions, list_versions


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling."""
    try:
        return load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))


def _engine(settings: Settings):
    engine = make_engine(settings.db_url)
    init_db(engine)
    return engine


def init_cmd(
    reset: Annotated[bool, typer.Option("--reset", help="Drop and recreate all tables")] = False,
    ):
    """Initialize database schema. Use --reset to clear existing data."""
    settings = _settings()
    engine = make_engine(settings.db_url)
    if reset:
        reset_db(engine)
        typer.echo("Existing data cleared.")
    else:
        init_db(engine)
    typer.echo(f"Database initialized at: {settings.db_url}")


def publish_cmd(
    out: Annotated[Optional[str], typer.Option("--out-dir", help="Output directory")] = None,
    ):
    """Publish the issue described by ISSUE_* environment variables and rebuild the site."""
    settings = _settings(overrides={"output_dir": out})
    try:
        issue = issue_from_env()
    except ValueError as e:
        _fail(str(e))

    engine = _engine(settings)
    try:
        status, staged, written = run_publish(engine, issue, settings)
    except Exception as e:
        _fail(f"Publish failed for issue #{issue.number}", e)
    typer.echo(f"  {status}: #{staged.number} -> posts/{staged.filename}")
    typer.echo(f"Wrote {len(written)} file(s) to {settings.output_dir}/")


def render_cmd(
    path: Annotated[str, typer.Argument(help="Markdown file to render, or '-' for stdin")],
    ):
    """Render markdown to an HTML fragment on stdout."""
    if path == "-":
        text = sys.stdin.read()
    else:
        try:
            text = Path(path).read_text(encoding="utf-8")
        except OSError as e:
            _fail(f"Cannot read {path}", e)
    typer.echo(render(text))


def rebuild_cmd(
    out: Annotated[Optional[str], typer.Option("--out-dir", help="Output directory")] = None,
    ):
    """Re-render every stored post and regenerate the whole site."""
    settings = _settings(overrides={"output_dir": out})
    engine = _engine(settings)
    try:
        rerendered, written = run_rebuild(engine, settings)
    except Exception as e:
        _fail("Rebuild failed", e)
    typer.echo(f"Rebuild complete - {rerendered} re-rendered, {len(written)} file(s) written to {settings.output_dir}/")


def list_cmd():
    """List published posts, newest first."""
    settings = _settings()
    engine = _engine(settings)
    with Session(engine) as session:
        posts = get_published(session)
        if not posts:
            typer.echo("No posts published yet.")
            raise typer.Exit(1)
        for p in posts:
            tags = f"  [{', '.join(p.labels)}]" if p.labels else ""
            typer.echo(f"#{p.number}  {long_date(p.created_at)}  {p.title}{tags}")


def unpublish_cmd(
    number: Annotated[int, typer.Argument(help="Issue number of the post to remove")],
    out: Annotated[Optional[str], typer.Option("--out-dir", help="Output directory")] = None,
    ):
    """Remove a published post and regenerate the site."""
    settings = _settings(overrides={"output_dir": out})
    engine = _engine(settings)
    try:
        removed = run_unpublish(engine, number, settings)
    except Exception as e:
        _fail(f"Unpublish failed for issue #{number}", e)
    if not removed:
        _fail(f"No post found for issue #{number}")
    typer.echo(f"Unpublished issue #{number}")


def history_cmd(
    number: Annotated[int, typer.Argument(help="Issue number")],
    diff: Annotated[Optional[tuple[int, int]], typer.Option("--diff", help="Diff two stored versions")] = None,
    since: Annotated[Optional[int], typer.Option("--since", help="Diff a stored version against the current body")] = None,
    ):
    """List stored versions of a post, or show a diff between them."""
    settings = _settings()
    engine = _engine(settings)
    with Session(engine) as session:
        post = get_by_number(session, number)
        if post is None:
            _fail(f"No post found for issue #{number}")
        try:
            if diff:
                lines = diff_versions(session, post.id, diff[0], diff[1])
            elif since is not None:
                lines = diff_current(session, post, since)
            else:
                lines = None
        except ValueError as e:
            _fail(str(e))

        if lines is not None:
            typer.echo("".join(lines) or "No differences.")
            return

        versions = list_versions(session, post.id)
        if not versions:
            typer.echo(f"No stored versions for issue #{number}.")
            return
        for v in versions:
            typer.echo(f"  v{v.version_num}  {v.created_at:%Y-%m-%d %H:%M}  {v.title}")
