"""Pipeline step functions: stage, publish, rebuild, and unpublish orchestration"""

import logging
from pathlib import Path

from sqlalchemy.engine import Engine
from sqlmodel import Session

from issueblog.config import Settings
from issueblog.core.excerpt import make_excerpt
from issueblog.core.export import export_site
from issueblog.core.issue import Issue
from issueblog.core.models import StagedPost
from issueblog.core.render.render import render
from issueblog.core.utils.dates import to_utc_naive
from issueblog.core.utils.hashing import sha256
from issueblog.core.utils.slug import post_filename, post_slug
from issueblog.crud.posts import (
    commit_post, delete_post, get_by_number, get_by_tag, get_published, list_tags, refresh_render,
)


logger = logging.getLogger(__name__)


def content_hash(issue: Issue) -> str:
    """Hash of everything that changes a post's page: title, labels, author, and body."""
    return sha256("\n".join([issue.title, ",".join(issue.labels), issue.author, issue.body]))


def _export(session: Session, settings: Settings) -> list[Path]:
    """Export every stored post, with tag pages grouped by the stored labels."""
    tags = {tag: get_by_tag(session, tag) for tag in list_tags(session)}
    return export_site(get_published(session), settings, Path(settings.output_dir), tags)


def stage_post(issue: Issue, settings: Settings) -> StagedPost:
    """Render an issue and derive its slug, filename, excerpt, and content hash."""
    created = to_utc_naive(issue.created_at)
    updated = to_utc_naive(issue.updated_at) if issue.updated_at else created
    slug = post_slug(issue.title, issue.number)
    return StagedPost(
        number=issue.number,
        title=issue.title,
        author=issue.author,
        markdown=issue.body,
        html=render(issue.body),
        excerpt=make_excerpt(issue.body, settings.excerpt_length, settings.parser_config),
        labels=issue.labels,
        slug=slug,
        filename=post_filename(created, slug),
        hash=content_hash(issue),
        created_at=created,
        updated_at=updated,
    )


def run_publish(engine: Engine, issue: Issue, settings: Settings) -> tuple[str, StagedPost, list[Path]]:
    """Stage and commit one issue, then re-export the site.

    Returns (status, staged, written_paths); status is 'created', 'updated', or 'unchanged'.
    The site is exported even when the post is unchanged so a lost output dir is recovered.
    """
    staged = stage_post(issue, settings)
    with Session(engine) as session:
        post, status = commit_post(session, staged, settings.max_versions)
        staged = staged.model_copy(update={"filename": post.filename})
        session.commit()
        logger.info("Issue #%d %s as %s", issue.number, status, staged.filename)
        written = _export(session, settings)
    return status, staged, written


def run_rebuild(engine: Engine, settings: Settings) -> tuple[int, list[Path]]:
    """Re-render every stored post from its markdown and re-export the site.

    Returns (rerendered_count, written_paths). A failing post is reported as
    RuntimeError naming its issue number.
    """
    rerendered = 0
    with Session(engine) as session:
        posts = get_published(session)
        for post in posts:
            try:
                html = render(post.markdown)
                excerpt = make_excerpt(post.markdown, settings.excerpt_length, settings.parser_config)
            except Exception as e:
                raise RuntimeError(f"Failed to render issue #{post.number}: {e}") from e
            if refresh_render(session, post, html, excerpt):
                rerendered += 1
        session.commit()
        written = _export(session, settings)
    return rerendered, written


def run_unpublish(engine: Engine, number: int, settings: Settings) -> bool:
    """Remove a post and its page, then re-export. Returns False when no such post exists."""
    with Session(engine) as session:
        post = get_by_number(session, number)
        if post is None:
            return False
        delete_post(session, post)
        session.commit()
        logger.info("Issue #%d unpublished", number)
        _export(session, settings)
    return True
