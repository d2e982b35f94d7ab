"""Post persistence: upsert by issue number, lookups, and tag queries"""

from datetime import datetime

from sqlmodel import Session, select

from issueblog.core.models import StagedPost
from issueblog.core.utils.dates import utcnow
from issueblog.crud.models import Post, PostVersion
from issueblog.crud.versioning import save_version


def get_by_number(session: Session, number: int) -> Post | None:
    """Return the Post for the given issue number, or None if not found."""
    return session.exec(select(Post).where(Post.number == number)).one_or_none()


def get_published(session: Session) -> list[Post]:
    """Return all posts, newest first (ties broken by higher issue number)."""
    return list(session.exec(
        select(Post).order_by(Post.created_at.desc(), Post.number.desc())
    ).all())


def list_tags(session: Session) -> list[str]:
    """Return sorted distinct labels across all posts."""
    return sorted({label for post in session.exec(select(Post)).all() for label in post.labels or []})


def get_by_tag(session: Session, tag: str) -> list[Post]:
    """Return posts carrying the given label, newest first."""
    return [p for p in get_published(session) if tag in (p.labels or [])]


def delete_post(session: Session, post: Post) -> None:
    """Delete a post together with its stored versions. Flushes only."""
    for v in session.exec(select(PostVersion).where(PostVersion.post_id == post.id)).all():
        session.delete(v)
    session.delete(post)
    session.flush()


def _filename_taken(session: Session, filename: str, number: int) -> bool:
    return session.exec(
        select(Post).where(Post.filename == filename).where(Post.number != number)
    ).first() is not None


def _unique_filename(session: Session, staged: StagedPost) -> str:
    """Return staged.filename, or the first free -<number>[-<k>] variant when another post owns it."""
    if not _filename_taken(session, staged.filename, staged.number):
        return staged.filename
    stem = f"{staged.filename.removesuffix('.html')}-{staged.number}"
    candidate, k = f"{stem}.html", 2
    while _filename_taken(session, candidate, staged.number):
        candidate, k = f"{stem}-{k}.html", k + 1
    return candidate


def _apply(post: Post, staged: StagedPost, filename: str) -> None:
    post.slug = staged.slug
    post.title = staged.title
    post.author = staged.author
    post.markdown = staged.markdown
    post.html = staged.html
    post.excerpt = staged.excerpt
    post.hash = staged.hash
    post.labels = list(staged.labels)
    post.filename = filename
    post.created_at = staged.created_at
    post.updated_at = staged.updated_at


def commit_post(
    session: Session,
    staged: StagedPost,
    max_versions: int = 10,
    committed_at: datetime | None = None,
    ) -> tuple[Post, str]:
    """Upsert a StagedPost keyed on its issue number.

    Returns (post, status) where status is 'created', 'updated', or 'unchanged'.
    Flushes but does not commit; the caller controls the transaction.
    An update snapshots the previous state as a PostVersion first.
    """
    committed_at = committed_at or utcnow()
    post = get_by_number(session, staged.number)

    if post:
        if post.hash == staged.hash:
            return post, 'unchanged'
        save_version(session, post, max_versions)
        _apply(post, staged, _unique_filename(session, staged))
        post.committed_at = committed_at
        session.add(post)
        session.flush()
        return post, 'updated'

    filename = _unique_filename(session, staged)
    post = Post(
        number=staged.number,
        slug=staged.slug,
        title=staged.title,
        markdown=staged.markdown,
        html=staged.html,
        hash=staged.hash,
        filename=filename,
        committed_at=committed_at,
    )
    _apply(post, staged, filename)
    session.add(post)
    session.flush()
    return post, 'created'


def refresh_render(session: Session, post: Post, html: str, excerpt: str) -> bool:
    """Store re-rendered html/excerpt for an existing post. Returns True if anything changed."""
    if post.html == html and post.excerpt == excerpt:
        return False
    post.html = html
    post.excerpt = excerpt
    session.add(post)
    session.flush()
    return True
