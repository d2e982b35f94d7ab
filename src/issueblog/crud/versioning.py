"""Post version persistence: save, prune, list, and diff operations"""

from uuid import UUID

from sqlalchemy import func
from sqlmodel import Session, select

from issueblog.core.utils.diff import unified_diff
from issueblog.crud.models import Post, PostVersion


def _get_version(session: Session, post_id: UUID, num: int) -> PostVersion:
    v = session.exec(
        select(PostVersion)
        .where(PostVersion.post_id == post_id)
        .where(PostVersion.version_num == num)
    ).one_or_none()
    if v is None:
        raise ValueError(f"Version {num} not found for post {post_id}")
    return v


def diff_versions(session: Session, post_id: UUID, from_num: int, to_num: int, context: int = 3) -> list[str]:
    """Unified diff lines between two stored versions. Raises ValueError if either is missing."""
    v_from, v_to = _get_version(session, post_id, from_num), _get_version(session, post_id, to_num)
    return unified_diff(v_from.markdown, v_to.markdown, f"v{from_num}", f"v{to_num}", context)


def diff_current(session: Session, post: Post, from_num: int, context: int = 3) -> list[str]:
    """Unified diff lines from a stored version to the post's current markdown."""
    v_from = _get_version(session, post.id, from_num)
    return unified_diff(v_from.markdown, post.markdown, f"v{from_num}", "current", context)


def list_versions(session: Session, post_id: UUID) -> list[PostVersion]:
    """Return all versions for a post ordered by version_num ascending."""
    return list(
        session.exec(
            select(PostVersion)
            .where(PostVersion.post_id == post_id)
            .order_by(PostVersion.version_num.asc())
        ).all()
    )


def prune_versions(session: Session, post_id: UUID, max_versions: int) -> int:
    """Delete oldest versions beyond max_versions. Returns count deleted. No-op if max_versions=0."""
    if max_versions == 0:
        return 0

    versions = list_versions(session, post_id)
    excess = len(versions) - max_versions
    if excess <= 0:
        return 0

    for v in versions[:excess]:
        session.delete(v)
    session.flush()

    return excess


def save_version(session: Session, post: Post, max_versions: int = 10) -> PostVersion:
    """Snapshot current Post state as a new immutable version.

    Computes next version_num as MAX(version_num)+1 for this post.
    Calls prune_versions after saving if max_versions > 0.
    """
    result = session.exec(
        select(func.max(PostVersion.version_num))
        .where(PostVersion.post_id == post.id)
    ).one()

    version = PostVersion(
        post_id=post.id,
        version_num=(result or 0) + 1,
        title=post.title,
        markdown=post.markdown,
        hash=post.hash,
        labels=list(post.labels or []),
    )
    session.add(version)
    session.flush()

    if max_versions > 0:
        prune_versions(session, post.id, max_versions)

    return version
