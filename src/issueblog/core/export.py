"""Site export: post pages, paginated index, tag pages, feed, sitemap, and search index"""

import json
import logging
import shutil
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from issueblog.config import Settings
from issueblog.core.utils.dates import long_date, rfc822
from issueblog.core.utils.paginate import Page, page_path, paginate
from issueblog.core.utils.slug import slugify
from issueblog.crud.models import Post


logger = logging.getLogger(__name__)

PACKAGE_DIR = Path(__file__).resolve().parent.parent
TEMPLATE_DIR = PACKAGE_DIR / "templates"
STATIC_DIR = PACKAGE_DIR / "static"


def make_env() -> Environment:
    """Jinja2 environment with HTML/XML autoescaping and the date filters."""
    env = Environment(
        loader=FileSystemLoader(TEMPLATE_DIR),
        autoescape=select_autoescape(["html", "xml"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["long_date"] = long_date
    env.filters["rfc822"] = rfc822
    return env


def tag_slugs(tags) -> dict[str, str]:
    """Map each label to a page slug.

    Labels whose slugs clash (C and C++) are taken in sorted order; later ones get -2, -3, ...
    """
    slugs: dict[str, str] = {}
    taken: set[str] = set()
    for tag in sorted(set(tags)):
        base = slugify(tag) or "tag"
        slug, k = base, 2
        while slug in taken:
            slug, k = f"{base}-{k}", k + 1
        taken.add(slug)
        slugs[tag] = slug
    return slugs


def issue_url(settings: Settings, number: int) -> str:
    return f"{settings.repository_url}/issues/{number}" if settings.repository else ""


def _write(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def write_post(
    env: Environment,
    post: Post,
    settings: Settings,
    output_dir: Path,
    slugs: dict[str, str] | None = None,
    ) -> Path:
    """Render posts/<filename> for a single post."""
    slugs = slugs or tag_slugs(post.labels or [])
    tags = [{"name": t, "slug": slugs[t]} for t in post.labels or []]
    html = env.get_template("post.html").render(
        site=settings, post=post, tags=tags, root="../",
        issue_url=issue_url(settings, post.number), description=post.excerpt,
    )
    return _write(output_dir / "posts" / post.filename, html)


def _write_listing(
    env: Environment,
    page: Page,
    settings: Settings,
    path: Path,
    root: str,
    heading: str = "",
    prev_url: str = "",
    next_url: str = "",
    ) -> Path:
    html = env.get_template("list.html").render(
        site=settings, page=page, root=root, heading=heading,
        prev_url=prev_url, next_url=next_url, description=settings.site_description,
    )
    return _write(path, html)


def write_index(env: Environment, posts: list[Post], settings: Settings, output_dir: Path) -> list[Path]:
    """Render index.html plus page/<n>.html for every further page of posts."""
    written = []
    for page in paginate(posts, settings.posts_per_page):
        root = "" if page.number == 1 else "../"
        written.append(_write_listing(
            env, page, settings, output_dir / page_path(page.number), root,
            prev_url=root + page_path(page.number - 1) if page.has_prev else "",
            next_url=root + page_path(page.number + 1) if page.has_next else "",
        ))
    return written


def group_by_tag(posts: list[Post]) -> dict[str, list[Post]]:
    """Map each label to its posts, preserving the newest-first order of posts."""
    groups: dict[str, list[Post]] = {}
    for post in posts:
        for label in post.labels or []:
            groups.setdefault(label, []).append(post)
    return dict(sorted(groups.items()))


def write_tag_pages(
    env: Environment,
    tags: dict[str, list[Post]],
    settings: Settings,
    output_dir: Path,
    slugs: dict[str, str] | None = None,
    ) -> list[Path]:
    """Render tags/<tag-slug>.html for each label in tags, listing its posts."""
    slugs = slugs or tag_slugs(tags)
    written = []
    for tag, tagged in tags.items():
        page = Page(number=1, total=1, posts=tagged)
        path = output_dir / "tags" / f"{slugs[tag]}.html"
        written.append(_write_listing(env, page, settings, path, "../", heading=f"Posts tagged “{tag}”"))
    return written


def build_feed(env: Environment, posts: list[Post], settings: Settings) -> str:
    """RSS 2.0 document for the newest feed_items posts."""
    return env.get_template("feed.xml").render(site=settings, posts=posts[:settings.feed_items])


def build_sitemap(env: Environment, posts: list[Post], settings: Settings) -> str:
    return env.get_template("sitemap.xml").render(site=settings, posts=posts)


def build_search_index(posts: list[Post]) -> list[dict]:
    """Client-side search entries, one per post, with site-relative URLs."""
    return [
        {
            "number": p.number,
            "title": p.title,
            "url": f"posts/{p.filename}",
            "date": p.created_at.date().isoformat(),
            "author": p.author,
            "tags": list(p.labels or []),
            "excerpt": p.excerpt,
        }
        for p in posts
    ]


def _prune(directory: Path, keep: set[Path]) -> list[Path]:
    """Delete generated .html files in directory that are not in keep."""
    removed = []
    if directory.is_dir():
        for path in directory.glob("*.html"):
            if path not in keep:
                path.unlink()
                removed.append(path)
    return removed


def export_site(
    posts: list[Post],
    settings: Settings,
    output_dir: Path,
    tags: dict[str, list[Post]] | None = None,
    ) -> list[Path]:
    """Write the whole site for posts (newest first). Returns the written paths.

    tags maps each label to its posts; it is grouped from posts when not given.

    Post, page, and tag files left over from earlier exports are removed.
    Feed and sitemap need absolute URLs and are skipped when no base URL is known.
    """
    env = make_env()
    output_dir.mkdir(parents=True, exist_ok=True)

    tags = group_by_tag(posts) if tags is None else tags
    slugs = tag_slugs(tags)

    post_paths = [write_post(env, p, settings, output_dir, slugs) for p in posts]
    index_paths = write_index(env, posts, settings, output_dir)
    tag_paths = write_tag_pages(env, tags, settings, output_dir, slugs)

    for directory, kept in (
        (output_dir / "posts", post_paths),
        (output_dir / "page", index_paths),
        (output_dir / "tags", tag_paths),
    ):
        for path in _prune(directory, set(kept)):
            logger.info("Removed stale page: %s", path)

    written = post_paths + index_paths + tag_paths
    written.append(_write(
        output_dir / "search.json",
        json.dumps(build_search_index(posts), indent=2, ensure_ascii=False),
    ))

    if settings.base_url:
        written.append(_write(output_dir / "feed.xml", build_feed(env, posts, settings)))
        written.append(_write(output_dir / "sitemap.xml", build_sitemap(env, posts, settings)))
    else:
        logger.warning("No site_url or repository configured; skipping feed.xml and sitemap.xml")

    css = output_dir / "styles.css"
    if not css.exists():
        shutil.copyfile(STATIC_DIR / "styles.css", css)
        written.append(css)

    logger.info("Exported %d post(s) to %s", len(posts), output_dir)
    return written
