"""Slug and filename generation for post pages"""

import re
from datetime import datetime


def slugify(text: str) -> str:
    """Convert text to a lowercase, hyphen-separated URL-safe slug."""
    text = text.lower()
    text = re.sub(r'[^\w\s-]', '', text)
    text = re.sub(r'[\s_]+', '-', text)
    return re.sub(r'-+', '-', text).strip('-')


def post_slug(title: str, number: int) -> str:
    """Slug for an issue title; falls back to issue-<number> when nothing survives."""
    return slugify(title) or f"issue-{number}"


def post_filename(created_at: datetime, slug: str) -> str:
    """Page filename of the form YYYY-MM-DD-<slug>.html."""
    return f"{created_at.date().isoformat()}-{slug}.html"
