"""UTC normalization and the date formats used by pages, feeds, and sitemaps"""

from datetime import datetime, timezone
from email.utils import format_datetime


def utcnow() -> datetime:
    """Current time as naive UTC, the form stored in the database."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_utc_naive(value: datetime) -> datetime:
    """Convert an aware datetime to naive UTC; naive values are assumed to be UTC already."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def long_date(value: datetime) -> str:
    """'January 15, 2024' style date for post pages and listings."""
    return f"{value:%B} {value.day}, {value:%Y}"


def rfc822(value: datetime) -> str:
    """RFC 822 timestamp for RSS pubDate (naive values are read as UTC)."""
    return format_datetime(value.replace(tzinfo=timezone.utc))
