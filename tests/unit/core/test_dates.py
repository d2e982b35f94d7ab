"""Unit tests for core/utils/dates.py"""

from datetime import datetime, timedelta, timezone

from issueblog.core.utils.dates import long_date, rfc822, to_utc_naive, utcnow


def test_utcnow_is_naive():
    assert utcnow().tzinfo is None


def test_to_utc_naive_converts_offset():
    aware = datetime(2024, 1, 15, 12, 0, tzinfo=timezone(timedelta(hours=2)))
    assert to_utc_naive(aware) == datetime(2024, 1, 15, 10, 0)


def test_to_utc_naive_keeps_naive():
    naive = datetime(2024, 1, 15, 12, 0)
    assert to_utc_naive(naive) is naive


def test_long_date():
    assert long_date(datetime(2024, 1, 5)) == "January 5, 2024"


def test_rfc822():
    assert rfc822(datetime(2024, 1, 15, 10, 0)) == "Mon, 15 Jan 2024 10:00:00 +0000"
