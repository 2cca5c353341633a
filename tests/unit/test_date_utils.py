"""Unit tests for date helpers"""

from datetime import datetime, timedelta, timezone
from closure_watch.utils.date_utils import days_ago, days_between, parse_timestamp


def test_days_between_whole_days():
    """Test days between whole days"""
    now = datetime(2026, 1, 15, tzinfo=timezone.utc)
    assert days_between(now, now - timedelta(days=60)) == 60


def test_days_between_is_symmetric():
    """Test days between is symmetric"""
    now = datetime(2026, 1, 15, tzinfo=timezone.utc)
    earlier = now - timedelta(days=3, hours=5)
    assert days_between(now, earlier) == days_between(earlier, now) == 3


def test_days_between_rounds_half_up():
    """Test days_between rounds half days up"""
    now = datetime(2026, 1, 15, tzinfo=timezone.utc)
    assert days_between(now, now - timedelta(days=49, hours=12)) == 50
    assert days_between(now, now - timedelta(days=49, hours=11)) == 49
    # Python's round() would give 2 here
    assert days_between(now, now - timedelta(days=2, hours=12)) == 3


def test_parse_timestamp_handles_zulu_suffix():
    """Test parse_timestamp handles the Z suffix"""
    parsed = parse_timestamp("2024-03-01T10:30:00.123Z")
    assert parsed == datetime(2024, 3, 1, 10, 30, 0, 123000, tzinfo=timezone.utc)


def test_parse_timestamp_treats_naive_as_utc():
    """Test parse_timestamp treats naive timestamps as UTC"""
    assert parse_timestamp("2024-03-01T10:30:00").tzinfo == timezone.utc


def test_parse_timestamp_keeps_offset():
    """Test parse timestamp keeps offset"""
    parsed = parse_timestamp("2024-03-01T10:30:00+02:00")
    assert parsed.utcoffset() == timedelta(hours=2)


def test_days_ago():
    """Test days ago"""
    now = datetime(2026, 1, 15, tzinfo=timezone.utc)
    assert days_ago(now, 7) == datetime(2026, 1, 8, tzinfo=timezone.utc)
