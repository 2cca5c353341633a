"""Date manipulation utilities"""

import math
from datetime import datetime, timedelta, timezone

SECONDS_PER_DAY = 86_400


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime"""
    return datetime.now(timezone.utc)


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp, treating naive values as UTC"""
    # fromisoformat rejects a trailing "Z" before Python 3.11
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def days_between(first: datetime, second: datetime) -> int:
    """Whole days between two instants, rounded half up"""
    elapsed = abs((first - second).total_seconds()) / SECONDS_PER_DAY
    return math.floor(elapsed + 0.5)


def days_ago(now: datetime, days: int) -> datetime:
    return now - timedelta(days=days)
