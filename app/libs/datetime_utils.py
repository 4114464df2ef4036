"""
Datetime utilities for timezone handling and date comparisons

Timestamps are stored as naive UTC values; helpers here produce values
that compare correctly against stored columns.
"""
from datetime import datetime, timedelta, timezone


def utcnow() -> datetime:
    """Current UTC time as a naive datetime, matching stored columns"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def days_ago(days: int) -> datetime:
    """
    Naive UTC datetime ``days`` days before now

    Example:
        >>> window_start = days_ago(15)
        >>> window_start < utcnow()
        True
    """
    return utcnow() - timedelta(days=days)
