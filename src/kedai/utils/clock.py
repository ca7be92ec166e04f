"""Timestamp helpers.

All persisted timestamps are integer epoch milliseconds.
"""

import time
from datetime import date, datetime


def now_ms() -> int:
    """Return the current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


def ms_to_datetime(timestamp_ms: int) -> datetime:
    """Convert epoch milliseconds to a local naive datetime."""
    return datetime.fromtimestamp(timestamp_ms / 1000)


def ms_to_date(timestamp_ms: int) -> date:
    """Convert epoch milliseconds to the local calendar day."""
    return ms_to_datetime(timestamp_ms).date()


def date_key(day: date) -> str:
    """Return the ISO day string used in backup names."""
    return day.isoformat()
