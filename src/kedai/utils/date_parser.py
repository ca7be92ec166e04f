"""Date parsing utilities."""

from datetime import date, timedelta
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta


PERIODS = ("today", "this-week", "this-month", "last-week", "last-month")


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports absolute dates ("2024-01-15", "January 15, 2024") and the
    relative words "today", "yesterday", "this week" and "this month".

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "this week": today - timedelta(days=today.weekday()),
        "this month": today.replace(day=1),
    }
    if date_str in relative_dates:
        return relative_dates[date_str]

    try:
        return date_parser.parse(date_str).date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def get_date_range(period: str) -> tuple[date, date]:
    """Get inclusive start and end dates for a named period.

    Args:
        period: One of today, this-week, this-month, last-week, last-month

    Raises:
        ValueError: If period string is not recognized
    """
    period = period.strip().lower()
    today = date.today()

    if period == "today":
        return (today, today)

    if period == "this-week":
        return (today - timedelta(days=today.weekday()), today)

    if period == "this-month":
        return (today.replace(day=1), today)

    if period == "last-week":
        start_date = today - timedelta(days=today.weekday() + 7)
        return (start_date, start_date + timedelta(days=6))

    if period == "last-month":
        start_date = (today - relativedelta(months=1)).replace(day=1)
        return (start_date, today.replace(day=1) - timedelta(days=1))

    raise ValueError(f"Unknown period: '{period}'. Supported periods: {', '.join(PERIODS)}")
