"""Date parsing and calendar month utilities."""

from datetime import date, timedelta
from typing import Iterator

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

SUPPORTED_PERIODS = (
    "this-month",
    "this-year",
    "this-week",
    "last-month",
    "last-year",
    "last-week",
)


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports absolute dates ("2024-01-15", "January 15, 2024") and a few
    relative keywords: "today", "yesterday", "tomorrow", and
    "last/this/next month|year|week" (first day of that period).

    Args:
        date_str: Date string

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }
    if date_str in relative_dates:
        return relative_dates[date_str]

    prefix, _, period = date_str.partition(" ")
    offsets = {"last": -1, "this": 0, "next": 1}
    if prefix in offsets and period in ("month", "year", "week"):
        offset = offsets[prefix]
        if period == "month":
            return (today + relativedelta(months=offset)).replace(day=1)
        if period == "year":
            return today.replace(month=1, day=1) + relativedelta(years=offset)
        # Weeks start on Monday
        return today - timedelta(days=today.weekday()) + timedelta(weeks=offset)

    try:
        return date_parser.parse(date_str).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def get_date_range(period: str, today: date | None = None) -> tuple[date, date]:
    """Get start and end dates for a named period.

    Args:
        period: One of SUPPORTED_PERIODS
        today: Reference date, defaults to date.today()

    Returns:
        Tuple of (start_date, end_date); "this-*" periods end today

    Raises:
        ValueError: If period string is not recognized
    """
    period = period.strip().lower()
    today = today or date.today()
    month_start = today.replace(day=1)
    year_start = today.replace(month=1, day=1)
    week_start = today - timedelta(days=today.weekday())

    if period == "this-month":
        return month_start, today
    if period == "this-year":
        return year_start, today
    if period == "this-week":
        return week_start, today
    if period == "last-month":
        return month_start - relativedelta(months=1), month_start - timedelta(days=1)
    if period == "last-year":
        return year_start - relativedelta(years=1), year_start - timedelta(days=1)
    if period == "last-week":
        start = week_start - timedelta(weeks=1)
        return start, start + timedelta(days=6)

    raise ValueError(
        f"Unknown period: '{period}'. Supported periods: {', '.join(SUPPORTED_PERIODS)}"
    )


def month_key(value: date) -> str:
    """Return the calendar month key (YYYY-MM) of a date."""
    return value.strftime("%Y-%m")


def iter_month_keys(start: date, end: date) -> Iterator[str]:
    """Yield every month key from start's month through end's month."""
    current = start.replace(day=1)
    last = end.replace(day=1)
    while current <= last:
        yield month_key(current)
        current += relativedelta(months=1)


def month_key_to_date(key: str) -> date:
    """Return the first day of the month identified by a YYYY-MM key."""
    year, month = key.split("-")
    return date(int(year), int(month), 1)
