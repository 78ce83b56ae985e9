"""Date parsing utilities."""

from datetime import date, datetime, timedelta
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta


def parse_date(date_str: str) -> date:
    """Parse a user-supplied date string into a date object.

    Supports various formats including relative dates:
    - Absolute dates: "2024-01-15", "January 15, 2024", etc.
    - Relative dates: "today", "yesterday", "last month", "this year", etc.

    Args:
        date_str: Date string in various formats

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

    if date_str.startswith("last "):
        period = date_str[5:]
        if period == "month":
            return (today - relativedelta(months=1)).replace(day=1)
        elif period == "year":
            return today.replace(month=1, day=1) - relativedelta(years=1)
        elif period == "week":
            return today - timedelta(days=today.weekday() + 7)

    elif date_str.startswith("this "):
        period = date_str[5:]
        if period == "month":
            return today.replace(day=1)
        elif period == "year":
            return today.replace(month=1, day=1)
        elif period == "week":
            return today - timedelta(days=today.weekday())

    try:
        dt = date_parser.parse(date_str)
        return dt.date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


# dateutil fills missing fields from its default; parsing under two defaults
# that differ in year, month and day exposes any field the text left out.
_FILL_DEFAULTS = (datetime(2000, 1, 1), datetime(2001, 2, 2))


def parse_signal_date(value: Optional[str]) -> Optional[date]:
    """Parse a stored signal date, returning None when it cannot be read.

    Signal dates come from document extraction and manual edits and are not
    guaranteed to be valid. A full ISO date or datetime is the common case.
    Other spellings ("Feb 8, 2024") are accepted only when they name the
    year, month and day explicitly, so the result never depends on the date
    the code runs on. Partial dates ("March 2024", "17") and trailing text
    ("2024-01-08garbage") give None.
    """
    if not value or not value.strip():
        return None

    text = value.strip()
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        pass

    try:
        first, second = (
            date_parser.parse(text, default=default).date() for default in _FILL_DEFAULTS
        )
    except (ValueError, OverflowError):
        return None
    return first if first == second else None


def days_between(later: date, earlier: date) -> int:
    """Absolute number of whole days separating two dates."""
    return abs((later - earlier).days)
