"""Calendar date helpers.

All forecast dates are plain calendar dates (no time of day, no timezone).
Dates cross module boundaries as ISO strings (YYYY-MM-DD) and are parsed
back to ``datetime.date`` for arithmetic.
"""

from datetime import date, datetime
from typing import Optional, Union

from dateutil.relativedelta import relativedelta


DateLike = Union[date, datetime]


def start_of_day(value: DateLike) -> date:
    """Truncate a date or datetime to its calendar date."""
    if isinstance(value, datetime):
        return value.date()
    return value


def to_iso_date(value: DateLike) -> str:
    """Format a date as YYYY-MM-DD."""
    return start_of_day(value).isoformat()


def parse_iso_date(text: Optional[str]) -> Optional[date]:
    """Parse a YYYY-MM-DD string into a date.

    Splits on '-' and builds the date from the numeric parts. Missing month
    or day parts default to 1.

    Returns:
        The parsed date, or None if the string is empty or not a real
        calendar date. Callers must check for None before using the value.
    """
    if not text or not isinstance(text, str):
        return None

    parts = text.strip().split("-")
    try:
        year = int(parts[0])
        month = int(parts[1]) if len(parts) > 1 and parts[1] else 1
        day = int(parts[2]) if len(parts) > 2 and parts[2] else 1
        return date(year, month, day)
    except (ValueError, IndexError):
        return None


def add_days(value: DateLike, days: int) -> date:
    """Add (or subtract) whole days."""
    return start_of_day(value) + relativedelta(days=days)


def add_months(value: DateLike, months: int) -> date:
    """Add calendar months, clamping to the last day of the target month.

    Jan 31 + 1 month is Feb 28 (or Feb 29 in a leap year), never Mar 3.
    """
    return start_of_day(value) + relativedelta(months=months)


def add_years(value: DateLike, years: int) -> date:
    """Add calendar years, clamping Feb 29 to Feb 28 in non-leap years."""
    return start_of_day(value) + relativedelta(years=years)


def difference_in_days(start: DateLike, end: DateLike) -> int:
    """Whole days from start to end (negative if end is earlier)."""
    return (start_of_day(end) - start_of_day(start)).days


def month_key(iso_date: str) -> str:
    """YYYY-MM prefix of an ISO date string."""
    return iso_date[:7]


def format_month_label(key: str) -> str:
    """Human label for a YYYY-MM key, e.g. "January 2025"."""
    try:
        return datetime.strptime(key, "%Y-%m").strftime("%B %Y")
    except ValueError:
        return key
