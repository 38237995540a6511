"""Date parsing utilities."""

from datetime import date, timedelta
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta


def parse_iso_date(value: str) -> date:
    """Parse a stored 'YYYY-MM-DD' key into a calendar date.

    The date is built from its year/month/day components so no timezone
    conversion can shift it to a neighbouring day. Any time part after the
    date (e.g. 'YYYY-MM-DDT00:00:00Z') is ignored.

    Raises:
        ValueError: If the value is not an ISO calendar date
    """
    text = value.strip()[:10]
    try:
        year, month, day = (int(part) for part in text.split("-"))
        return date(year, month, day)
    except ValueError as e:
        raise ValueError(f"Could not parse ISO date '{value}': {e}")


def parse_month(value: str) -> date:
    """Parse a 'YYYY-MM' month into the first day of that month.

    Raises:
        ValueError: If the value is not a valid month
    """
    text = value.strip()
    try:
        year, month = (int(part) for part in text.split("-"))
        return date(year, month, 1)
    except ValueError as e:
        raise ValueError(f"Could not parse month '{value}' (expected YYYY-MM): {e}")


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports various formats including relative dates:
    - ISO dates: "2024-01-15"
    - Local dates (day first): "15/01/2024"
    - Relative dates: "today", "yesterday", "tomorrow", "last month", "this month"

    Args:
        date_str: Date string in various formats

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    # Handle relative dates
    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
        "this month": today.replace(day=1),
        "last month": (today - relativedelta(months=1)).replace(day=1),
        "next month": (today + relativedelta(months=1)).replace(day=1),
    }

    if date_str in relative_dates:
        return relative_dates[date_str]

    # ISO keys are split by component, never handed to a timezone-aware parser
    if len(date_str) == 10 and date_str[4] == "-" and date_str[7] == "-":
        return parse_iso_date(date_str)

    # Try parsing as absolute date
    try:
        dt = date_parser.parse(date_str, dayfirst=True)
        return dt.date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def format_local_date(value: date) -> str:
    """Format a date as DD/MM/YYYY."""
    return value.strftime("%d/%m/%Y")
