"""Date parsing and calendar-month utilities."""

import re
from datetime import date, timedelta
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

_ISO_PREFIX = re.compile(r"^(\d{4})-(\d{2})-(\d{2})")
_DAY_FIRST_LONG = re.compile(r"^(\d{2})[/-](\d{2})[/-](\d{4})")
_DAY_FIRST_SHORT = re.compile(r"^(\d{2})[/-](\d{2})[/-](\d{2})")


def _build_date(year: int, month: int, day: int) -> Optional[date]:
    try:
        return date(year, month, day)
    except ValueError:
        return None


def parse_date(date_str: Optional[str], today: Optional[date] = None) -> date:
    """Parse a date string from a bank or ERP export.

    Formats are tried in order:
    - ISO prefix: "2024-01-15", "2024-01-15T10:30:00"
    - Day first, four-digit year: "15/01/2024", "15-01-2024"
    - Day first, two-digit year: "15/01/24" (read as 2024)
    - Anything dateutil understands, read day first

    Unparseable input never raises; today's date is returned instead so a
    messy export still imports.

    Args:
        date_str: Raw date string
        today: Date to fall back to (defaults to ``date.today()``)

    Returns:
        Date object
    """
    fallback = today or date.today()
    if not date_str or not date_str.strip():
        return fallback
    date_str = date_str.strip()

    match = _ISO_PREFIX.match(date_str)
    if match:
        year, month, day = (int(part) for part in match.groups())
        parsed = _build_date(year, month, day)
        if parsed is not None:
            return parsed

    match = _DAY_FIRST_LONG.match(date_str)
    if match:
        day, month, year = (int(part) for part in match.groups())
        parsed = _build_date(year, month, day)
        if parsed is not None:
            return parsed
    else:
        match = _DAY_FIRST_SHORT.match(date_str)
        if match:
            day, month, year = (int(part) for part in match.groups())
            parsed = _build_date(year + 2000, month, day)
            if parsed is not None:
                return parsed

    try:
        return date_parser.parse(date_str, dayfirst=True).date()
    except (ValueError, OverflowError, TypeError):
        return fallback


def period_key(d: date) -> str:
    """Return the ``YYYY-MM`` period a date falls in."""
    return d.strftime("%Y-%m")


def month_range(d: date) -> tuple[date, date]:
    """Get the first and last day of the month containing ``d``."""
    start = d.replace(day=1)
    end = start + relativedelta(months=1) - timedelta(days=1)
    return (start, end)


def last_n_months(n: int, today: Optional[date] = None) -> list[tuple[date, date]]:
    """Get (start, end) ranges for the last ``n`` months, oldest first.

    The month containing ``today`` is the last entry.
    """
    today = today or date.today()
    current_start = today.replace(day=1)
    ranges = []
    for offset in range(n - 1, -1, -1):
        ranges.append(month_range(current_start - relativedelta(months=offset)))
    return ranges


def next_month_day(day: int, today: Optional[date] = None) -> date:
    """Get the given day of the month after ``today``."""
    today = today or date.today()
    return (today.replace(day=1) + relativedelta(months=1)).replace(day=day)


def month_label(d: date, with_year: bool = True) -> str:
    """Short month label such as "Jan 24" (or "Jan" without the year)."""
    return d.strftime("%b %y") if with_year else d.strftime("%b")
