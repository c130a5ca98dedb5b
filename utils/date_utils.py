"""Calendar date helpers for the recurrence engine.

All helpers work at day granularity: datetimes are truncated to their
calendar date and the time of day is dropped.
"""

import re
from datetime import MAXYEAR, MINYEAR, date, datetime, timedelta
from typing import Iterable, List, Optional, Union

from dateutil.relativedelta import relativedelta

from utils.error_handler import InvalidDateSyntaxError

# Storage and API date layout
DATE_FORMAT = "%Y%m%d"
# Layout accepted by the task search box
SEARCH_DATE_FORMAT = "%d.%m.%Y"

_DATE_RE = re.compile(r"\d{8}", re.ASCII)
_SEARCH_DATE_RE = re.compile(r"\d{2}\.\d{2}\.\d{4}", re.ASCII)


def midnight(value: Union[date, datetime]) -> date:
    """Truncate a date or datetime to its calendar date.

    Aware datetimes keep the calendar day of their own offset; the
    offset itself is discarded.
    """
    if isinstance(value, datetime):
        return date(value.year, value.month, value.day)
    return value


def parse_date(value: str) -> date:
    """Parse a YYYYMMDD string.

    Raises:
        InvalidDateSyntaxError: if the string is not eight digits forming
            a real calendar date.
    """
    value = (value or "").strip()
    if not _DATE_RE.fullmatch(value):
        raise InvalidDateSyntaxError(f"error parsing the date '{value}': expected YYYYMMDD")
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except ValueError as e:
        raise InvalidDateSyntaxError(f"error parsing the date '{value}': {e}")


def format_date(value: date) -> str:
    return value.strftime(DATE_FORMAT)


def parse_search_date(value: str) -> Optional[date]:
    """Parse a DD.MM.YYYY search string, returning None if it is not a date."""
    if not _SEARCH_DATE_RE.fullmatch(value):
        return None
    try:
        return datetime.strptime(value, SEARCH_DATE_FORMAT).date()
    except ValueError:
        return None


def month_end(year: int, month: int) -> date:
    # day=31 clamps to the month's length without leaving the month
    return date(year, month, 1) + relativedelta(day=31)


def last_day_of_month(year: int, month: int) -> int:
    """Day number of the last day of the month."""
    return month_end(year, month).day


def resolve_days(days: Iterable[int], year: int, month: int) -> List[int]:
    """Turn signed day specs into concrete day numbers for a month.

    Negative values count back from the first day of the following month:
    -1 is the last day, -2 the day before it. Positive values are returned
    as-is, even when the month is too short for them.

    Returns:
        Sorted list of unique day numbers.
    """
    resolved = set()
    for day in days:
        if day < 0:
            # first of the following month plus a negative number of days
            resolved.add((month_end(year, month) + timedelta(days=day + 1)).day)
        else:
            resolved.add(day)
    return sorted(resolved)


def add_years(value: date, years: int) -> date:
    """Shift a date by whole years.

    Feb 29 shifted into a non-leap year overflows to Mar 1.

    Raises:
        OverflowError: if the target year is outside 1..9999
    """
    year = value.year + years
    if not MINYEAR <= year <= MAXYEAR:
        raise OverflowError(f"year {year} is out of range")
    try:
        return value.replace(year=year)
    except ValueError:
        return date(year, 3, 1)
