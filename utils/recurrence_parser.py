"""Recurrence Rule Parser for Task Scheduling.

This module parses the compact repeat rules stored on tasks into typed
rule values.

Supported rules:
- Daily: "d <n>" - every n days, 1 <= n <= 400
- Yearly: "y" - every year on the same date
- Weekly: "w <d>[,<d>...]" - on the listed weekdays, 1=Monday ... 7=Sunday
- Monthly: "m <day>[,<day>...] [<month>[,<month>...]]" - on the listed
  days (1..31, -1 for the last day, -2 for the day before it) of the
  listed months (1..12, every month when omitted)
"""

import re
import logging
from dataclasses import dataclass
from typing import ClassVar, Iterable, Tuple, Union

from enums import RecurrenceKind, SIGNED_MONTH_DAYS
from utils.error_handler import (
    EmptyRuleError,
    InvalidNumericFieldError,
    UnsupportedFormatError,
)

logger = logging.getLogger("app")


MAX_DAYS_INTERVAL = 400
MAX_MONTH_DAY = 31
ALL_MONTHS = tuple(range(1, 13))

DAILY_PATTERN = re.compile(r"d (\d{1,3})", re.ASCII)
YEARLY_PATTERN = re.compile(r"y", re.ASCII)
WEEKLY_PATTERN = re.compile(r"w (\d(?:,\d)*)", re.ASCII)
MONTHLY_PATTERN = re.compile(
    r"m (-?\d{1,2}(?:,-?\d{1,2})*)(?: (\d{1,2}(?:,\d{1,2})*))?", re.ASCII
)


@dataclass(frozen=True)
class DailyRule:
    """Repeat every ``interval_days`` days."""
    interval_days: int
    kind: ClassVar[RecurrenceKind] = RecurrenceKind.DAILY


@dataclass(frozen=True)
class YearlyRule:
    """Repeat once a year."""
    kind: ClassVar[RecurrenceKind] = RecurrenceKind.YEARLY


@dataclass(frozen=True)
class WeeklyRule:
    """Repeat on ISO weekdays, ascending and unique."""
    weekdays: Tuple[int, ...]
    kind: ClassVar[RecurrenceKind] = RecurrenceKind.WEEKLY


@dataclass(frozen=True)
class MonthlyRule:
    """Repeat on signed month days of the listed months, both ascending and unique."""
    days: Tuple[int, ...]
    months: Tuple[int, ...] = ALL_MONTHS
    kind: ClassVar[RecurrenceKind] = RecurrenceKind.MONTHLY


RecurrenceRule = Union[DailyRule, YearlyRule, WeeklyRule, MonthlyRule]


def sort_unique(values: Iterable[int]) -> Tuple[int, ...]:
    return tuple(sorted(set(values)))


def _split_numbers(group: str) -> list:
    return [int(part) for part in group.split(",")]


def _parse_daily(match: re.Match) -> DailyRule:
    days = int(match.group(1))
    if days <= 0 or days > MAX_DAYS_INTERVAL:
        raise InvalidNumericFieldError(f"invalid day interval '{days}'")
    return DailyRule(interval_days=days)


def _parse_weekly(match: re.Match) -> WeeklyRule:
    weekdays = _split_numbers(match.group(1))
    for weekday in weekdays:
        if weekday < 1 or weekday > 7:
            raise InvalidNumericFieldError(f"invalid weekday '{weekday}'")
    return WeeklyRule(weekdays=sort_unique(weekdays))


def _parse_monthly(match: re.Match) -> MonthlyRule:
    days = _split_numbers(match.group(1))
    for day in days:
        if day not in SIGNED_MONTH_DAYS and (day <= 0 or day > MAX_MONTH_DAY):
            raise InvalidNumericFieldError(f"invalid month day '{day}'")

    months = ALL_MONTHS
    if match.group(2):
        months = _split_numbers(match.group(2))
        for month in months:
            if month < 1 or month > 12:
                raise InvalidNumericFieldError(f"invalid month '{month}'")
        months = sort_unique(months)

    return MonthlyRule(days=sort_unique(days), months=months)


def parse_repeat_rule(repeat: str) -> RecurrenceRule:
    """Parse a repeat rule string.

    Args:
        repeat: Rule string, e.g. "d 7", "y", "w 1,5" or "m 1,-1 1,7"

    Returns:
        The matching rule value

    Raises:
        EmptyRuleError: if the rule is empty
        UnsupportedFormatError: if the rule matches no known pattern
        InvalidNumericFieldError: if a number in the rule is out of range
    """
    repeat = (repeat or "").strip()
    if not repeat:
        raise EmptyRuleError()

    match = DAILY_PATTERN.fullmatch(repeat)
    if match:
        return _parse_daily(match)

    if YEARLY_PATTERN.fullmatch(repeat):
        return YearlyRule()

    match = WEEKLY_PATTERN.fullmatch(repeat)
    if match:
        return _parse_weekly(match)

    match = MONTHLY_PATTERN.fullmatch(repeat)
    if match:
        return _parse_monthly(match)

    logger.debug(f"No repeat pattern matched: {repeat}")
    raise UnsupportedFormatError(f"unsupported interval format '{repeat}'")
