"""Recurrence Calculator for Next Task Date Computation.

This module computes the next date of a recurring task from its repeat
rule, its current date and a reference "now".

Supports:
- Daily recurrence (every N days)
- Yearly recurrence
- Weekly recurrence on a set of weekdays
- Monthly recurrence on a set of (signed) days of a set of months
"""

import logging
from datetime import date, datetime, timedelta
from typing import Union

from utils.date_utils import (
    add_years,
    format_date,
    last_day_of_month,
    midnight,
    parse_date,
    resolve_days,
)
from utils.error_handler import DateOutOfRangeError, EmptyRuleError, NoMatchingDayError
from utils.recurrence_parser import (
    DailyRule,
    MonthlyRule,
    RecurrenceRule,
    WeeklyRule,
    YearlyRule,
    parse_repeat_rule,
)

logger = logging.getLogger("app")


class RecurrenceCalculator:
    """Calculator for the next occurrence of recurring tasks."""

    @staticmethod
    def calculate_next_date(now: date, start: date, rule: RecurrenceRule) -> date:
        """Calculate the next date of a task.

        Args:
            now: Reference day, already truncated to midnight
            start: The task's current date
            rule: Parsed repeat rule

        Returns:
            The next date strictly after the relevant anchor
        """
        if isinstance(rule, DailyRule):
            return RecurrenceCalculator._next_daily(now, start, rule.interval_days)
        if isinstance(rule, YearlyRule):
            return RecurrenceCalculator._next_yearly(now, start)
        if isinstance(rule, WeeklyRule):
            return RecurrenceCalculator._next_weekly(now, start, rule)
        if isinstance(rule, MonthlyRule):
            return RecurrenceCalculator._next_monthly(now, start, rule)
        raise TypeError(f"Unknown recurrence rule: {rule!r}")

    @staticmethod
    def _next_daily(now: date, start: date, interval_days: int) -> date:
        """Step forward by the interval until the date is after now."""
        step = timedelta(days=interval_days)
        next_date = start + step
        while next_date <= now:
            next_date += step
        return next_date

    @staticmethod
    def _next_yearly(now: date, start: date) -> date:
        """Step forward a year at a time until the date is after now."""
        next_date = add_years(start, 1)
        while next_date <= now:
            next_date = add_years(next_date, 1)
        return next_date

    @staticmethod
    def _next_weekly(now: date, start: date, rule: WeeklyRule) -> date:
        """Calculate next weekly occurrence.

        The current weekday of the base date is never picked again, even
        when it is listed: the result always falls on a later day.
        """
        base = base_date(now, start)
        current_weekday = base.isoweekday()

        days_ahead = 0
        for weekday in rule.weekdays:
            if weekday > current_weekday:
                days_ahead = weekday - current_weekday
                break
        if days_ahead == 0:
            # Every listed weekday has passed this week
            days_ahead = 7 - current_weekday + rule.weekdays[0]

        return base + timedelta(days=days_ahead)

    @staticmethod
    def _next_monthly(now: date, start: date, rule: MonthlyRule) -> date:
        """Calculate next monthly occurrence.

        Searches the rest of the base date's year first, then the whole
        following year. Days a month is too short for are skipped.

        Raises:
            NoMatchingDayError: if no listed month has any listed day
        """
        base = base_date(now, start)

        for month in rule.months:
            if month < base.month:
                continue
            for day in _month_days(rule, base.year, month):
                if month == base.month and day <= base.day:
                    continue
                return date(base.year, month, day)

        next_year = base.year + 1
        for month in rule.months:
            for day in _month_days(rule, next_year, month):
                return date(next_year, month, day)

        raise NoMatchingDayError(
            f"invalid repeat rule: there aren't these days in submitted months "
            f"{list(rule.months)}"
        )


def _month_days(rule: MonthlyRule, year: int, month: int) -> list:
    """Concrete, existing days of a month that match the rule, ascending."""
    max_day = last_day_of_month(year, month)
    return [day for day in resolve_days(rule.days, year, month) if day <= max_day]


def base_date(now: date, start: date) -> date:
    """The task's date while it is still in the future, otherwise now."""
    if start > now:
        return start
    return now


def next_date(now: Union[date, datetime], start: str, repeat: str) -> str:
    """Compute the next date of a recurring task.

    Args:
        now: Reference instant; only its calendar date is used
        start: The task's current date as YYYYMMDD
        repeat: The task's repeat rule

    Returns:
        The next date as YYYYMMDD

    Raises:
        EmptyRuleError: if the rule is empty
        InvalidDateSyntaxError: if start is not a YYYYMMDD date
        UnsupportedFormatError: if the rule matches no known pattern
        InvalidNumericFieldError: if a number in the rule is out of range
        NoMatchingDayError: if a monthly rule never matches a real day
        DateOutOfRangeError: if the next date would fall after 9999-12-31
    """
    repeat = (repeat or "").strip()
    if not repeat:
        raise EmptyRuleError()

    start_date = parse_date(start)
    today = midnight(now)
    rule = parse_repeat_rule(repeat)

    try:
        result = RecurrenceCalculator.calculate_next_date(today, start_date, rule)
    except (ValueError, OverflowError) as e:
        raise DateOutOfRangeError(f"next date for '{repeat}' from {start_date} is out of range: {e}")
    logger.debug(f"Next date for '{repeat}' from {start} at {today}: {result}")
    return format_date(result)
