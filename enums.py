"""Enums for the Task Scheduler.

This module defines the enums shared by the recurrence engine and the
task API.
"""

from enum import Enum


class RecurrenceKind(str, Enum):
    """Kind of a recurrence rule, keyed by the rule's leading letter.

    Attributes:
        DAILY: Task repeats every N days ("d 7").
        YEARLY: Task repeats once a year on the same date ("y").
        WEEKLY: Task repeats on listed weekdays ("w 1,4").
        MONTHLY: Task repeats on listed days of listed months ("m 1,-1 3,6").
    """
    DAILY = "d"
    YEARLY = "y"
    WEEKLY = "w"
    MONTHLY = "m"


# Special month-day values accepted by monthly rules
LAST_DAY_OF_MONTH = -1
BEFORE_LAST_DAY_OF_MONTH = -2

SIGNED_MONTH_DAYS = (BEFORE_LAST_DAY_OF_MONTH, LAST_DAY_OF_MONTH)
