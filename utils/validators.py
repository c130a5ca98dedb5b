"""Task Validation Utilities for the Scheduler.

Rules applied to every task that is added or updated:
- The title is required
- An empty date means today
- The date must be in YYYYMMDD format; surrounding blanks are dropped
- A repeat rule, if present, must be understood by the recurrence engine
- A date in the past moves to the next date of its repeat rule, or to
  today when the task does not repeat
"""

import logging
from datetime import date, datetime
from typing import Union

from schemas import TaskBase
from utils.date_utils import format_date, midnight, parse_date
from utils.error_handler import InvalidDateSyntaxError, TaskValidationError
from utils.recurrence_calculator import next_date

logger = logging.getLogger("app")


def validate_task(task: TaskBase, now: Union[date, datetime]) -> TaskBase:
    """Validate a task and normalize its date in place.

    Args:
        task: Submitted task
        now: Reference instant; only its calendar date is used

    Returns:
        The same task, with ``date`` normalized

    Raises:
        TaskValidationError: if the title is missing or the date is malformed
        RecurrenceError: if the repeat rule is rejected by the engine
    """
    if not task.title:
        raise TaskValidationError("title is required", code="MISSING_TITLE")

    today = midnight(now)
    today_str = format_date(today)

    if not task.date:
        task.date = today_str

    try:
        task_date = parse_date(task.date)
    except InvalidDateSyntaxError:
        raise TaskValidationError("invalid date format", code="INVALID_DATE")
    task.date = format_date(task_date)

    next_task_date = None
    if task.repeat:
        next_task_date = next_date(today, task.date, task.repeat)

    if task_date < today:
        if task.repeat:
            logger.debug(f"Moving past date {task.date} of repeating task to {next_task_date}")
            task.date = next_task_date
        else:
            task.date = today_str

    return task
