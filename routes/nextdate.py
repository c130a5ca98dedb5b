"""Next Date Endpoint.

GET /api/nextdate?date=YYYYMMDD&repeat=<rule>[&now=YYYYMMDD]

Answers with the next date of the rule as plain text. Without ``now``
the server's current date is used. Failures are answered with status 400
and a plain-text explanation.
"""

import logging
from datetime import datetime

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from utils.date_utils import parse_date
from utils.error_handler import RecurrenceError
from utils.recurrence_calculator import next_date

logger = logging.getLogger("app")

router = APIRouter()


@router.get("/nextdate", response_class=PlainTextResponse)
async def get_next_date(date: str = "", repeat: str = "", now: str = ""):
    """Compute the next date of a repeat rule without touching storage."""
    if now:
        try:
            reference = parse_date(now)
        except RecurrenceError as e:
            logger.warning(f"nextdate: invalid 'now' parameter: {e.message}")
            return PlainTextResponse(f"invalid 'now' parameter: {e.message}", status_code=400)
    else:
        reference = datetime.now()

    try:
        result = next_date(reference, date, repeat)
    except RecurrenceError as e:
        logger.warning(f"nextdate: failed to compute the new date: {e.code}: {e.message}")
        return PlainTextResponse(f"failed to compute the new date: {e.message}", status_code=400)

    return PlainTextResponse(result)
