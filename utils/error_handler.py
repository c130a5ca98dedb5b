"""
Error types and FastAPI exception handlers for the scheduler API.

Recurrence errors describe why a rule/date pair was rejected by the
engine. Task errors describe storage lookups that could not be served,
auth errors describe rejected or misconfigured sign-in.
All of them are turned into ``{"error": "..."}`` JSON bodies here.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger("app")


class RecurrenceError(Exception):
    """Base exception for rejected recurrence rules or dates"""
    code = "RECURRENCE_ERROR"

    def __init__(self, message: str, code: str = None):
        self.message = message
        if code is not None:
            self.code = code
        super().__init__(self.message)


class EmptyRuleError(RecurrenceError):
    """The repeat rule is empty after trimming."""
    code = "EMPTY_RULE"

    def __init__(self, message: str = "repeat rule is empty"):
        super().__init__(message)


class InvalidDateSyntaxError(RecurrenceError):
    """A date string is not in the fixed YYYYMMDD format."""
    code = "INVALID_DATE"


class UnsupportedFormatError(RecurrenceError):
    """The repeat rule matches none of the known patterns."""
    code = "UNSUPPORTED_FORMAT"


class InvalidNumericFieldError(RecurrenceError):
    """A numeric field of a matched rule is out of range."""
    code = "INVALID_NUMERIC_FIELD"


class NoMatchingDayError(RecurrenceError):
    """Monthly search found no valid day in the current or next year."""
    code = "NO_MATCHING_DAY"


class DateOutOfRangeError(RecurrenceError):
    """The next date would fall past the last representable day (9999-12-31)."""
    code = "DATE_OUT_OF_RANGE"


class APIError(Exception):
    """Base exception for errors answered with a fixed HTTP status"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class TaskError(APIError):
    """Base exception for task storage lookups"""


class EmptyTaskIdError(TaskError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str = "id mustn't be empty"):
        super().__init__(message)


class TaskNotFoundError(TaskError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, message: str = "task not found"):
        super().__init__(message)


class AuthError(APIError):
    status_code = status.HTTP_401_UNAUTHORIZED


class AuthConfigError(APIError):
    """Authentication is enabled but not fully configured."""

    def __init__(self, message: str = "server configuration error"):
        super().__init__(message)


class TaskValidationError(Exception):
    """Exception raised when a submitted task fails validation."""

    def __init__(self, message: str, code: str = "INVALID_TASK"):
        self.message = message
        self.code = code
        super().__init__(message)


def error_response(message: str, status_code: int) -> JSONResponse:
    """Build the JSON error body used by every endpoint."""
    return JSONResponse(status_code=status_code, content={"error": message})


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path}: {exc.message}")
    else:
        logger.warning(f"{request.method} {request.url.path}: {exc.message}")
    return error_response(exc.message, exc.status_code)


async def validation_error_handler(request: Request, exc: TaskValidationError) -> JSONResponse:
    logger.warning(f"{request.method} {request.url.path}: validation failed: {exc.code}: {exc.message}")
    return error_response(exc.message, status.HTTP_400_BAD_REQUEST)


async def recurrence_error_handler(request: Request, exc: RecurrenceError) -> JSONResponse:
    logger.warning(f"{request.method} {request.url.path}: {exc.code}: {exc.message}")
    return error_response(exc.message, status.HTTP_400_BAD_REQUEST)


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning(f"{request.method} {request.url.path}: JSON deserialization failed: {exc.errors()}")
    return error_response(f"JSON deserialization failed: {exc.errors()}", status.HTTP_400_BAD_REQUEST)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"{request.method} {request.url.path}: unexpected error: {exc}")
    return error_response("internal server error", status.HTTP_500_INTERNAL_SERVER_ERROR)


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the scheduler's exception handlers to the app."""
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(TaskValidationError, validation_error_handler)
    app.add_exception_handler(RecurrenceError, recurrence_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
