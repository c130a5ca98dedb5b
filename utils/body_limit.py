"""
ASGI middleware capping the size of request bodies.

Requests announcing a Content-Length above the limit are rejected before
anything is read. Requests without one (chunked uploads) are buffered
while counting bytes and rejected as soon as the count passes the limit.
"""

import logging
from typing import Any, Callable

from config.settings import Settings
from utils.error_handler import error_response

logger = logging.getLogger("app")

TOO_LARGE_MESSAGE = "request body too large"


class BodySizeLimitMiddleware:
    """Reject request bodies larger than ``settings.MAX_UPLOAD_SIZE`` with 413.

    Example:
        >>> app.add_middleware(BodySizeLimitMiddleware, settings=settings)
    """

    def __init__(self, app: Any, settings: Settings) -> None:
        self.app = app
        self._settings = settings

    async def __call__(self, scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        limit = self._settings.MAX_UPLOAD_SIZE
        headers = dict(scope.get("headers", []))
        content_length = headers.get(b"content-length")

        if content_length is not None:
            if content_length.isdigit() and int(content_length) > limit:
                await self._reject(scope, receive, send, int(content_length))
                return
            await self.app(scope, receive, send)
            return

        body = b""
        while True:
            message = await receive()
            if message["type"] == "http.disconnect":
                return
            body += message.get("body", b"")
            if len(body) > limit:
                await self._reject(scope, receive, send, len(body))
                return
            if not message.get("more_body", False):
                break

        replayed = False

        async def replay_body() -> dict:
            nonlocal replayed
            if not replayed:
                replayed = True
                return {"type": "http.request", "body": body, "more_body": False}
            return await receive()

        await self.app(scope, replay_body, send)

    async def _reject(self, scope: dict, receive: Callable, send: Callable, size: int) -> None:
        logger.warning(f"Rejected {scope['method']} {scope['path']}: body of at least {size} bytes")
        response = error_response(TOO_LARGE_MESSAGE, 413)
        await response(scope, receive, send)
