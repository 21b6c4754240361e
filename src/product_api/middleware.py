"""ASGI middleware enforcing the request body ceiling."""

import logging
from typing import List

from starlette.datastructures import Headers
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from product_api.errors import PayloadTooLargeError, error_response

logger = logging.getLogger(__name__)

# Bodies subject to the size ceiling; multipart uploads are not
SIZE_LIMITED_CONTENT_TYPES = ("application/json", "application/x-www-form-urlencoded")


class BodySizeLimitMiddleware:
    """
    Reject JSON and URL-encoded bodies larger than `max_body_size` bytes with a 413.

    A declared `Content-Length` over the limit is refused before anything is
    read. Otherwise the body is buffered while counting the bytes actually
    received, so chunked bodies are held to the same limit, and then replayed
    to the application.
    """

    def __init__(self, app: ASGIApp, max_body_size: int):
        self.app = app
        self.max_body_size = max_body_size

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        headers = Headers(scope=scope)
        content_type = headers.get("content-type", "").lower()
        if not content_type.startswith(SIZE_LIMITED_CONTENT_TYPES):
            await self.app(scope, receive, send)
            return

        content_length = headers.get("content-length", "")
        if content_length.isdigit() and int(content_length) > self.max_body_size:
            await self.reject(scope, receive, send, int(content_length))
            return

        buffered: List[Message] = []
        received = 0
        while True:
            message = await receive()
            buffered.append(message)
            if message["type"] != "http.request":
                break
            received += len(message.get("body", b""))
            if received > self.max_body_size:
                await self.reject(scope, receive, send, received)
                return
            if not message.get("more_body", False):
                break

        async def replay() -> Message:
            if buffered:
                return buffered.pop(0)
            return await receive()

        await self.app(scope, replay, send)

    async def reject(self, scope: Scope, receive: Receive, send: Send, size: int) -> None:
        logger.warning(f"Rejected body of at least {size} bytes on {scope.get('path')}")
        response = error_response(PayloadTooLargeError.status_code, PayloadTooLargeError.message)
        await response(scope, receive, send)
