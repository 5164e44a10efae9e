"""Middleware that assigns and propagates a request identifier.

The identifier is read from the incoming ``X-Request-Id`` header when the
client provides one, or generated server-side otherwise. It is stored in a
context variable for the duration of the request so the request logger
(and any other code) can read it without passing it explicitly, and echoed
back on the response.
"""

import uuid

from starlette.datastructures import Headers, MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from httplog.context import REQUEST_ID_CTX

REQUEST_ID_HEADER = "X-Request-Id"


class RequestIDMiddleware:
    """ASGI middleware that sets and returns a per-request identifier."""

    def __init__(self, app: ASGIApp, header_name: str = REQUEST_ID_HEADER):
        self.app = app
        self.header_name = header_name

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = Headers(scope=scope).get(self.header_name, "").strip()
        if not request_id:
            request_id = uuid.uuid4().hex

        async def send_wrapper(message: Message) -> None:
            if message["type"] == "http.response.start":
                message.setdefault("headers", [])
                headers = MutableHeaders(scope=message)
                headers.setdefault(self.header_name, request_id)
            await send(message)

        token = REQUEST_ID_CTX.set(request_id)
        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            REQUEST_ID_CTX.reset(token)
