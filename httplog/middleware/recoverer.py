"""Middleware that turns uncaught exceptions into 500 responses.

Sits inside ``RequestLoggingMiddleware``: the exception is recorded on the
request's log entry before the logger's completion step runs, so the final
record carries ``panic`` and ``stacktrace`` fields.
"""

import traceback

from starlette.responses import PlainTextResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from httplog.context import get_log_entry
from httplog.entry import print_pretty_stack


class RecovererMiddleware:
    """Recover from uncaught exceptions raised by the wrapped app.

    - Records the exception and its stack on the request's log entry
    - Sends a plain 500 response when nothing has been sent yet
    - Re-raises when the response already started, since no valid 500 can follow
    """

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        started = False

        async def send_wrapper(message: Message) -> None:
            nonlocal started
            if message["type"] == "http.response.start":
                started = True
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        except Exception as exc:
            stack = traceback.format_exc()
            entry = get_log_entry(scope)
            if entry is not None:
                entry.capture_panic(exc, stack)
            else:
                print_pretty_stack(exc, stack)

            if started:
                # Headers are already on the wire; let the server drop the connection
                raise
            response = PlainTextResponse("Internal Server Error", status_code=500)
            await response(scope, receive, send)
