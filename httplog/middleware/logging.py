"""Request logging middleware with response capture and redaction.

Implemented as pure ASGI middleware (not BaseHTTPMiddleware) so the
response stream can be observed as it is sent instead of buffered.
"""

import time

import structlog
from starlette.datastructures import Headers
from starlette.requests import HTTPConnection
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from httplog.config import Options, get_options
from httplog.context import with_log_entry
from httplog.entry import RequestLogFormatter
from httplog.tee import LimitBuffer


class ResponseTracker:
    """Wraps ASGI ``send`` to record status, headers and bytes written.

    Every body chunk is also offered to ``tee``; a full tee never affects
    what is sent to the client.
    """

    def __init__(self, send: Send, tee: LimitBuffer | None = None):
        self._send = send
        self.tee = tee
        self.status = 0
        self.bytes_written = 0
        self.headers = Headers(raw=[])
        self.started = False

    async def send(self, message: Message) -> None:
        if message["type"] == "http.response.start":
            self.started = True
            self.status = message["status"]
            self.headers = Headers(raw=[(bytes(k), bytes(v)) for k, v in message.get("headers", [])])
        elif message["type"] == "http.response.body":
            body = message.get("body", b"")
            self.bytes_written += len(body)
            if self.tee is not None and body:
                self.tee.write(body)
        await self._send(message)


def _drain(tee: LimitBuffer) -> bytes:
    try:
        return tee.read()
    except (ValueError, OSError):
        return b""


class RequestLoggingMiddleware:
    """Log every HTTP request as one structured record.

    - Binds the ``http_request`` field group (method, url, path, remote ip,
      proto, scheme, request id, redacted headers) onto a per-request entry
    - Makes the entry reachable from handlers via ``httplog.context``
    - Emits ``Response: <status> <label>`` with the ``http_response`` group at
      a level derived from the status, exactly once, even if the app raises
    - Captures up to ``body_limit`` response bytes for error responses
    """

    def __init__(
        self,
        app: ASGIApp,
        logger: structlog.stdlib.BoundLogger | None = None,
        options: Options | None = None,
    ):
        self.app = app
        self.options = options or get_options()
        self.formatter = RequestLogFormatter(
            logger if logger is not None else structlog.get_logger("httplog"),
            self.options,
        )

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        entry = self.formatter.new_log_entry(HTTPConnection(scope))
        with_log_entry(scope, entry)

        tee = LimitBuffer(self.options.body_limit)
        tracker = ResponseTracker(send, tee)

        start = time.perf_counter_ns()
        try:
            await self.app(scope, receive, tracker.send)
        finally:
            elapsed = time.perf_counter_ns() - start
            body = _drain(tee) if tracker.status >= 400 else None
            tee.close()
            entry.write(tracker.status, tracker.bytes_written, tracker.headers, elapsed, body)
