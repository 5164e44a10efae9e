"""Raw ASGI tests for the middleware layers."""

import pytest

from httplog.config import Options
from httplog.context import get_request_id
from httplog.middleware import (
    RecovererMiddleware,
    RequestIDMiddleware,
    RequestLoggingMiddleware,
    ResponseTracker,
)
from httplog.tee import LimitBuffer


def http_scope(path="/"):
    return {
        "type": "http",
        "method": "GET",
        "scheme": "http",
        "http_version": "1.1",
        "path": path,
        "raw_path": path.encode(),
        "query_string": b"",
        "headers": [(b"host", b"testserver")],
        "client": ("127.0.0.1", 1234),
        "server": ("testserver", 80),
    }


async def receive():
    return {"type": "http.request", "body": b"", "more_body": False}


class Sent:
    def __init__(self):
        self.messages = []

    async def __call__(self, message):
        self.messages.append(message)

    @property
    def body(self):
        return b"".join(m.get("body", b"") for m in self.messages if m["type"] == "http.response.body")


async def streaming_app(scope, receive, send):
    await send({"type": "http.response.start", "status": 500, "headers": [(b"content-type", b"text/plain")]})
    await send({"type": "http.response.body", "body": b"a" * 300, "more_body": True})
    await send({"type": "http.response.body", "body": b"b" * 300, "more_body": True})
    await send({"type": "http.response.body", "body": b"", "more_body": False})


async def failing_app(scope, receive, send):
    raise RuntimeError("exploded")


async def late_failing_app(scope, receive, send):
    await send({"type": "http.response.start", "status": 200, "headers": []})
    await send({"type": "http.response.body", "body": b"partial", "more_body": True})
    raise RuntimeError("mid-stream")


class TestResponseTracker:
    """Tests for status and byte tracking on send."""

    @pytest.mark.asyncio
    async def test_tracks_and_forwards(self):
        sent = Sent()
        tee = LimitBuffer(4)
        tracker = ResponseTracker(sent, tee)

        await tracker.send({"type": "http.response.start", "status": 201, "headers": [(b"x-a", b"1")]})
        await tracker.send({"type": "http.response.body", "body": b"hello", "more_body": True})
        await tracker.send({"type": "http.response.body", "body": b" world"})

        assert tracker.status == 201
        assert tracker.bytes_written == 11
        assert tracker.headers["x-a"] == "1"
        assert sent.body == b"hello world"
        assert tee.read() == b"hell"


class TestRequestLoggingMiddleware:
    """Tests for the interceptor without the rest of the chain."""

    @pytest.mark.asyncio
    async def test_streamed_body_bounded(self, base_logger, log_capture):
        app = RequestLoggingMiddleware(streaming_app, logger=base_logger, options=Options(concise=True))
        sent = Sent()
        await app(http_scope(), receive, sent)

        assert sent.body == b"a" * 300 + b"b" * 300
        request_line, record = log_capture.entries
        assert request_line["event"] == "Request: GET /"
        assert record["http_response"]["bytes"] == 600
        assert record["http_response"]["body"] == "a" * 300 + "b" * 212

    @pytest.mark.asyncio
    async def test_exception_still_logs_once(self, base_logger, log_capture):
        """Without a recoverer the exception propagates after the record is written."""
        app = RequestLoggingMiddleware(failing_app, logger=base_logger, options=Options())
        with pytest.raises(RuntimeError):
            await app(http_scope(), receive, Sent())

        [record] = log_capture.entries
        assert record["event"] == "Response: 0 Unknown"
        assert record["log_level"] == "warning"

    @pytest.mark.asyncio
    async def test_non_http_passthrough(self, base_logger, log_capture):
        called = []

        async def lifespan_app(scope, receive, send):
            called.append(scope["type"])

        app = RequestLoggingMiddleware(lifespan_app, logger=base_logger, options=Options())
        await app({"type": "lifespan"}, receive, Sent())

        assert called == ["lifespan"]
        assert log_capture.entries == []


class TestRecovererMiddleware:
    """Tests for exception recovery inside the logger."""

    @pytest.mark.asyncio
    async def test_recovers_with_500(self, base_logger, log_capture):
        app = RequestLoggingMiddleware(
            RecovererMiddleware(failing_app), logger=base_logger, options=Options(json_format=True)
        )
        sent = Sent()
        await app(http_scope(), receive, sent)

        assert sent.messages[0]["status"] == 500
        [record] = log_capture.entries
        assert record["event"] == "Response: 500 Server Error - exploded"
        assert "RuntimeError: exploded" in record["stacktrace"]

    @pytest.mark.asyncio
    async def test_reraises_after_response_started(self, base_logger, log_capture):
        app = RequestLoggingMiddleware(
            RecovererMiddleware(late_failing_app), logger=base_logger, options=Options(json_format=True)
        )
        with pytest.raises(RuntimeError):
            await app(http_scope(), receive, Sent())

        [record] = log_capture.entries
        assert record["event"] == "Response: 200 OK - mid-stream"
        assert record["http_response"]["bytes"] == 7

    @pytest.mark.asyncio
    async def test_without_entry_still_recovers(self, capsys):
        sent = Sent()
        await RecovererMiddleware(failing_app)(http_scope(), receive, sent)

        assert sent.messages[0]["status"] == 500
        assert "exploded" in capsys.readouterr().err


class TestRequestIDMiddleware:
    """Tests for correlation id scoping."""

    @pytest.mark.asyncio
    async def test_id_scoped_to_request(self):
        seen = []

        async def app(scope, receive, send):
            seen.append(get_request_id())
            await send({"type": "http.response.start", "status": 204})
            await send({"type": "http.response.body", "body": b""})

        sent = Sent()
        await RequestIDMiddleware(app)(http_scope(), receive, sent)

        assert len(seen[0]) == 32
        assert (b"x-request-id", seen[0].encode()) in sent.messages[0]["headers"]
        assert get_request_id() == ""

    @pytest.mark.asyncio
    async def test_blank_header_replaced(self):
        seen = []

        async def app(scope, receive, send):
            seen.append(get_request_id())

        scope = http_scope()
        scope["headers"].append((b"x-request-id", b"   "))
        await RequestIDMiddleware(app)(scope, receive, Sent())
        assert seen[0].strip()
