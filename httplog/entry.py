"""Request-scoped log entry.

A ``LogEntry`` is created for every request by ``RequestLogFormatter``. It
carries a structlog logger already bound with the ``http_request`` field
group; downstream code enriches it through ``httplog.context`` and the
middleware calls ``write`` exactly once when the request completes.
"""

from typing import Any

import structlog
from rich.console import Console
from rich.traceback import Traceback
from starlette.requests import HTTPConnection

from httplog.config import Options
from httplog.fields import request_log_fields, response_log_fields
from httplog.headers import HeaderInput
from httplog.status import status_label, status_level

# Stack placeholder logged when the pretty stack goes to the console instead
STACK_PLACEHOLDER = "#"

_console = Console(stderr=True)


def _render_panic(value: Any) -> str:
    text = str(value)
    if not text and isinstance(value, BaseException):
        return type(value).__name__
    return text


def print_pretty_stack(value: Any, stack: str = "") -> None:
    """Write a human-readable stack for ``value`` to stderr."""
    if isinstance(value, BaseException) and value.__traceback__ is not None:
        _console.print(Traceback.from_exception(type(value), value, value.__traceback__))
    else:
        _console.print(f"[bold red]panic:[/bold red] {_render_panic(value)}")
        if stack:
            _console.print(stack, markup=False, highlight=False)


class LogEntry:
    """Mutable log state for one request.

    Attributes:
        logger: Accumulated structlog logger for the request's final record
        message: Pending suffix for the response message, set by panic capture
        options: Logger options baked in at creation
    """

    def __init__(self, logger: structlog.stdlib.BoundLogger, options: Options):
        self.logger = logger
        self.message = ""
        self.options = options

    def write(
        self,
        status: int,
        bytes_written: int,
        header: HeaderInput | None,
        elapsed_ns: int,
        body: bytes | None = None,
    ) -> None:
        """Emit the single response record for the request."""
        msg = f"Response: {status} {status_label(status)}"
        if self.message:
            msg = f"{msg} - {self.message}"

        response_header = None
        response_body = None
        if self.options.concise:
            # Error bodies are logged so the message sent back to the client can be inspected
            if status >= 400:
                response_body = (body or b"").decode("utf-8", errors="replace")
            response_header = header

        fields = response_log_fields(
            status,
            bytes_written,
            elapsed_ns,
            header=response_header,
            body=response_body,
            skip_headers=self.options.skip_headers,
        )
        self.logger.log(status_level(status), msg, **fields)

    def capture_panic(self, value: Any, stack: str) -> None:
        """Record an uncaught exception on the entry.

        Binds ``stacktrace`` and ``panic`` onto the logger and sets the
        pending message. Outside JSON mode the raw stack is replaced by a
        placeholder and a pretty stack is printed to stderr. This does not
        stop the exception; the recovery layer does.
        """
        stacktrace = stack if self.options.json_format else STACK_PLACEHOLDER
        panic = _render_panic(value)

        self.logger = self.logger.bind(stacktrace=stacktrace, panic=panic)
        self.message = panic

        if not self.options.json_format:
            print_pretty_stack(value, stack)


class RequestLogFormatter:
    """Creates the per-request ``LogEntry`` from a base logger."""

    def __init__(self, logger: structlog.stdlib.BoundLogger, options: Options):
        self.logger = logger
        self.options = options

    def new_log_entry(self, conn: HTTPConnection) -> LogEntry:
        entry = LogEntry(
            self.logger.bind(**request_log_fields(conn, self.options.skip_headers)),
            self.options,
        )
        if self.options.concise:
            entry.logger.info(f"Request: {conn.scope.get('method', '')} {conn.url.path}")
        return entry
