"""Request-scoped access to the log entry and correlation id.

The middleware stores the request's ``LogEntry`` in the ASGI scope state
(``request.state`` in Starlette), so handlers, dependencies and inner
middleware of the same request reach the same object by reference.

Usage:
    from httplog import get_logger, set_field

    @app.get("/items/{item_id}")
    async def read_item(item_id: str, request: Request):
        set_field(request, "item_id", item_id)
        get_logger(request).info("item_lookup")

The entry is not synchronized: enrichment calls from concurrently running
sub-tasks of one request must be serialized by the caller.
"""

import contextvars
from collections.abc import Mapping, MutableMapping
from typing import TYPE_CHECKING, Annotated, Any

import structlog
from fastapi import Depends, Request

from httplog.logging import nop_logger

if TYPE_CHECKING:
    from httplog.entry import LogEntry

LOG_ENTRY_KEY = "httplog_entry"

REQUEST_ID_CTX: contextvars.ContextVar[str] = contextvars.ContextVar("httplog_request_id", default="")


def get_request_id() -> str:
    """Return the current request's correlation id, or "" outside a request."""
    return REQUEST_ID_CTX.get()


def _scope_of(conn: Any) -> Mapping[str, Any]:
    return getattr(conn, "scope", conn)


def with_log_entry(scope: MutableMapping[str, Any], entry: "LogEntry") -> None:
    """Attach ``entry`` to the scope state so downstream code can reach it."""
    scope.setdefault("state", {})[LOG_ENTRY_KEY] = entry


def get_log_entry(conn: Any) -> "LogEntry | None":
    """Return the log entry attached to a request or scope, if any."""
    state = _scope_of(conn).get("state")
    if not state:
        return None
    return state.get(LOG_ENTRY_KEY)


def get_logger(conn: Any) -> structlog.stdlib.BoundLogger:
    """Return the request's accumulated logger, or a discarding one."""
    entry = get_log_entry(conn)
    if entry is None:
        return nop_logger()
    return entry.logger


def set_field(conn: Any, key: str, value: Any) -> None:
    """Add one field to the request's final log record (no-op outside a request)."""
    entry = get_log_entry(conn)
    if entry is not None:
        entry.logger = entry.logger.bind(**{key: value})


def set_fields(conn: Any, fields: Mapping[str, Any]) -> None:
    """Add several fields to the request's final log record (no-op outside a request)."""
    entry = get_log_entry(conn)
    if entry is not None:
        entry.logger = entry.logger.bind(**fields)


def request_logger(request: Request) -> structlog.stdlib.BoundLogger:
    """FastAPI dependency returning the request's logger."""
    return get_logger(request)


# Type alias for logger dependency injection
RequestLoggerDep = Annotated[structlog.stdlib.BoundLogger, Depends(request_logger)]
