"""Structured HTTP request logging for ASGI applications.

Wraps an application so every request produces one leveled structlog
record describing the request and its response, with sensitive headers
redacted and error bodies captured.

Usage:
    from fastapi import FastAPI
    from httplog import Options, RequestLogger, new_logger

    options = Options(concise=True, json_format=True)
    app = FastAPI()
    app.add_middleware(RequestLogger, logger=new_logger("orders", options), options=options)
"""

__version__ = "0.1.0"

from httplog.config import Options, get_options
from httplog.context import (
    RequestLoggerDep,
    get_log_entry,
    get_logger,
    get_request_id,
    set_field,
    set_fields,
)
from httplog.entry import LogEntry
from httplog.logging import configure_logging, new_logger, nop_logger
from httplog.middleware import (
    RecovererMiddleware,
    RequestIDMiddleware,
    RequestLogger,
    RequestLoggingMiddleware,
)

__all__ = [
    "__version__",
    "Options",
    "get_options",
    "configure_logging",
    "new_logger",
    "nop_logger",
    "LogEntry",
    "RequestLogger",
    "RequestLoggingMiddleware",
    "RequestIDMiddleware",
    "RecovererMiddleware",
    "RequestLoggerDep",
    "get_log_entry",
    "get_logger",
    "get_request_id",
    "set_field",
    "set_fields",
]
