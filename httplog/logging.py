"""Structured logging configuration using structlog.

This module configures the sink that request log records end up in:
- JSON output when ``json_format`` is on (filterable, parseable)
- Colored console output otherwise (human-readable)
- A discarding logger for code running outside a request

Usage:
    from httplog import Options, new_logger

    # Configure once at app startup and get a service logger
    log = new_logger("orders", Options(json_format=True))

    log.info("worker_started", queue="default")
"""

import logging
import sys
from typing import Any

import structlog

from httplog.config import Options


def configure_logging(options: Options | None = None) -> None:
    """Configure structlog for the application.

    Args:
        options: Logger options; ``json_format`` picks the renderer and
            ``log_level`` the minimum level of the stdlib sink.
    """
    options = options or Options()

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt=options.time_format),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.EventRenamer("message"),
    ]
    if options.json_format:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True, event_key="message"))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    level = logging.getLevelName(options.log_level.upper())
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=level,
    )
    logging.getLogger().setLevel(level)


def new_logger(service_name: str, options: Options | None = None) -> structlog.stdlib.BoundLogger:
    """Configure logging and return a logger for a service.

    Args:
        service_name: Name bound as ``service`` (lower-cased)
        options: Logger options; ``tags`` are bound on the returned logger

    Returns:
        Bound logger to pass to the request logging middleware
    """
    options = options or Options()
    configure_logging(options)
    return structlog.get_logger("httplog").bind(service=service_name.lower(), **options.tags)


def _discard(logger: Any, method_name: str, event_dict: dict) -> dict:
    raise structlog.DropEvent


def nop_logger() -> structlog.stdlib.BoundLogger:
    """Return a logger that discards everything.

    Binding on it returns more discarding loggers, so callers never need a
    None check.
    """
    return structlog.wrap_logger(
        structlog.ReturnLogger(),
        processors=[_discard],
        wrapper_class=structlog.stdlib.BoundLogger,
    )
