"""Status code to log level and label mapping."""

import logging


def status_level(status: int) -> int:
    """Map an HTTP status to a stdlib log level.

    Unset or invalid statuses (<= 0) and client errors log at WARNING,
    server errors at ERROR, everything else at INFO.
    """
    if status <= 0:
        return logging.WARNING
    if status < 400:
        return logging.INFO
    if status < 500:
        return logging.WARNING
    return logging.ERROR


def status_label(status: int) -> str:
    if 100 <= status < 300:
        return "OK"
    if 300 <= status < 400:
        return "Redirect"
    if 400 <= status < 500:
        return "Client Error"
    if status >= 500:
        return "Server Error"
    return "Unknown"
