"""Middleware package for request logging."""

from .chain import RequestLogger
from .logging import RequestLoggingMiddleware, ResponseTracker
from .recoverer import RecovererMiddleware
from .request_id import REQUEST_ID_HEADER, RequestIDMiddleware

__all__ = [
    "RequestLogger",
    "RequestLoggingMiddleware",
    "ResponseTracker",
    "RecovererMiddleware",
    "RequestIDMiddleware",
    "REQUEST_ID_HEADER",
]
