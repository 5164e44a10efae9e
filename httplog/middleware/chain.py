"""Complete request logging chain: request id, logging, recovery."""

import structlog
from starlette.types import ASGIApp, Receive, Scope, Send

from httplog.config import Options
from httplog.middleware.logging import RequestLoggingMiddleware
from httplog.middleware.recoverer import RecovererMiddleware
from httplog.middleware.request_id import RequestIDMiddleware


class RequestLogger:
    """ASGI middleware logging every request with a correlation id.

    Equivalent to ``RequestIDMiddleware(RequestLoggingMiddleware(RecovererMiddleware(app)))``.

    Usage:
        app.add_middleware(RequestLogger, logger=new_logger("orders"), options=Options(concise=True))
    """

    def __init__(
        self,
        app: ASGIApp,
        logger: structlog.stdlib.BoundLogger | None = None,
        options: Options | None = None,
    ):
        self.app = RequestIDMiddleware(
            RequestLoggingMiddleware(RecovererMiddleware(app), logger=logger, options=options)
        )

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        await self.app(scope, receive, send)
