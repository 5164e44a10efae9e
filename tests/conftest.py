"""Shared pytest fixtures for httplog tests."""

import pytest
import structlog
from fastapi import FastAPI
from fastapi.testclient import TestClient
from structlog.testing import LogCapture

from httplog.config import Options, get_options
from httplog.logging import configure_logging


@pytest.fixture(autouse=True)
def setup_test_logging(monkeypatch):
    """Configure structlog for test output with a clean environment."""
    for name in ("CONCISE", "JSON_FORMAT", "SKIP_HEADERS", "LOG_LEVEL", "TAGS", "BODY_LIMIT"):
        monkeypatch.delenv(f"HTTPLOG_{name}", raising=False)
    get_options.cache_clear()
    configure_logging(Options())
    yield
    get_options.cache_clear()


@pytest.fixture
def log_capture():
    """Processor that records every event instead of rendering it."""
    return LogCapture()


@pytest.fixture
def base_logger(log_capture):
    """Logger whose records end up in ``log_capture.entries``."""
    return structlog.stdlib.BoundLogger(structlog.ReturnLogger(), [log_capture], {})


@pytest.fixture
def make_client(base_logger):
    """Build a TestClient for an app wrapped with the full request logger chain.

    Usage:
        client = make_client(app, Options(concise=True))
    """
    from httplog.middleware import RequestLogger

    def _make(app: FastAPI, options: Options | None = None, **kwargs) -> TestClient:
        app.add_middleware(RequestLogger, logger=base_logger, options=options or Options())
        return TestClient(app, **kwargs)

    return _make

