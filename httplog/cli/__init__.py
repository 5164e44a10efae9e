"""CLI package for the httplog demo server."""

from httplog.cli.main import cli

__all__ = ["cli"]
