"""Demo application wired with the request logger."""

from httplog.demo.app import create_app

__all__ = ["create_app"]
