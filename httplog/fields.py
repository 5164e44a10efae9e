"""Structured field groups for request and response log records."""

from collections.abc import Iterable
from typing import Any

from starlette.datastructures import Headers
from starlette.requests import HTTPConnection

from httplog.headers import HeaderInput, header_log_field
from httplog.context import get_request_id


def request_scheme(conn: HTTPConnection) -> str:
    """Return "https" when the connection is TLS-terminated, else "http"."""
    scope = conn.scope
    if scope.get("scheme") in ("https", "wss") or "tls" in scope.get("extensions", {}):
        return "https"
    return "http"


def request_target(conn: HTTPConnection) -> str:
    """Rebuild the raw request target (path plus query) as sent by the client."""
    scope = conn.scope
    raw_path = scope.get("raw_path")
    target = raw_path.decode("latin-1") if raw_path else scope.get("root_path", "") + scope["path"]
    query = scope.get("query_string", b"")
    if query:
        target = f"{target}?{query.decode('latin-1')}"
    return target


def _host(conn: HTTPConnection) -> str:
    host = conn.headers.get("host")
    if host:
        return host
    server = conn.scope.get("server")
    if server:
        host, port = server
        return host if port is None else f"{host}:{port}"
    return ""


def _proto(conn: HTTPConnection) -> str:
    version = str(conn.scope.get("http_version", "1.1"))
    if "." not in version:
        version = f"{version}.0"
    return f"HTTP/{version}"


def _remote_addr(conn: HTTPConnection) -> str:
    client = conn.client
    if client is None:
        return ""
    return f"{client.host}:{client.port}"


def request_log_fields(conn: HTTPConnection, skip_headers: Iterable[str] = ()) -> dict[str, Any]:
    """Build the ``http_request`` field group for a request.

    Args:
        conn: Incoming request (or any Starlette HTTP connection)
        skip_headers: Extra header names to redact

    Returns:
        ``{"http_request": {...}}`` ready to bind onto a logger
    """
    scheme = request_scheme(conn)

    fields: dict[str, Any] = {
        "request_url": f"{scheme}://{_host(conn)}{request_target(conn)}",
        "request_method": conn.scope.get("method", ""),
        "request_path": conn.url.path,
        "remote_ip": _remote_addr(conn),
        "proto": _proto(conn),
    }
    request_id = get_request_id()
    if request_id:
        fields["request_id"] = request_id

    fields["scheme"] = scheme

    # Host is already part of request_url
    header = Headers(raw=[(k, v) for k, v in conn.headers.raw if k.lower() != b"host"])
    if header.raw:
        fields["header"] = header_log_field(header, skip_headers)

    return {"http_request": fields}


def response_log_fields(
    status: int,
    bytes_written: int,
    elapsed_ns: int,
    header: HeaderInput | None = None,
    body: str | None = None,
    skip_headers: Iterable[str] = (),
) -> dict[str, Any]:
    """Build the ``http_response`` field group.

    Args:
        status: Response status code (0 if never sent)
        bytes_written: Total body bytes sent
        elapsed_ns: Time between dispatch and completion in nanoseconds
        header: Response headers, included when non-empty
        body: Captured body, included when not None
        skip_headers: Extra header names to redact

    Returns:
        ``{"http_response": {...}}`` ready to pass as log record fields
    """
    fields: dict[str, Any] = {
        "status": status,
        "bytes": bytes_written,
        "elapsed": elapsed_ns / 1_000_000,  # milliseconds
    }
    if body is not None:
        fields["body"] = body
    if header:
        fields["header"] = header_log_field(header, skip_headers)
    return {"http_response": fields}
