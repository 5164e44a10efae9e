"""Header flattening with sensitive value redaction."""

from collections.abc import Iterable, Mapping, Sequence

from starlette.datastructures import Headers

REDACTED = "***"

# Redacted regardless of configuration
ALWAYS_REDACTED = frozenset({"authorization", "cookie", "set-cookie"})

HeaderInput = Headers | Mapping[str, str | Sequence[str]]


def _multimap(headers: HeaderInput) -> dict[str, list[str]]:
    """Group header values by lower-cased name, preserving value order."""
    if isinstance(headers, Headers):
        items: Iterable[tuple[str, str | Sequence[str]]] = [
            (key.decode("latin-1"), value.decode("latin-1")) for key, value in headers.raw
        ]
    else:
        items = headers.items()

    grouped: dict[str, list[str]] = {}
    for name, value in items:
        values = grouped.setdefault(name.lower(), [])
        if isinstance(value, str):
            values.append(value)
        else:
            values.extend(value)
    return grouped


def header_log_field(headers: HeaderInput, skip_headers: Iterable[str] = ()) -> dict[str, str]:
    """Flatten a header multimap into a loggable mapping.

    Multiple values are joined as ``[a], [b]``. Names without values are
    dropped. ``authorization``, ``cookie`` and ``set-cookie`` are always
    replaced with the redaction marker, as is any name in ``skip_headers``
    (compared case-insensitively).

    Args:
        headers: Starlette headers or a mapping of name to value(s)
        skip_headers: Extra header names to redact

    Returns:
        Mapping of lower-cased header name to display string
    """
    skip = {name.lower() for name in skip_headers}

    field: dict[str, str] = {}
    for name, values in _multimap(headers).items():
        if not values:
            continue
        if name in ALWAYS_REDACTED or name in skip:
            field[name] = REDACTED
        elif len(values) == 1:
            field[name] = values[0]
        else:
            field[name] = "[{}]".format("], [".join(values))
    return field
