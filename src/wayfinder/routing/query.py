"""Query string parsing and serialization.

Parsed queries are plain dicts mapping a key to a string, to ``None``
for a bare key (``?flag``), or to a list when the key repeats::

    parse_query("a=1&a=2&flag")  -> {"a": ["1", "2"], "flag": None}

``stringify_query`` is the inverse. Values are percent-encoded per
RFC 3986, additionally escaping ``! ' ( ) *`` while keeping commas
literal. ``UNDEFINED`` marks a key (or list item) to leave out entirely.
"""

import re
from collections.abc import Callable, Mapping
from typing import Any
from urllib.parse import quote, unquote

from wayfinder._internal.diagnostics import warn
from wayfinder._internal.types import Query

_RESERVED = re.compile(r"[!'()*]")
_ENCODED_COMMA = re.compile(r"%2C")
_LEADING = re.compile(r"^[?#&]")
_BAD_ESCAPE = re.compile(r"%(?![0-9a-fA-F]{2})")


class _Undefined:
    """Sentinel for a query value that must not be serialized."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False


UNDEFINED: Any = _Undefined()


def encode(value: str) -> str:
    """Percent-encode a query key or value."""
    encoded = quote(value, safe="-_.~!'()*")
    encoded = _RESERVED.sub(lambda m: f"%{ord(m.group()):x}", encoded)
    return _ENCODED_COMMA.sub(",", encoded)


def decode(value: str) -> str:
    """Percent-decode *value*.

    Raises ``ValueError`` on a malformed escape or invalid UTF-8 so that
    callers can decide whether to recover.
    """
    if _BAD_ESCAPE.search(value):
        msg = f"Malformed percent-escape in {value!r}"
        raise ValueError(msg)
    return unquote(value, errors="strict")


def parse_query(query: str) -> Query:
    """Parse a query string (with or without a leading ``?``) into a dict."""
    result: Query = {}

    query = _LEADING.sub("", query.strip())
    if not query:
        return result

    for param in query.split("&"):
        parts = param.replace("+", " ").split("=")
        key = decode(parts[0])
        value = decode("=".join(parts[1:])) if len(parts) > 1 else None

        if key not in result:
            result[key] = value
        elif isinstance(result[key], list):
            result[key].append(value)  # type: ignore[union-attr]
        else:
            result[key] = [result[key], value]  # type: ignore[list-item]

    return result


def resolve_query(
    query: str | None,
    extra_query: Mapping[str, Any] | None = None,
    parse: Callable[[str], Query] | None = None,
    *,
    diagnose: bool = True,
) -> Query:
    """Parse *query* and overlay *extra_query* on top (extra wins per key).

    A parser failure is reported and treated as an empty query.
    """
    parser = parse or parse_query
    try:
        parsed = dict(parser(query or ""))
    except Exception as exc:
        warn(diagnose, "Could not parse query %r: %s", query, exc)
        parsed = {}
    if extra_query:
        parsed.update(extra_query)
    return parsed


def _to_str(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def stringify_query(obj: Mapping[str, Any] | None) -> str:
    """Serialize a query dict to ``?key=value&...`` (``""`` when empty)."""
    if not obj:
        return ""

    pairs: list[str] = []
    for key, value in obj.items():
        if value is UNDEFINED:
            continue

        if value is None:
            pairs.append(encode(_to_str(key)))
            continue

        if isinstance(value, (list, tuple)):
            for item in value:
                if item is UNDEFINED:
                    continue
                if item is None:
                    pairs.append(encode(_to_str(key)))
                else:
                    pairs.append(f"{encode(_to_str(key))}={encode(_to_str(item))}")
            continue

        pairs.append(f"{encode(_to_str(key))}={encode(_to_str(value))}")

    result = "&".join(pair for pair in pairs if pair)
    return f"?{result}" if result else ""
