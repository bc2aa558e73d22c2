"""Route construction and comparison helpers."""

import copy
from collections.abc import Callable, Mapping
from typing import Any

from wayfinder.routing.query import stringify_query
from wayfinder.routing.route import Location, Route, RouteRecord

Stringify = Callable[[Mapping[str, Any]], str]


def get_full_path(location: Location | Route, stringify: Stringify | None = None) -> str:
    """Join path, serialized query and hash: ``/a?x=1#top``."""
    stringify = stringify or stringify_query
    return (location.path or "/") + stringify(location.query or {}) + (location.hash or "")


def format_match(record: RouteRecord | None) -> tuple[RouteRecord, ...]:
    if record is None:
        return ()
    return tuple(record.lineage())


def create_route(
    record: RouteRecord | None,
    location: Location,
    redirected_from: Location | None = None,
    stringify: Stringify | None = None,
) -> Route:
    """Snapshot *location* (matched against *record*) as a ``Route``.

    The query is deep-copied so later changes to the location's dict do
    not leak into the route.
    """
    query = copy.deepcopy(dict(location.query or {}))
    return Route(
        path=location.path or "/",
        full_path=get_full_path(location, stringify),
        name=location.name or (record.name if record else None),
        params=dict(location.params or {}),
        query=query,
        hash=location.hash or "",
        meta=record.meta if record else {},
        matched=format_match(record),
        redirected_from=redirected_from,
        redirected_from_path=get_full_path(redirected_from, stringify) if redirected_from else None,
    )


# The route every router starts on before its first navigation
START = create_route(None, Location(path="/"))


def _values_equal(a: Any, b: Any) -> bool:
    if isinstance(a, Mapping) and isinstance(b, Mapping):
        return _mapping_equal(a, b)
    if isinstance(a, (list, tuple)) and isinstance(b, (list, tuple)):
        return len(a) == len(b) and all(_values_equal(x, y) for x, y in zip(a, b, strict=True))
    return str(a) == str(b)


def _mapping_equal(a: Mapping[str, Any] | None, b: Mapping[str, Any] | None) -> bool:
    a = a or {}
    b = b or {}
    if set(a) != set(b):
        return False
    return all(_values_equal(a[key], b[key]) for key in a)


def is_same_route(a: Route, b: Route | None) -> bool:
    """Whether *a* and *b* describe the same destination.

    Path routes compare path (ignoring a trailing slash), hash and query;
    named routes compare name, hash, query and params.
    """
    if b is START:
        return a is b
    if b is None:
        return False
    if a.path and b.path:
        return (
            a.path.removesuffix("/") == b.path.removesuffix("/")
            and a.hash == b.hash
            and _mapping_equal(a.query, b.query)
        )
    if a.name and b.name:
        return (
            a.name == b.name
            and a.hash == b.hash
            and _mapping_equal(a.query, b.query)
            and _mapping_equal(a.params, b.params)
        )
    return False


def is_included_route(current: Route, target: Route) -> bool:
    """Whether *current* is *target* or nested below it (for active links)."""
    current_path = current.path.removesuffix("/") + "/"
    target_path = target.path.removesuffix("/") + "/"
    return (
        current_path.startswith(target_path)
        and (not target.hash or current.hash == target.hash)
        and all(key in current.query for key in target.query)
    )
