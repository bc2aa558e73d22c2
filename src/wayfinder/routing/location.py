"""Location normalization — turn a raw navigation target into a Location.

Accepted targets:

1. a path string, possibly relative, with query and hash: ``"../edit?x=1#top"``
2. a named target: ``{"name": "user", "params": {"id": "1"}}`` (passed through;
   the matcher resolves names)
3. relative params: ``{"params": {"id": "2"}}`` — the current route with
   some params swapped
4. a partial path object: ``{"path": "edit", "query": {...}, "hash": "top"}``
"""

from collections.abc import Callable, Mapping
from dataclasses import replace
from typing import Any

from wayfinder._internal.diagnostics import warn
from wayfinder._internal.types import Query
from wayfinder.routing.params import fill_params
from wayfinder.routing.path import parse_path, resolve_path
from wayfinder.routing.query import resolve_query
from wayfinder.routing.route import Location, Route

RawLocation = str | Location | Mapping[str, Any]


def normalize_location(
    raw: RawLocation,
    current: Route | None = None,
    append: bool = False,
    *,
    parse_query: Callable[[str], Query] | None = None,
    diagnose: bool = True,
) -> Location:
    """Resolve *raw* against *current* into a normalized ``Location``.

    Named and already-normalized locations are returned unchanged.
    """
    next_ = Location.from_raw(raw)

    if next_.name or next_.normalized:
        return next_

    # Relative params: keep the current route, swap some params
    if not next_.path and next_.params is not None and current is not None:
        params = {**current.params, **next_.params}
        if current.name:
            return replace(next_, name=current.name, params=params, normalized=True)
        if current.matched:
            raw_path = current.matched[-1].path
            path = fill_params(raw_path, params, f"path {current.path}", diagnose=diagnose)
            return replace(next_, path=path, params=params, normalized=True)
        warn(diagnose, "relative params navigation requires a current route.")
        return replace(next_, normalized=True)

    parsed = parse_path(next_.path or "")
    base_path = (current.path if current else None) or "/"
    if parsed.path:
        path = resolve_path(parsed.path, base_path, append or next_.append)
    else:
        path = base_path

    query = resolve_query(parsed.query, next_.query, parse_query, diagnose=diagnose)

    hash_ = next_.hash or parsed.hash
    if hash_ and not hash_.startswith("#"):
        hash_ = f"#{hash_}"

    return Location(path=path, query=query, hash=hash_, normalized=True)
