"""Path parameter substitution.

Fills concrete values into a route template like ``/users/:id``.
Compiled fillers are cached per template text; the set of templates is
fixed by the route configuration, so the cache is never evicted.
"""

from typing import Any

from wayfinder._internal.diagnostics import warn
from wayfinder.errors import ParamError
from wayfinder.routing.pattern import CATCH_ALL_PARAM, PathFiller, compile_filler

# template text -> compiled filler
_FILLER_CACHE: dict[str, PathFiller] = {}


def get_filler(path: str) -> PathFiller:
    """Return the cached filler for *path*, compiling it on first use."""
    filler = _FILLER_CACHE.get(path)
    if filler is None:
        filler = _FILLER_CACHE[path] = compile_filler(path)
    return filler


def try_fill_params(
    path: str,
    params: dict[str, Any] | None,
    route_msg: str,
    *,
    diagnose: bool = True,
) -> str | None:
    """Like ``fill_params()`` but return ``None`` when substitution fails.

    Lets callers tell a failed fill apart from a template that
    legitimately fills to ``""`` (the root route).
    """
    values = dict(params or {})
    if isinstance(values.get(CATCH_ALL_PARAM), str):
        values["0"] = values[CATCH_ALL_PARAM]
    try:
        return get_filler(path)(values, pretty=True)
    except ParamError as exc:
        warn(diagnose, "missing param for %s: %s", route_msg, exc)
        return None


def fill_params(
    path: str,
    params: dict[str, Any] | None,
    route_msg: str,
    *,
    diagnose: bool = True,
) -> str:
    """Substitute *params* into the template *path*.

    Returns ``""`` (and reports a diagnostic mentioning *route_msg*) when
    a required param is missing or does not fit its segment, so callers
    must treat an empty result as a failed substitution.

    Examples::

        fill_params("/users/:id", {"id": 42}, "user")   -> "/users/42"
        fill_params("/users/:id", {}, "user")           -> ""
    """
    filled = try_fill_params(path, params, route_msg, diagnose=diagnose)
    return "" if filled is None else filled
