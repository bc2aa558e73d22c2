"""Route map builder — compile a route tree into lookup indices.

The builder walks the configuration tree once and produces three
indices over the same records:

- ``path_list``: paths in match-priority order (declaration order, with
  every ``*`` catch-all moved to the end)
- ``path_map``: path -> record
- ``name_map``: name -> record

Indices are append-only. Passing existing indices back in extends them,
which is how routes are added after the router was created.
"""

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from wayfinder._internal.diagnostics import warn
from wayfinder.errors import ConfigurationError
from wayfinder.routing.path import clean_path
from wayfinder.routing.pattern import CompiledPattern, PatternOptions, compile_pattern
from wayfinder.routing.route import RouteConfig, RouteRecord

_TRAILING_SLASH = re.compile(r"/$")
_DEFAULT_CHILD = re.compile(r"^/?$")

CATCH_ALL = "*"


@dataclass(slots=True)
class RouteMap:
    """The compiled indices. Owns every record it references."""

    path_list: list[str] = field(default_factory=list)
    path_map: dict[str, RouteRecord] = field(default_factory=dict)
    name_map: dict[str, RouteRecord] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.path_list)


def build_route_map(
    routes: Iterable[RouteConfig | Mapping[str, Any]],
    path_list: list[str] | None = None,
    path_map: dict[str, RouteRecord] | None = None,
    name_map: dict[str, RouteRecord] | None = None,
    *,
    diagnose: bool = True,
) -> RouteMap:
    """Compile *routes* into a ``RouteMap``.

    Existing indices are extended in place when given.

    Raises ``ConfigurationError`` for a route without a path or with a
    string component. Duplicate names, duplicate param keys and named
    routes with a default child are logged as warnings.
    """
    route_map = RouteMap(
        path_list=path_list if path_list is not None else [],
        path_map=path_map if path_map is not None else {},
        name_map=name_map if name_map is not None else {},
    )

    for route in routes:
        _add_route_record(route_map, RouteConfig.coerce(route), None, None, diagnose)

    # Catch-all routes always match last, keeping their relative order
    wildcards = [path for path in route_map.path_list if path == CATCH_ALL]
    if wildcards:
        route_map.path_list[:] = [path for path in route_map.path_list if path != CATCH_ALL]
        route_map.path_list.extend(wildcards)

    return route_map


def _add_route_record(
    route_map: RouteMap,
    route: RouteConfig,
    parent: RouteRecord | None,
    match_as: str | None,
    diagnose: bool,
) -> None:
    if route.path is None:
        msg = '"path" is required in a route configuration.'
        raise ConfigurationError(msg)
    _check_components(route)

    options = route.path_options
    normalized_path = normalize_path(route.path, parent, options.strict)

    if route.case_sensitive is not None:
        options = PatternOptions(
            sensitive=route.case_sensitive,
            strict=options.strict,
            end=options.end,
            delimiter=options.delimiter,
        )

    if route.props is None:
        props: Mapping[str, Any] = {}
    elif route.components:
        props = route.props
    else:
        props = {"default": route.props}

    record = RouteRecord(
        path=normalized_path,
        pattern=_compile_route_pattern(normalized_path, options, diagnose),
        components=dict(route.components) if route.components else {"default": route.component},
        name=route.name,
        parent=parent,
        redirect=route.redirect,
        match_as=match_as,
        meta=route.meta or {},
        before_enter=route.before_enter,
        props=props,
    )

    if route.children:
        children = [RouteConfig.coerce(child) for child in route.children]

        # Navigating by name to a route with a default child never renders the child
        if (
            route.name
            and route.redirect is None
            and any(child.path is not None and _DEFAULT_CHILD.match(child.path) for child in children)
        ):
            warn(
                diagnose,
                "Named route '%s' has a default child route. When navigating to this "
                "named route ({name: '%s'}), the default child route will not be "
                "rendered. Remove the name from this route and use the name of the "
                "default child route for named links instead.",
                route.name,
                route.name,
            )

        for child in children:
            child_match_as = clean_path(f"{match_as}/{child.path}") if match_as else None
            _add_route_record(route_map, child, record, child_match_as, diagnose)

    if route.alias is not None:
        aliases = [route.alias] if isinstance(route.alias, str) else list(route.alias)
        for alias in aliases:
            alias_route = RouteConfig(path=alias, children=route.children)
            _add_route_record(route_map, alias_route, parent, record.path or "/", diagnose)

    if record.path not in route_map.path_map:
        route_map.path_list.append(record.path)
        route_map.path_map[record.path] = record

    if route.name:
        if route.name not in route_map.name_map:
            route_map.name_map[route.name] = record
        elif match_as is None:
            warn(
                diagnose,
                'Duplicate named routes definition: { name: "%s", path: "%s" }',
                route.name,
                record.path,
            )


def _check_components(route: RouteConfig) -> None:
    values = list(route.components.values()) if route.components else [route.component]
    if any(isinstance(value, str) for value in values):
        msg = (
            f'route config "component" for path: {route.path or route.name} cannot be a '
            "string id. Use an actual component instead."
        )
        raise ConfigurationError(msg)


def _compile_route_pattern(path: str, options: PatternOptions, diagnose: bool) -> CompiledPattern:
    pattern = compile_pattern(path, options)
    seen: set[str] = set()
    for key in pattern.keys:
        if key.name in seen:
            warn(diagnose, 'Duplicate param keys in route with path: "%s"', path)
        seen.add(key.name)
    return pattern


def normalize_path(path: str, parent: RouteRecord | None, strict: bool = False) -> str:
    """Normalize a configured path, joining it onto *parent*'s path.

    A trailing slash is dropped unless *strict*. Absolute paths are kept
    as-is; relative ones nest under the parent.
    """
    if not strict:
        path = _TRAILING_SLASH.sub("", path)
    if path.startswith("/"):
        return path
    if parent is None:
        return path
    return clean_path(f"{parent.path}/{path}")
