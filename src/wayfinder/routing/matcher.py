"""Matcher — resolve navigation targets against the compiled route map.

Resolution is a pure function of the target, the optional current
route and the route map. Redirect and alias records re-enter
``match`` with a rewritten target; the number of re-entries per
navigation is capped by ``RouterConfig.max_redirects``.

Nothing here raises for a bad target. An unknown name, an unmatched
path, a missing param or an invalid redirect all produce a Route whose
``matched`` tuple is empty.
"""

from collections.abc import Iterable, Mapping
from dataclasses import replace
from typing import Any

from wayfinder._internal.diagnostics import error, warn
from wayfinder.config import RouterConfig
from wayfinder.routing.location import RawLocation, normalize_location
from wayfinder.routing.params import fill_params, try_fill_params
from wayfinder.routing.path import resolve_path
from wayfinder.routing.route import Location, RecordKind, Route, RouteConfig, RouteRecord
from wayfinder.routing.route_map import RouteMap, build_route_map
from wayfinder.routing.snapshot import create_route


class Matcher:
    """Matches locations against a route map built from *routes*.

    Usage::

        matcher = Matcher([RouteConfig("/users/:id", name="user", component=UserView)])
        route = matcher.match("/users/42")
        route.params   # {"id": "42"}
        route = matcher.match({"name": "user", "params": {"id": "7"}})
        route.path     # "/users/7"
    """

    __slots__ = ("_config", "_map")

    def __init__(
        self,
        routes: Iterable[RouteConfig | Mapping[str, Any]] = (),
        config: RouterConfig | None = None,
    ) -> None:
        self._config = config or RouterConfig()
        self._map = build_route_map(routes, diagnose=self._config.diagnose)

    @property
    def route_map(self) -> RouteMap:
        return self._map

    def add_routes(self, routes: Iterable[RouteConfig | Mapping[str, Any]]) -> None:
        """Compile *routes* into the existing route map."""
        build_route_map(
            routes,
            self._map.path_list,
            self._map.path_map,
            self._map.name_map,
            diagnose=self._config.diagnose,
        )

    def match(
        self,
        raw: RawLocation,
        current: Route | None = None,
        redirected_from: Location | None = None,
    ) -> Route:
        """Resolve *raw* (relative to *current*) into a ``Route``."""
        return self._match(raw, current, redirected_from, 0)

    # -- resolution --

    def _match(
        self,
        raw: RawLocation,
        current: Route | None,
        redirected_from: Location | None,
        depth: int,
    ) -> Route:
        diagnose = self._config.diagnose
        location = normalize_location(
            raw, current, False, parse_query=self._config.parse_query, diagnose=diagnose
        )

        if depth > self._config.max_redirects:
            error(
                diagnose,
                "Redirect limit of %d exceeded while resolving %r (started at %r)",
                self._config.max_redirects,
                location.path or location.name,
                redirected_from.path or redirected_from.name if redirected_from else None,
            )
            return self._create(None, location)

        if location.name:
            return self._match_name(location, current, redirected_from, depth)

        if location.path:
            for path in self._map.path_list:
                record = self._map.path_map[path]
                params = record.pattern.match(location.path)
                if params is not None:
                    return self._resolve_record(
                        record, replace(location, params=params), redirected_from, depth
                    )

        # A relative-params target with no current match keeps its params
        if location.path:
            location = replace(location, params={})
        return self._create(None, location)

    def _match_name(
        self,
        location: Location,
        current: Route | None,
        redirected_from: Location | None,
        depth: int,
    ) -> Route:
        diagnose = self._config.diagnose
        name = location.name
        record = self._map.name_map.get(name or "")
        if record is None:
            warn(diagnose, "Route with name '%s' does not exist", name)
            return self._create(None, location)

        params = dict(location.params or {})
        if current is not None:
            # Carry over required params the target does not restate
            required = record.pattern.required_names
            for key, value in current.params.items():
                if key not in params and key in required:
                    params[key] = value

        path = try_fill_params(record.path, params, f'named route "{name}"', diagnose=diagnose)
        if path is None:
            return self._create(None, replace(location, params=params))

        return self._resolve_record(
            record, replace(location, path=path, params=params), redirected_from, depth
        )

    def _resolve_record(
        self,
        record: RouteRecord,
        location: Location,
        redirected_from: Location | None,
        depth: int,
    ) -> Route:
        kind = record.kind
        if kind is RecordKind.REDIRECT:
            return self._redirect(record, redirected_from or location, depth)
        if kind is RecordKind.ALIAS:
            return self._alias(record, location, redirected_from, depth)
        return self._create(record, location, redirected_from)

    def _redirect(self, record: RouteRecord, location: Location, depth: int) -> Route:
        diagnose = self._config.diagnose
        target = record.redirect
        if callable(target):
            target = target(self._create(record, location))

        descriptor = _redirect_fields(target)
        if descriptor is None:
            warn(diagnose, "invalid redirect option: %r", target)
            return self._create(None, location)

        query = descriptor["query"] if "query" in descriptor else location.query
        hash_ = descriptor["hash"] if "hash" in descriptor else location.hash
        params = descriptor["params"] if "params" in descriptor else location.params
        name = descriptor.get("name")
        path = descriptor.get("path")

        if name:
            if name not in self._map.name_map:
                warn(diagnose, 'redirect failed: named route "%s" not found.', name)
            next_location = Location(
                name=name, params=params, query=query, hash=hash_ or "", normalized=True
            )
            return self._match(next_location, None, location, depth + 1)

        if path:
            base = record.parent.path if record.parent else "/"
            raw_path = resolve_path(path, base, True)
            resolved = fill_params(
                raw_path, params, f'redirect route with path "{raw_path}"', diagnose=diagnose
            )
            next_location = Location(path=resolved, query=query, hash=hash_ or "", normalized=True)
            return self._match(next_location, None, location, depth + 1)

        warn(diagnose, "invalid redirect option: %r", target)
        return self._create(None, location)

    def _alias(
        self,
        record: RouteRecord,
        location: Location,
        redirected_from: Location | None,
        depth: int,
    ) -> Route:
        match_as = record.match_as or "/"
        aliased_path = fill_params(
            match_as,
            location.params,
            f'aliased route with path "{match_as}"',
            diagnose=self._config.diagnose,
        )
        aliased = self._match(Location(path=aliased_path, normalized=True), None, None, depth + 1)
        if aliased.matched:
            target = aliased.matched[-1]
            return self._create(target, replace(location, params=aliased.params), redirected_from)
        return self._create(None, location)

    def _create(
        self,
        record: RouteRecord | None,
        location: Location,
        redirected_from: Location | None = None,
    ) -> Route:
        return create_route(record, location, redirected_from, self._config.stringify_query)


def _redirect_fields(target: Any) -> dict[str, Any] | None:
    """Normalize a redirect target into a dict of the fields it sets."""
    if isinstance(target, str):
        return {"path": target}
    if isinstance(target, Location):
        fields: dict[str, Any] = {}
        if target.path is not None:
            fields["path"] = target.path
        if target.name is not None:
            fields["name"] = target.name
        if target.params is not None:
            fields["params"] = target.params
        if target.query is not None:
            fields["query"] = target.query
        if target.hash:
            fields["hash"] = target.hash
        return fields
    if isinstance(target, Mapping):
        return dict(target)
    return None
