"""Router — the public entry point around the matcher.

Holds the current route and hands every committed route to subscribers.
Transport (history stacks, browser events) and the guard pipeline live
outside; they call ``match``/``resolve`` to compute a destination and
``update`` once a transition is confirmed.
"""

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from wayfinder._internal.types import Component
from wayfinder.config import RouterConfig
from wayfinder.routing.location import RawLocation, normalize_location
from wayfinder.routing.matcher import Matcher
from wayfinder.routing.path import clean_path
from wayfinder.routing.route import Location, Route, RouteConfig
from wayfinder.routing.snapshot import START

Listener = Callable[[Route], None]


@dataclass(frozen=True, slots=True)
class Resolution:
    """Result of ``Router.resolve()``."""

    location: Location
    route: Route
    href: str


def create_href(base: str, full_path: str, mode: str) -> str:
    """Build the href for *full_path* under *base* in the given mode."""
    path = f"#{full_path}" if mode == "hash" else full_path
    return clean_path(f"{base}/{path}") if base else path


class Router:
    """Route resolution plus current-route bookkeeping.

    Usage::

        router = Router([
            RouteConfig("/", component=Home),
            RouteConfig("/users/:id", name="user", component=User),
        ])
        resolution = router.resolve({"name": "user", "params": {"id": "1"}})
        resolution.href          # "/users/1"

        unsubscribe = router.subscribe(lambda route: print(route.full_path))
        router.update(resolution.route)
    """

    __slots__ = ("_current", "_listeners", "config", "matcher")

    def __init__(
        self,
        routes: Iterable[RouteConfig | Mapping[str, Any]] = (),
        config: RouterConfig | None = None,
    ) -> None:
        self.config = config or RouterConfig()
        self.matcher = Matcher(routes, self.config)
        self._current: Route = START
        self._listeners: list[Listener] = []

    @property
    def current(self) -> Route:
        """The last committed route (``START`` before the first one)."""
        return self._current

    def match(
        self,
        raw: RawLocation,
        current: Route | None = None,
        redirected_from: Location | None = None,
    ) -> Route:
        return self.matcher.match(raw, current, redirected_from)

    def resolve(
        self,
        to: RawLocation,
        current: Route | None = None,
        append: bool = False,
    ) -> Resolution:
        """Resolve *to* relative to *current* (default: the current route)."""
        current = current or self._current
        location = normalize_location(
            to,
            current,
            append,
            parse_query=self.config.parse_query,
            diagnose=self.config.diagnose,
        )
        route = self.match(location, current)
        full_path = route.redirected_from_path or route.full_path
        href = create_href(self.config.base, full_path, self.config.mode)
        return Resolution(location=location, route=route, href=href)

    def add_routes(self, routes: Iterable[RouteConfig | Mapping[str, Any]]) -> None:
        """Register more routes and re-resolve the current route against them."""
        self.matcher.add_routes(routes)
        if self._current is not START:
            self.update(self.match(self._current.full_path))

    def update(self, route: Route) -> None:
        """Commit *route* as the current route and notify subscribers."""
        self._current = route
        for listener in list(self._listeners):
            listener(route)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call *listener* with every committed route.

        Returns a function that removes the listener again.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def matched_components(self, to: RawLocation | Route | None = None) -> list[Component]:
        """Components of every matched record of *to* (or the current route)."""
        if to is None:
            route = self._current
        elif isinstance(to, Route):
            route = to
        else:
            route = self.resolve(to).route
        return [component for record in route.matched for component in record.components.values()]
