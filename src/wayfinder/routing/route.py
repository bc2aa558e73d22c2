"""Route configuration, compiled records, locations and resolved routes."""

from collections.abc import Callable, Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from wayfinder._internal.types import Component, Params, Query
from wayfinder.errors import ConfigurationError
from wayfinder.routing.pattern import CompiledPattern, PatternOptions

# camelCase keys accepted from configuration trees written for JS routers
_CONFIG_KEY_ALIASES = {
    "beforeEnter": "before_enter",
    "caseSensitive": "case_sensitive",
    "pathToRegexpOptions": "path_options",
}


@dataclass(frozen=True, slots=True)
class RouteConfig:
    """One entry of a user-declared route tree.

    ``path`` is required; ``None`` is rejected when the tree is built.
    ``alias`` may be one path or several. ``redirect`` may be a path, a
    ``{"name": ..., "params": ...}`` / ``{"path": ...}`` descriptor, or a
    callable receiving the provisional Route and returning either.
    """

    path: str | None
    name: str | None = None
    component: Component = None
    components: Mapping[str, Component] | None = None
    children: Sequence["RouteConfig | Mapping[str, Any]"] = ()
    alias: str | Sequence[str] | None = None
    redirect: Any = None
    meta: Mapping[str, Any] | None = None
    props: Any = None
    before_enter: Callable[..., Any] | None = None
    case_sensitive: bool | None = None
    path_options: PatternOptions = field(default_factory=PatternOptions)

    @classmethod
    def coerce(cls, obj: "RouteConfig | Mapping[str, Any]") -> "RouteConfig":
        """Accept a ``RouteConfig`` or a plain mapping with the same keys."""
        if isinstance(obj, RouteConfig):
            return obj
        if not isinstance(obj, Mapping):
            msg = f"Route configuration must be a RouteConfig or a mapping, got {type(obj).__name__}."
            raise ConfigurationError(msg)

        kwargs = {_CONFIG_KEY_ALIASES.get(key, key): value for key, value in obj.items()}
        if kwargs.get("path") is None:
            msg = f'"path" is required in a route configuration: {dict(obj)!r}'
            raise ConfigurationError(msg)

        unknown = set(kwargs) - set(cls.__dataclass_fields__)
        if unknown:
            msg = f"Unknown route configuration keys: {', '.join(sorted(unknown))}"
            raise ConfigurationError(msg)

        options = kwargs.get("path_options")
        if isinstance(options, Mapping):
            kwargs["path_options"] = PatternOptions(**options)
        elif options is None:
            kwargs.pop("path_options", None)

        return cls(**kwargs)


class RecordKind(Enum):
    """How a matched record resolves."""

    PLAIN = "plain"
    REDIRECT = "redirect"
    ALIAS = "alias"


@dataclass(frozen=True, slots=True, eq=False)
class RouteRecord:
    """A compiled entry of the route map.

    Records compare by identity. ``parent`` points at another record of
    the same map and is only used to rebuild the ancestor chain and to
    resolve relative redirects.
    """

    path: str
    pattern: CompiledPattern = field(repr=False)
    components: Mapping[str, Component] = field(default_factory=dict, repr=False)
    name: str | None = None
    parent: "RouteRecord | None" = field(default=None, repr=False)
    redirect: Any = None
    match_as: str | None = None
    meta: Mapping[str, Any] = field(default_factory=dict)
    before_enter: Callable[..., Any] | None = field(default=None, repr=False)
    props: Mapping[str, Any] = field(default_factory=dict, repr=False)

    @property
    def kind(self) -> RecordKind:
        if self.redirect is not None:
            return RecordKind.REDIRECT
        if self.match_as is not None:
            return RecordKind.ALIAS
        return RecordKind.PLAIN

    def lineage(self) -> Iterator["RouteRecord"]:
        """Yield this record's ancestors and itself, root first."""
        chain: list[RouteRecord] = []
        record: RouteRecord | None = self
        while record is not None:
            chain.append(record)
            record = record.parent
        yield from reversed(chain)


@dataclass(frozen=True, slots=True)
class Location:
    """A navigation target.

    Either named (``name`` + ``params``) or path-based (``path``), plus
    ``query`` and ``hash``. ``normalized`` marks a location that no
    longer needs resolving against the current route.
    """

    path: str | None = None
    name: str | None = None
    params: Params | None = None
    query: Query | None = None
    hash: str = ""
    append: bool = False
    normalized: bool = False

    @classmethod
    def from_raw(cls, raw: "str | Location | Mapping[str, Any]") -> "Location":
        """Coerce a path string or a mapping into a ``Location``."""
        if isinstance(raw, Location):
            return raw
        if isinstance(raw, str):
            return cls(path=raw)
        data = dict(raw)
        if "_normalized" in data:
            data["normalized"] = data.pop("_normalized")
        return cls(
            path=data.get("path"),
            name=data.get("name"),
            params=data.get("params"),
            query=data.get("query"),
            hash=data.get("hash") or "",
            append=bool(data.get("append", False)),
            normalized=bool(data.get("normalized", False)),
        )


@dataclass(frozen=True, slots=True)
class Route:
    """The resolved outcome of a navigation target.

    ``matched`` lists records from the root ancestor to the matched leaf
    and is empty when nothing matched. ``redirected_from`` is the location
    that started a redirect chain ending here, and ``redirected_from_path``
    its full path.
    """

    path: str
    full_path: str
    name: str | None = None
    params: Params = field(default_factory=dict)
    query: Query = field(default_factory=dict)
    hash: str = ""
    meta: Mapping[str, Any] = field(default_factory=dict)
    matched: tuple[RouteRecord, ...] = ()
    redirected_from: Location | None = None
    redirected_from_path: str | None = None

    @property
    def is_matched(self) -> bool:
        return bool(self.matched)
