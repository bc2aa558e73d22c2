"""Wayfinder — route resolution for client-side navigation.

Compiles a nested route tree (children, aliases, redirects) and resolves
navigation targets (paths, names, relative params) into matched routes.
Rendering, history transport and navigation guards are left to the host.

Basic usage::

    from wayfinder import Router, RouteConfig

    router = Router([
        RouteConfig("/", component=Home),
        RouteConfig("/users/:id", name="user", component=User),
        RouteConfig("/people/:id", redirect="/users/:id"),
        RouteConfig("*", component=NotFound),
    ])

    route = router.match("/people/42?tab=posts")
    route.path             # "/users/42"
    route.params           # {"id": "42"}
    route.query            # {"tab": "posts"}
    route.redirected_from_path   # "/people/42?tab=posts"
"""

__version__ = "0.1.0-dev"
__all__ = [
    "START",
    "ConfigurationError",
    "Location",
    "Matcher",
    "Resolution",
    "Route",
    "RouteConfig",
    "RouteRecord",
    "Router",
    "RouterConfig",
    "WayfinderError",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import wayfinder`` fast while providing a clean top-level API.
    """
    if name in ("Router", "Resolution"):
        from wayfinder import router as _router

        return getattr(_router, name)

    if name == "RouterConfig":
        from wayfinder.config import RouterConfig

        return RouterConfig

    if name == "Matcher":
        from wayfinder.routing.matcher import Matcher

        return Matcher

    if name in ("Location", "Route", "RouteConfig", "RouteRecord"):
        from wayfinder.routing import route as _route

        return getattr(_route, name)

    if name == "START":
        from wayfinder.routing.snapshot import START

        return START

    if name in ("ConfigurationError", "WayfinderError"):
        from wayfinder import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
