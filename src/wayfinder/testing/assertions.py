"""Route assertion helpers for wayfinder tests.

Convenience functions to verify what a resolved Route matched. Each
assertion produces a clear error message on failure.
"""

from wayfinder.routing.route import Route


def _describe(route: Route) -> str:
    paths = [record.path or "/" for record in route.matched]
    return f"{route.full_path!r} matched {paths}"


def assert_matched(route: Route, *paths: str) -> None:
    """Assert the route matched exactly the records at *paths*, root first.

    Record paths are compared as compiled, so the root route is ``""``.
    """
    actual = tuple(record.path for record in route.matched)
    assert actual == paths, f"Expected matched records {list(paths)}, got {_describe(route)}"


def assert_not_found(route: Route) -> None:
    """Assert nothing matched."""
    assert not route.matched, f"Expected no match, got {_describe(route)}"


def assert_redirected(route: Route, *, from_path: str, to_path: str) -> None:
    """Assert the route is the end of a redirect chain from *from_path*."""
    assert route.redirected_from_path == from_path, (
        f"Expected redirect from {from_path!r}, got {route.redirected_from_path!r}"
    )
    assert route.path == to_path, f"Expected redirect to {to_path!r}, got {route.path!r}"
