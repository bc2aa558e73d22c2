"""Tests for wayfinder.routing.route_map — compiling route trees."""

import logging

import pytest

from wayfinder.errors import ConfigurationError
from wayfinder.routing.pattern import PatternOptions
from wayfinder.routing.route import RecordKind, RouteConfig
from wayfinder.routing.route_map import build_route_map, normalize_path


class Home: ...


class About: ...


class User: ...


class Profile: ...


class NotFoundView: ...


class TestNormalizePath:
    def test_trailing_slash_stripped(self) -> None:
        assert normalize_path("/users/", None) == "/users"

    def test_trailing_slash_kept_when_strict(self) -> None:
        assert normalize_path("/users/", None, strict=True) == "/users/"

    def test_root_becomes_empty(self) -> None:
        assert normalize_path("/", None) == ""

    def test_child_joined_to_parent(self) -> None:
        parent = build_route_map([RouteConfig("/users")]).path_map["/users"]
        assert normalize_path("profile", parent) == "/users/profile"

    def test_absolute_child_overrides_parent(self) -> None:
        parent = build_route_map([RouteConfig("/users")]).path_map["/users"]
        assert normalize_path("/profile", parent) == "/profile"

    def test_child_of_root_has_single_slash(self) -> None:
        parent = build_route_map([RouteConfig("/")]).path_map[""]
        assert normalize_path("about", parent) == "/about"


class TestBuildRouteMap:
    def test_indices(self) -> None:
        route_map = build_route_map([
            RouteConfig("/", name="home", component=Home),
            RouteConfig("/about", component=About),
        ])
        assert route_map.path_list == ["", "/about"]
        assert set(route_map.path_map) == {"", "/about"}
        assert set(route_map.name_map) == {"home"}
        assert route_map.name_map["home"] is route_map.path_map[""]

    def test_record_fields(self) -> None:
        guard = object()
        route_map = build_route_map([
            RouteConfig(
                "/users/:id",
                name="user",
                component=User,
                meta={"auth": True},
                props=True,
                before_enter=guard,
            ),
        ])
        record = route_map.path_map["/users/:id"]
        assert record.components == {"default": User}
        assert record.meta == {"auth": True}
        assert record.props == {"default": True}
        assert record.before_enter is guard
        assert record.parent is None
        assert record.kind is RecordKind.PLAIN

    def test_named_views_keep_props_mapping(self) -> None:
        route_map = build_route_map([
            RouteConfig("/", components={"default": Home, "side": About}, props={"side": True}),
        ])
        record = route_map.path_map[""]
        assert record.components == {"default": Home, "side": About}
        assert record.props == {"side": True}

    def test_accepts_mappings(self) -> None:
        route_map = build_route_map([
            {"path": "/a", "name": "a", "component": Home, "caseSensitive": True},
        ])
        record = route_map.name_map["a"]
        assert record.pattern.test("/a")
        assert not record.pattern.test("/A")

    def test_nested_children(self) -> None:
        route_map = build_route_map([
            RouteConfig(
                "/users/:id",
                component=User,
                children=[
                    RouteConfig("", component=Home),
                    RouteConfig("profile", component=Profile),
                ],
            ),
        ])
        # The default child keeps a trailing slash so it stays distinct from its parent
        assert route_map.path_list == ["/users/:id/", "/users/:id/profile", "/users/:id"]
        child = route_map.path_map["/users/:id/profile"]
        assert child.parent is route_map.path_map["/users/:id"]
        assert [r.path for r in child.lineage()] == ["/users/:id", "/users/:id/profile"]

    def test_children_registered_before_parent(self) -> None:
        route_map = build_route_map([
            RouteConfig("/a", component=Home, children=[RouteConfig("b", component=About)]),
        ])
        assert route_map.path_list == ["/a/b", "/a"]

    def test_first_path_wins(self) -> None:
        route_map = build_route_map([
            RouteConfig("/a", component=Home),
            RouteConfig("/a", component=About),
        ])
        assert route_map.path_list == ["/a"]
        assert route_map.path_map["/a"].components == {"default": Home}

    def test_wildcards_sorted_last(self) -> None:
        route_map = build_route_map([
            RouteConfig("*", component=NotFoundView),
            RouteConfig("/a", component=Home),
            RouteConfig("/b", component=About),
        ])
        assert route_map.path_list == ["/a", "/b", "*"]

    def test_wildcards_sorted_last_after_extension(self) -> None:
        route_map = build_route_map([RouteConfig("*", component=NotFoundView)])
        build_route_map(
            [RouteConfig("/late", component=Home)],
            route_map.path_list,
            route_map.path_map,
            route_map.name_map,
        )
        assert route_map.path_list == ["/late", "*"]

    def test_extension_in_place(self) -> None:
        route_map = build_route_map([RouteConfig("/a", name="a", component=Home)])
        original = route_map.path_map["/a"]
        extended = build_route_map(
            [RouteConfig("/b", name="b", component=About)],
            route_map.path_list,
            route_map.path_map,
            route_map.name_map,
        )
        assert extended.path_list is route_map.path_list
        assert route_map.path_list == ["/a", "/b"]
        assert route_map.path_map["/a"] is original
        assert set(route_map.name_map) == {"a", "b"}

    def test_case_sensitive_override(self) -> None:
        route_map = build_route_map([
            RouteConfig("/Case", component=Home, case_sensitive=True),
        ])
        assert not route_map.path_map["/Case"].pattern.test("/case")

    def test_strict_path_options(self) -> None:
        route_map = build_route_map([
            RouteConfig("/dir/", component=Home, path_options=PatternOptions(strict=True)),
        ])
        record = route_map.path_map["/dir/"]
        assert record.pattern.test("/dir/")
        assert not record.pattern.test("/dir")


class TestAliases:
    def test_alias_record_created(self) -> None:
        route_map = build_route_map([RouteConfig("/c", component=Home, alias="/d")])
        assert route_map.path_list == ["/d", "/c"]
        alias = route_map.path_map["/d"]
        assert alias.match_as == "/c"
        assert alias.kind is RecordKind.ALIAS

    def test_multiple_aliases(self) -> None:
        route_map = build_route_map([RouteConfig("/c", component=Home, alias=["/d", "/e"])])
        assert route_map.path_map["/d"].match_as == "/c"
        assert route_map.path_map["/e"].match_as == "/c"

    def test_alias_of_root(self) -> None:
        route_map = build_route_map([RouteConfig("/", component=Home, alias="/home")])
        assert route_map.path_map["/home"].match_as == "/"

    def test_alias_children_match_as_nested(self) -> None:
        route_map = build_route_map([
            RouteConfig(
                "/users",
                component=User,
                alias="/people",
                children=[RouteConfig("profile", component=Profile)],
            ),
        ])
        alias_child = route_map.path_map["/people/profile"]
        assert alias_child.match_as == "/users/profile"
        assert alias_child.parent is route_map.path_map["/people"]

    def test_named_alias_child_does_not_warn(self, caplog) -> None:
        with caplog.at_level(logging.WARNING, logger="wayfinder.routing"):
            route_map = build_route_map([
                RouteConfig(
                    "/users",
                    component=User,
                    alias="/people",
                    children=[RouteConfig("profile", name="profile", component=Profile)],
                ),
            ])
        assert route_map.name_map["profile"].path == "/users/profile"
        assert caplog.records == []


class TestConfigurationErrors:
    def test_missing_path_raises(self) -> None:
        with pytest.raises(ConfigurationError, match='"path" is required'):
            build_route_map([RouteConfig(None, component=Home)])

    def test_missing_path_key_in_mapping_raises(self) -> None:
        with pytest.raises(ConfigurationError, match='"path" is required'):
            build_route_map([{"name": "nowhere", "component": Home}])

    def test_missing_path_in_child_raises(self) -> None:
        with pytest.raises(ConfigurationError):
            build_route_map([RouteConfig("/a", component=Home, children=[{"component": About}])])

    def test_string_component_raises(self) -> None:
        with pytest.raises(ConfigurationError, match="cannot be a string id"):
            build_route_map([RouteConfig("/a", component="Home")])

    def test_string_named_component_raises(self) -> None:
        with pytest.raises(ConfigurationError, match="cannot be a string id"):
            build_route_map([RouteConfig("/a", components={"default": "Home"})])

    def test_unknown_key_raises(self) -> None:
        with pytest.raises(ConfigurationError, match="Unknown route configuration keys: compnent"):
            build_route_map([{"path": "/a", "compnent": Home}])


class TestConfigurationWarnings:
    def test_duplicate_name_warns_first_wins(self, caplog) -> None:
        with caplog.at_level(logging.WARNING, logger="wayfinder.routing"):
            route_map = build_route_map([
                RouteConfig("/a", name="dup", component=Home),
                RouteConfig("/b", name="dup", component=About),
            ])
        assert route_map.name_map["dup"].path == "/a"
        assert "/b" in route_map.path_map
        assert any("Duplicate named routes" in r.getMessage() for r in caplog.records)

    def test_duplicate_param_key_warns(self, caplog) -> None:
        with caplog.at_level(logging.WARNING, logger="wayfinder.routing"):
            build_route_map([RouteConfig("/:id/x/:id", component=Home)])
        assert any("Duplicate param keys" in r.getMessage() for r in caplog.records)

    def test_named_route_with_default_child_warns(self, caplog) -> None:
        with caplog.at_level(logging.WARNING, logger="wayfinder.routing"):
            build_route_map([
                RouteConfig("/p", name="parent", component=Home, children=[RouteConfig("", component=About)]),
            ])
        assert any("has a default child route" in r.getMessage() for r in caplog.records)

    def test_diagnostics_disabled(self, caplog) -> None:
        with caplog.at_level(logging.WARNING, logger="wayfinder.routing"):
            build_route_map(
                [
                    RouteConfig("/a", name="dup", component=Home),
                    RouteConfig("/b", name="dup", component=About),
                ],
                diagnose=False,
            )
        assert caplog.records == []
