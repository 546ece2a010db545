"""Tests for perch.routing.router — compiled trie-based router."""

import pytest

from perch.errors import ConfigurationError, MethodNotAllowed, NotFound
from perch.mapping.metadata import GroupMetadata, RouteMetadata
from perch.routing.params import PlaceholderAliases
from perch.routing.router import Router, parse_pattern


def _handler() -> str:
    return "ok"


def _route(pattern: str, methods: frozenset[str] | None = None, **kwargs) -> RouteMetadata:
    return RouteMetadata(
        pattern=pattern, invokable=_handler, methods=methods or frozenset({"GET"}), **kwargs
    )


def _router(*routes: RouteMetadata, aliases: PlaceholderAliases | None = None) -> Router:
    r = Router(aliases)
    for route in routes:
        r.add(route)
    r.compile()
    return r


class TestParsePattern:
    def test_static(self) -> None:
        segments = parse_pattern("/users")
        assert len(segments) == 1
        assert segments[0].value == "users"
        assert segments[0].is_param is False

    def test_param(self) -> None:
        segments = parse_pattern("/users/{id}")
        assert segments[1].is_param is True
        assert segments[1].param_name == "id"
        assert segments[1].alias is None

    def test_aliased_param(self) -> None:
        segments = parse_pattern("/users/{id:int}")
        assert segments[1].alias == "int"

    def test_regex_param(self) -> None:
        segments = parse_pattern("/posts/{slug:[a-z-]+}")
        assert segments[1].param_name == "slug"
        assert segments[1].alias == "[a-z-]+"

    def test_root(self) -> None:
        assert parse_pattern("/") == []

    def test_rejects_angle_bracket_param(self) -> None:
        with pytest.raises(ConfigurationError, match=r"\{param\}"):
            parse_pattern("/share/<slug>")


class TestRouterStatic:
    def test_root(self) -> None:
        match = _router(_route("/")).match("GET", "/")
        assert match.arguments == {}

    def test_nested_path(self) -> None:
        r = _router(_route("/api/v2/users"))
        assert r.match("GET", "/api/v2/users").route.pattern == "/api/v2/users"

    def test_trailing_slash_ignored(self) -> None:
        r = _router(_route("/users"))
        assert r.match("GET", "/users/").route.pattern == "/users"

    def test_static_beats_param(self) -> None:
        static = _route("/users/me")
        param = _route("/users/{id}")
        r = _router(param, static)
        assert r.match("GET", "/users/me").route is static
        assert r.match("GET", "/users/7").route is param


class TestRouterParams:
    def test_string_param(self) -> None:
        match = _router(_route("/users/{name}")).match("GET", "/users/alice")
        assert match.arguments == {"name": "alice"}

    def test_int_alias(self) -> None:
        r = _router(_route("/users/{id:int}"))
        assert r.match("GET", "/users/42").arguments == {"id": "42"}
        with pytest.raises(NotFound):
            r.match("GET", "/users/abc")

    def test_placeholder_constraint_from_metadata(self) -> None:
        r = _router(_route("/users/{id}", placeholders={"id": "int"}))
        with pytest.raises(NotFound):
            r.match("GET", "/users/abc")

    def test_group_placeholder_constraint(self) -> None:
        group = GroupMetadata(pattern="/users", placeholders={"id": "int"})
        r = _router(_route("/{id}", group=group))
        assert r.match("GET", "/users/5").arguments == {"id": "5"}

    def test_custom_alias(self) -> None:
        aliases = PlaceholderAliases({"slug": "[a-z0-9-]+"})
        r = _router(_route("/posts/{slug:slug}"), aliases=aliases)
        assert r.match("GET", "/posts/hello-world").arguments == {"slug": "hello-world"}
        with pytest.raises(NotFound):
            r.match("GET", "/posts/Hello_World")

    def test_distinct_constraints_same_level(self) -> None:
        by_id = _route("/items/{id:int}")
        by_slug = _route("/items/{slug:alpha}")
        r = _router(by_id, by_slug)
        assert r.match("GET", "/items/12").route is by_id
        assert r.match("GET", "/items/abc").route is by_slug

    def test_path_catch_all(self) -> None:
        r = _router(_route("/files/{rest:path}"))
        assert r.match("GET", "/files/a/b/c.txt").arguments == {"rest": "a/b/c.txt"}


class TestRouterMethods:
    def test_method_not_allowed(self) -> None:
        r = _router(_route("/users", frozenset({"GET", "POST"})))
        with pytest.raises(MethodNotAllowed) as exc_info:
            r.match("DELETE", "/users")
        assert ("Allow", "GET, POST") in exc_info.value.headers

    def test_head_falls_back_to_get(self) -> None:
        route = _route("/users")
        assert _router(route).match("HEAD", "/users").route is route

    def test_first_added_wins(self) -> None:
        first = _route("/dup")
        second = _route("/dup")
        assert _router(first, second).match("GET", "/dup").route is first

    def test_not_found(self) -> None:
        with pytest.raises(NotFound):
            _router(_route("/users")).match("GET", "/posts")


class TestRouterLifecycle:
    def test_add_after_compile_raises(self) -> None:
        r = _router()
        with pytest.raises(RuntimeError):
            r.add(_route("/late"))

    def test_routes_listing(self) -> None:
        a, b = _route("/a"), _route("/b")
        assert _router(a, b).routes == [a, b]


class TestUrlFor:
    def test_builds_path(self) -> None:
        group = GroupMetadata(prefix="users", pattern="/users")
        r = _router(_route("/{id:int}", name="show", group=group))
        assert r.url_for("users_show", id=42) == "/users/42"

    def test_unknown_name(self) -> None:
        with pytest.raises(KeyError):
            _router().url_for("missing")

    def test_missing_param(self) -> None:
        r = _router(_route("/{id}", name="show"))
        with pytest.raises(KeyError, match="id"):
            r.url_for("show")
