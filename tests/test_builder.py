"""Tests for perch.mapping.builder — mapping tree -> route metadata."""

import pytest

from perch.errors import ConfigurationError, MappingError
from perch.mapping.builder import build_metadata


class TestBuildRoutes:
    def test_list_tree(self) -> None:
        routes = build_metadata([{"pattern": "/", "invokable": "app:index"}])
        assert len(routes) == 1
        assert routes[0].pattern == "/"
        assert routes[0].methods == frozenset({"GET"})
        assert routes[0].xml_http_request is False

    def test_routes_key_tree(self) -> None:
        routes = build_metadata({"routes": [{"pattern": "/a", "invokable": "a:b"}]})
        assert [r.pattern for r in routes] == ["/a"]

    def test_index_keyed_tree(self) -> None:
        tree = {0: {"pattern": "/a", "invokable": "x:a"}, 1: {"pattern": "/b", "invokable": "x:b"}}
        assert [r.pattern for r in build_metadata(tree)] == ["/a", "/b"]

    def test_empty_tree(self) -> None:
        assert build_metadata({}) == []

    def test_all_fields(self) -> None:
        (route,) = build_metadata([
            {
                "pattern": "/items/{id}",
                "invokable": "items:show",
                "methods": ["get", "head"],
                "name": "item",
                "parameters": {"id": "int"},
                "placeholders": {"id": "int"},
                "transformer": "type_transformer",
                "xmlHttpRequest": True,
                "priority": 5,
                "middleware": "auth",
            }
        ])
        assert route.methods == frozenset({"GET", "HEAD"})
        assert route.name == "item"
        assert route.parameters == {"id": "int"}
        assert route.transformer == "type_transformer"
        assert route.xml_http_request is True
        assert route.priority == 5
        assert route.middleware == ("auth",)

    def test_method_string(self) -> None:
        (route,) = build_metadata([{"pattern": "/", "invokable": "a:b", "methods": "post"}])
        assert route.methods == frozenset({"POST"})


class TestBuildGroups:
    def test_nested_groups(self) -> None:
        tree = [
            {
                "prefix": "api",
                "pattern": "/api",
                "parameters": {"version": "int"},
                "routes": [
                    {
                        "pattern": "/users",
                        "routes": [{"pattern": "/{id}", "name": "show", "invokable": "u:show"}],
                    }
                ],
            }
        ]
        (route,) = build_metadata(tree)
        assert route.full_pattern == "/api/users/{id}"
        assert route.full_name == "api_show"
        assert [g.pattern for g in route.group_chain] == ["/api", "/users"]
        assert route.group_chain[0].parameters == {"version": "int"}

    def test_priority_ordering_is_stable(self) -> None:
        tree = [
            {"pattern": "/a", "invokable": "x:a"},
            {"pattern": "/b", "invokable": "x:b", "priority": 10},
            {"pattern": "/c", "invokable": "x:c"},
        ]
        assert [r.pattern for r in build_metadata(tree)] == ["/b", "/a", "/c"]


class TestBuildErrors:
    def test_mapping_error_is_configuration_error(self) -> None:
        assert issubclass(MappingError, ConfigurationError)

    def test_missing_pattern(self) -> None:
        with pytest.raises(MappingError, match="pattern"):
            build_metadata([{"invokable": "a:b"}])

    def test_missing_invokable(self) -> None:
        with pytest.raises(MappingError, match="invokable"):
            build_metadata([{"pattern": "/"}])

    def test_unknown_key(self) -> None:
        with pytest.raises(MappingError, match="'verb'"):
            build_metadata([{"pattern": "/", "invokable": "a:b", "verb": "GET"}])

    def test_non_mapping_definition(self) -> None:
        with pytest.raises(MappingError, match=r"mapping\[0\]"):
            build_metadata(["/just/a/string"])

    def test_bad_parameters(self) -> None:
        with pytest.raises(MappingError, match="parameters"):
            build_metadata([{"pattern": "/", "invokable": "a:b", "parameters": ["id"]}])

    def test_bad_priority(self) -> None:
        with pytest.raises(MappingError, match="priority"):
            build_metadata([{"pattern": "/", "invokable": "a:b", "priority": "high"}])

    def test_empty_methods(self) -> None:
        with pytest.raises(MappingError, match="methods"):
            build_metadata([{"pattern": "/", "invokable": "a:b", "methods": []}])

    def test_duplicate_names(self) -> None:
        tree = [
            {"pattern": "/a", "invokable": "x:a", "name": "same"},
            {"pattern": "/b", "invokable": "x:b", "name": "same"},
        ]
        with pytest.raises(MappingError, match="Duplicate route name"):
            build_metadata(tree)

    def test_same_name_in_different_groups(self) -> None:
        tree = [
            {"prefix": "a", "routes": [{"pattern": "/", "invokable": "x:a", "name": "index"}]},
            {"prefix": "b", "routes": [{"pattern": "/", "invokable": "x:b", "name": "index"}]},
        ]
        names = {r.full_name for r in build_metadata(tree)}
        assert names == {"a_index", "b_index"}


class TestMixedTreeShapes:
    def test_index_keys_beside_routes_key(self) -> None:
        tree = {
            0: {"pattern": "/a", "invokable": "x:a"},
            "routes": [{"pattern": "/b", "invokable": "x:b"}],
        }
        assert [r.pattern for r in build_metadata(tree)] == ["/a", "/b"]

    def test_merge_order_kept(self) -> None:
        tree = {
            "routes": [{"pattern": "/b", "invokable": "x:b"}],
            0: {"pattern": "/a", "invokable": "x:a"},
        }
        assert [r.pattern for r in build_metadata(tree)] == ["/b", "/a"]

    def test_location_names_index_key(self) -> None:
        tree = {"routes": [], 3: {"pattern": "/x"}}
        with pytest.raises(MappingError, match=r"mapping\[3\]"):
            build_metadata(tree)

    def test_unknown_top_level_key(self) -> None:
        tree = {"routes": [], "version": 2}
        with pytest.raises(MappingError, match="unknown top-level key 'version'"):
            build_metadata(tree)
