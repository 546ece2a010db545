"""Build typed metadata from a merged mapping tree.

The tree is a list of definitions, or a dict holding them under
``routes``. Sources written in both shapes merge into a dict carrying
index keys next to ``routes``; both sets are built, in merge order.

A definition carrying a ``routes`` key is a group and its members are
built with the group as parent; anything else is a route::

    routes:
      - pattern: /health
        invokable: "app.views:health"
      - prefix: users
        pattern: /users
        parameters: {id: int}
        routes:
          - pattern: /{id}
            name: show
            invokable: "users:show"

Malformed definitions raise :class:`MappingError` naming the offending key.
"""

from collections.abc import Mapping
from typing import Any

from perch._internal.types import Fragment
from perch.errors import MappingError
from perch.mapping.metadata import GroupMetadata, RouteMetadata

_ROUTE_KEYS = frozenset({
    "pattern",
    "invokable",
    "methods",
    "name",
    "parameters",
    "placeholders",
    "transformer",
    "xml_http_request",
    "xmlHttpRequest",
    "priority",
    "middleware",
})

_GROUP_KEYS = frozenset({"prefix", "pattern", "parameters", "placeholders", "middleware", "routes"})


def _members(node: Any, where: str) -> list[Any]:
    if isinstance(node, list):
        return node
    if isinstance(node, dict):
        return list(node.values())
    msg = f"{where}: 'routes' must be a list of definitions, got {type(node).__name__}"
    raise MappingError(msg)


def _mapping(definition: Mapping[str, Any], key: str, where: str) -> dict[str, Any]:
    value = definition.get(key) or {}
    if not isinstance(value, dict):
        msg = f"{where}: {key!r} must be a mapping, got {type(value).__name__}"
        raise MappingError(msg)
    return dict(value)


def _optional_str(definition: Mapping[str, Any], key: str, where: str) -> str | None:
    value = definition.get(key)
    if value is not None and not isinstance(value, str):
        msg = f"{where}: {key!r} must be a string, got {type(value).__name__}"
        raise MappingError(msg)
    return value


def _middleware(definition: Mapping[str, Any], where: str) -> tuple[Any, ...]:
    value = definition.get("middleware") or ()
    if isinstance(value, str) or not isinstance(value, list | tuple):
        value = (value,)
    return tuple(value)


def _located(definitions: list[Any], where: str) -> list[tuple[str, Any]]:
    return [(f"{where}[{index}]", definition) for index, definition in enumerate(definitions)]


def _top_level(tree: Fragment) -> list[tuple[str, Any]]:
    """Top-level definitions in merge order.

    A list tree is taken as is. A dict tree holds index-keyed definitions
    (merged in from list fragments) and the members of its ``routes`` key,
    in the order they were merged.
    """
    if isinstance(tree, list):
        return _located(tree, "mapping")
    if not isinstance(tree, dict):
        msg = f"mapping: expected a list or a mapping, got {type(tree).__name__}"
        raise MappingError(msg)

    definitions: list[tuple[str, Any]] = []
    for key, value in tree.items():
        if key == "routes":
            definitions.extend(_located(_members(value, "routes"), "routes"))
        elif isinstance(key, int) and not isinstance(key, bool):
            definitions.append((f"mapping[{key}]", value))
        else:
            msg = f"mapping: unknown top-level key {key!r}"
            raise MappingError(msg)
    return definitions


def _check_keys(definition: Mapping[str, Any], allowed: frozenset[str], where: str) -> None:
    unknown = sorted(str(k) for k in definition if k not in allowed)
    if unknown:
        msg = f"{where}: unknown key(s) {', '.join(repr(k) for k in unknown)}"
        raise MappingError(msg)


def _methods(definition: Mapping[str, Any], where: str) -> frozenset[str]:
    value = definition.get("methods", ["GET"])
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list | tuple) or not value:
        msg = f"{where}: 'methods' must be a non-empty list of HTTP methods"
        raise MappingError(msg)
    return frozenset(str(m).upper() for m in value)


def _build_route(
    definition: Mapping[str, Any],
    group: GroupMetadata | None,
    where: str,
) -> RouteMetadata:
    _check_keys(definition, _ROUTE_KEYS, where)
    pattern = definition.get("pattern")
    if not isinstance(pattern, str):
        msg = f"{where}: route 'pattern' is required and must be a string"
        raise MappingError(msg)
    invokable = definition.get("invokable")
    if invokable is None or invokable == "":
        msg = f"{where}: route 'invokable' is required"
        raise MappingError(msg)
    priority = definition.get("priority", 0)
    if not isinstance(priority, int) or isinstance(priority, bool):
        msg = f"{where}: 'priority' must be an integer"
        raise MappingError(msg)
    xhr = definition.get("xml_http_request", definition.get("xmlHttpRequest", False))

    return RouteMetadata(
        pattern=pattern,
        invokable=invokable,
        methods=_methods(definition, where),
        name=_optional_str(definition, "name", where),
        parameters=_mapping(definition, "parameters", where),
        placeholders=_mapping(definition, "placeholders", where),
        transformer=definition.get("transformer"),
        xml_http_request=bool(xhr),
        priority=priority,
        middleware=_middleware(definition, where),
        group=group,
    )


def _build_group(
    definition: Mapping[str, Any],
    parent: GroupMetadata | None,
    where: str,
) -> GroupMetadata:
    _check_keys(definition, _GROUP_KEYS, where)
    return GroupMetadata(
        prefix=_optional_str(definition, "prefix", where),
        pattern=_optional_str(definition, "pattern", where),
        parameters=_mapping(definition, "parameters", where),
        placeholders=_mapping(definition, "placeholders", where),
        middleware=_middleware(definition, where),
        parent=parent,
    )


def _walk(
    definitions: list[tuple[str, Any]],
    parent: GroupMetadata | None,
    routes: list[RouteMetadata],
) -> None:
    for location, definition in definitions:
        if not isinstance(definition, dict):
            msg = f"{location}: definition must be a mapping, got {type(definition).__name__}"
            raise MappingError(msg)
        if "routes" in definition:
            group = _build_group(definition, parent, location)
            members = _members(definition["routes"], location)
            _walk(_located(members, f"{location}.routes"), group, routes)
        else:
            routes.append(_build_route(definition, parent, location))


def build_metadata(tree: Fragment) -> list[RouteMetadata]:
    """Build route metadata from a merged mapping tree.

    Routes come back ordered by descending ``priority``; equal priorities
    keep mapping order. Duplicate route names raise ``MappingError``.
    """
    routes: list[RouteMetadata] = []
    _walk(_top_level(tree), None, routes)

    seen: set[str] = set()
    for route in routes:
        name = route.full_name
        if name is None:
            continue
        if name in seen:
            msg = f"Duplicate route name: {name!r}"
            raise MappingError(msg)
        seen.add(name)

    return sorted(routes, key=lambda r: -r.priority)
