"""Compiled router with trie-based path matching.

Route metadata is added after the mapping tree is built and compiled
into an immutable lookup structure when the app freezes.
"""

import re
from dataclasses import dataclass, field
from typing import Any

from perch.errors import ConfigurationError, MethodNotAllowed, NotFound
from perch.mapping.metadata import RouteMetadata
from perch.routing.params import PlaceholderAliases

_PLACEHOLDER_RE = re.compile(r"^\{(\w+)(?::(.+))?\}$")


@dataclass(frozen=True, slots=True)
class PathSegment:
    """A parsed segment of a route pattern.

    Static:  ``/users``     (is_param=False)
    Param:   ``/{id}``      (is_param=True, param_name="id")
    Aliased: ``/{id:int}``  (is_param=True, param_name="id", alias="int")
    """

    value: str
    is_param: bool = False
    param_name: str | None = None
    alias: str | None = None


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route match."""

    route: RouteMetadata
    arguments: dict[str, str] = field(default_factory=dict)


def parse_pattern(pattern: str) -> list[PathSegment]:
    """Parse a route pattern into segments.

    Examples::

        "/users"           -> [PathSegment("users")]
        "/users/{id}"      -> [PathSegment("users"), PathSegment("{id}", is_param=True, ...)]
        "/users/{id:int}"  -> [..., PathSegment("{id:int}", is_param=True, alias="int")]
    """
    segments: list[PathSegment] = []
    for part in pattern.strip("/").split("/"):
        if not part:
            continue
        if "<" in part and ">" in part:
            msg = (
                f"Route pattern {pattern!r} uses <param> syntax. "
                "Use {param} placeholders instead."
            )
            raise ConfigurationError(msg)
        match = _PLACEHOLDER_RE.match(part)
        if match:
            segments.append(
                PathSegment(
                    value=part,
                    is_param=True,
                    param_name=match.group(1),
                    alias=match.group(2),
                )
            )
        else:
            segments.append(PathSegment(value=part))
    return segments


class _TrieNode:
    """A node in the route trie. Mutable during compilation only."""

    __slots__ = ("catch_all", "children", "param_children", "routes_by_method")

    def __init__(self) -> None:
        # Static segment children: "users" -> node
        self.children: dict[str, _TrieNode] = {}
        # Parameter edges in registration order, one per distinct regex
        self.param_children: list[_ParamEdge] = []
        # Catch-all edge (path alias), consumes the rest of the path
        self.catch_all: _CatchAllEdge | None = None
        # Routes at this node, keyed by HTTP method
        self.routes_by_method: dict[str, RouteMetadata] = {}


@dataclass(slots=True)
class _ParamEdge:
    """A parameter edge in the trie."""

    param_name: str
    regex: re.Pattern[str]
    node: _TrieNode


@dataclass(slots=True)
class _CatchAllEdge:
    """A catch-all edge — consumes remaining path."""

    param_name: str
    route_by_method: dict[str, RouteMetadata]


class Router:
    """Compiled router with trie-based path matching.

    Usage::

        router = Router(PlaceholderAliases({"slug": "[a-z0-9-]+"}))
        for route in build_metadata(tree):
            router.add(route)
        router.compile()
        match = router.match("GET", "/users/42")

    When two routes claim the same path and method, the first one added
    wins; ``build_metadata`` orders routes by priority for that reason.
    """

    __slots__ = ("_aliases", "_compiled", "_named", "_root", "_routes")

    def __init__(self, aliases: PlaceholderAliases | None = None) -> None:
        self._aliases = aliases or PlaceholderAliases()
        self._root = _TrieNode()
        self._compiled = False
        self._routes: list[RouteMetadata] = []
        self._named: dict[str, RouteMetadata] = {}

    def add(self, route: RouteMetadata) -> None:
        """Add a route to the router. Must be called before compile()."""
        if self._compiled:
            msg = "Cannot add routes after compilation."
            raise RuntimeError(msg)

        self._routes.append(route)
        if route.full_name is not None:
            self._named.setdefault(route.full_name, route)

        constraints = route.all_placeholders
        node = self._root

        for seg in parse_pattern(route.full_pattern):
            if not seg.is_param:
                node = node.children.setdefault(seg.value, _TrieNode())
                continue

            name = seg.param_name or ""
            alias = seg.alias or constraints.get(name, "str")
            if alias == "path":
                # Catch-all: consumes rest of path, must be last segment
                if node.catch_all is None:
                    node.catch_all = _CatchAllEdge(param_name=name, route_by_method={})
                for method in route.methods:
                    node.catch_all.route_by_method.setdefault(method, route)
                return

            regex = self._aliases.compile(alias)
            edge = next(
                (
                    e
                    for e in node.param_children
                    if e.param_name == name and e.regex.pattern == regex.pattern
                ),
                None,
            )
            if edge is None:
                edge = _ParamEdge(param_name=name, regex=regex, node=_TrieNode())
                node.param_children.append(edge)
            node = edge.node

        for method in route.methods:
            node.routes_by_method.setdefault(method, route)

    @property
    def routes(self) -> list[RouteMetadata]:
        """Return all registered routes, in registration order."""
        return list(self._routes)

    def compile(self) -> None:
        """Freeze the router. No more routes can be added."""
        self._compiled = True

    def match(self, method: str, path: str) -> RouteMatch:
        """Match a request path and method against compiled routes.

        Returns a ``RouteMatch`` on success.
        Raises ``NotFound`` if no route matches the path.
        Raises ``MethodNotAllowed`` if the path matches but the method doesn't.
        """
        parts = [p for p in path.strip("/").split("/") if p]
        result = self._match_node(self._root, parts, 0, {})

        if result is None:
            raise NotFound(f"No route matches {method} {path!r}")

        node_routes, params = result
        if method in node_routes:
            return RouteMatch(route=node_routes[method], arguments=params)
        if method == "HEAD" and "GET" in node_routes:
            return RouteMatch(route=node_routes["GET"], arguments=params)

        raise MethodNotAllowed(frozenset(node_routes))

    def url_for(self, name: str, **params: Any) -> str:
        """Build the path of the route named *name*.

        Raises ``KeyError`` for an unknown route name or a missing
        placeholder value.
        """
        route = self._named.get(name)
        if route is None:
            msg = f"No route named {name!r}"
            raise KeyError(msg)

        parts: list[str] = []
        for seg in parse_pattern(route.full_pattern):
            if not seg.is_param:
                parts.append(seg.value)
                continue
            if seg.param_name not in params:
                msg = f"Route {name!r} requires a value for {seg.param_name!r}"
                raise KeyError(msg)
            parts.append(str(params[seg.param_name]))
        return "/" + "/".join(parts)

    def _match_node(
        self,
        node: _TrieNode,
        parts: list[str],
        index: int,
        params: dict[str, str],
    ) -> tuple[dict[str, RouteMetadata], dict[str, str]] | None:
        """Recursively match path parts against the trie."""
        # All parts consumed — return this node's routes
        if index == len(parts):
            if node.routes_by_method:
                return node.routes_by_method, params
            return None

        part = parts[index]

        # 1. Try static child first (exact match)
        if part in node.children:
            result = self._match_node(node.children[part], parts, index + 1, params)
            if result is not None:
                return result

        # 2. Try parameter children in registration order
        for edge in node.param_children:
            if edge.regex.match(part):
                new_params = {**params, edge.param_name: part}
                result = self._match_node(edge.node, parts, index + 1, new_params)
                if result is not None:
                    return result

        # 3. Try catch-all
        if node.catch_all is not None:
            remaining = "/".join(parts[index:])
            new_params = {**params, node.catch_all.param_name: remaining}
            return node.catch_all.route_by_method, new_params

        return None
