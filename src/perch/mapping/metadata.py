"""Typed route and group metadata built from the merged mapping tree.

Immutable frozen dataclasses. A route points at its closest group,
and each group at its parent, so the chain is walked root-first when
patterns, names and parameters are combined.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from perch._internal.types import CallableRef


def join_patterns(*parts: str | None) -> str:
    """Join path patterns with single slashes: ``("/a/", "b")`` -> ``"/a/b"``."""
    segments = [p.strip("/") for p in parts if p and p.strip("/")]
    return "/" + "/".join(segments)


@dataclass(frozen=True, slots=True)
class GroupMetadata:
    """A route group: shared prefix, pattern, parameters and middleware.

    Attributes:
        prefix: Name prefix applied to member route names.
        pattern: Path pattern prepended to member route patterns.
        parameters: Parameter declarations inherited by member routes.
        placeholders: Placeholder constraints (name -> alias or regex).
        middleware: Middleware references, outermost first.
        parent: Enclosing group, or ``None`` for a root group.
    """

    prefix: str | None = None
    pattern: str | None = None
    parameters: Mapping[str, Any] = field(default_factory=dict)
    placeholders: Mapping[str, str] = field(default_factory=dict)
    middleware: tuple[Any, ...] = ()
    parent: GroupMetadata | None = None

    @property
    def group_chain(self) -> tuple[GroupMetadata, ...]:
        """This group and its ancestors, root first."""
        chain: list[GroupMetadata] = []
        node: GroupMetadata | None = self
        while node is not None:
            chain.append(node)
            node = node.parent
        return tuple(reversed(chain))


@dataclass(frozen=True, slots=True)
class RouteMetadata:
    """A single route definition.

    ``invokable`` is the raw callable reference; resolving it is the
    dispatcher's job. ``transformer`` is either a transformer object or
    a service key for the container.
    """

    pattern: str
    invokable: CallableRef
    methods: frozenset[str] = frozenset({"GET"})
    name: str | None = None
    parameters: Mapping[str, Any] = field(default_factory=dict)
    placeholders: Mapping[str, str] = field(default_factory=dict)
    transformer: Any = None
    xml_http_request: bool = False
    priority: int = 0
    middleware: tuple[Any, ...] = ()
    group: GroupMetadata | None = None

    @property
    def group_chain(self) -> tuple[GroupMetadata, ...]:
        """Enclosing groups, root first. Empty for an ungrouped route."""
        if self.group is None:
            return ()
        return self.group.group_chain

    @property
    def full_pattern(self) -> str:
        """The route pattern with every group pattern prepended."""
        return join_patterns(*(g.pattern for g in self.group_chain), self.pattern)

    @property
    def full_name(self) -> str | None:
        """The route name with group prefixes, joined by ``_``."""
        if not self.name:
            return None
        prefixes = [g.prefix for g in self.group_chain if g.prefix]
        return "_".join([*prefixes, self.name])

    @property
    def all_placeholders(self) -> dict[str, str]:
        """Placeholder constraints in scope, closest declaration wins."""
        merged: dict[str, str] = {}
        for group in self.group_chain:
            merged.update(group.placeholders)
        merged.update(self.placeholders)
        return merged

    @property
    def all_middleware(self) -> tuple[Any, ...]:
        """Group middleware root first, then the route's own."""
        collected: list[Any] = []
        for group in self.group_chain:
            collected.extend(group.middleware)
        collected.extend(self.middleware)
        return tuple(collected)


def effective_parameters(route: RouteMetadata) -> dict[str, Any]:
    """Merge parameter declarations from the group chain and the route.

    Root group first, each closer group overlaying it, the route's own
    declarations last. Empty and ``None`` declarations are dropped.
    """
    merged: dict[str, Any] = {}
    for group in route.group_chain:
        merged.update(group.parameters)
    merged.update(route.parameters)
    return {name: constraint for name, constraint in merged.items() if constraint}
