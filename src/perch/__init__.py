"""Perch — metadata-driven route mapping.

Loads route definitions from JSON, YAML, Python modules or decorators,
merges them into one mapping tree, and dispatches requests to the mapped
callables, rendering typed responses through registered handlers.

Basic usage::

    from perch import MappingSource, Request, RoutingApp, RoutingConfig

    app = RoutingApp(RoutingConfig(sources=(MappingSource.yaml("routes"),)))
    response = await app.handle(Request.build("GET", "/users/42"))
"""

__version__ = "0.1.0.dev0"
__all__ = [
    "Container",
    "Dispatcher",
    "MappingFormat",
    "MappingSource",
    "PayloadResponse",
    "PerchError",
    "RedirectResponse",
    "Request",
    "Response",
    "ResponseType",
    "RoutingApp",
    "RoutingConfig",
    "ViewResponse",
    "group",
    "load_sources",
    "merge",
    "route",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import perch`` fast (no YAML import) while providing a clean
    top-level API.
    """
    if name == "RoutingApp":
        from perch.app import RoutingApp

        return RoutingApp

    if name == "RoutingConfig":
        from perch.config import RoutingConfig

        return RoutingConfig

    if name == "Container":
        from perch.container import Container

        return Container

    if name == "Dispatcher":
        from perch.dispatch import Dispatcher

        return Dispatcher

    if name in ("MappingFormat", "MappingSource"):
        from perch import sources as _sources

        return getattr(_sources, name)

    if name in ("Request", "Response"):
        from perch import http as _http

        return getattr(_http, name)

    if name in ("PayloadResponse", "RedirectResponse", "ResponseType", "ViewResponse"):
        from perch.responses import types as _types

        return getattr(_types, name)

    if name in ("group", "route"):
        from perch import annotations as _annotations

        return getattr(_annotations, name)

    if name == "load_sources":
        from perch.mapping.loading import load_sources

        return load_sources

    if name == "merge":
        from perch.mapping.merge import merge

        return merge

    if name == "PerchError":
        from perch.errors import PerchError

        return PerchError

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
