"""Decorators that declare routes directly on handler code.

Modules under an ``annotation`` mapping source are imported at startup
and scanned for these markers::

    from perch.annotations import group, route

    @route("/health", name="health")
    def health(request, response, arguments):
        return "ok"

    @group(prefix="users", pattern="/users", parameters={"id": "int"})
    class UserController:
        @route("/{id}", name="show")
        def show(self, request, response, arguments):
            return PayloadResponse({"id": arguments["id"]})

Decorators only attach data; they never wrap the function.
"""

from collections.abc import Callable, Iterable, Mapping
from typing import Any

ROUTE_ATTR = "__perch_routes__"
GROUP_ATTR = "__perch_group__"


def route(
    pattern: str,
    *,
    methods: Iterable[str] = ("GET",),
    name: str | None = None,
    parameters: Mapping[str, Any] | None = None,
    placeholders: Mapping[str, str] | None = None,
    transformer: Any = None,
    xml_http_request: bool = False,
    priority: int = 0,
    middleware: Iterable[Any] = (),
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Mark a function or method as a route handler.

    Stacking several ``@route`` decorators maps one handler to several
    patterns.
    """
    definition: dict[str, Any] = {
        "pattern": pattern,
        "methods": [m.upper() for m in methods],
        "name": name,
        "parameters": dict(parameters or {}),
        "placeholders": dict(placeholders or {}),
        "transformer": transformer,
        "xml_http_request": xml_http_request,
        "priority": priority,
        "middleware": list(middleware),
    }

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        routes: list[dict[str, Any]] = func.__dict__.setdefault(ROUTE_ATTR, [])
        # Decorators apply bottom-up; keep source order
        routes.insert(0, definition)
        return func

    return decorator


def group(
    *,
    prefix: str | None = None,
    pattern: str | None = None,
    parameters: Mapping[str, Any] | None = None,
    placeholders: Mapping[str, str] | None = None,
    middleware: Iterable[Any] = (),
) -> Callable[[type], type]:
    """Mark a class as a route group; its ``@route`` methods become members."""
    definition: dict[str, Any] = {
        "prefix": prefix,
        "pattern": pattern,
        "parameters": dict(parameters or {}),
        "placeholders": dict(placeholders or {}),
        "middleware": list(middleware),
    }

    def decorator(cls: type) -> type:
        setattr(cls, GROUP_ATTR, definition)
        return cls

    return decorator


def collect_definitions(namespace: Mapping[str, Any], module_name: str) -> list[dict[str, Any]]:
    """Turn the decorated objects of a module namespace into mapping data.

    Functions become route definitions with the function itself as the
    invokable. Group classes become group definitions whose routes point
    at ``[cls, "method"]`` pairs.
    """
    definitions: list[dict[str, Any]] = []
    for obj in namespace.values():
        # Skip objects re-exported from other modules
        if getattr(obj, "__module__", None) != module_name:
            continue
        if isinstance(obj, type):
            group_def = obj.__dict__.get(GROUP_ATTR)
            if group_def is None:
                continue
            routes = [
                {**route_def, "invokable": [obj, attr]}
                for attr, member in vars(obj).items()
                for route_def in getattr(member, ROUTE_ATTR, ())
            ]
            definitions.append({**group_def, "routes": routes})
        elif callable(obj):
            definitions.extend(
                {**route_def, "invokable": obj} for route_def in getattr(obj, ROUTE_ATTR, ())
            )
    return definitions
