"""Callable resolution and invocation strategies.

``CallableResolver`` turns the raw ``invokable`` of a route into a
callable. Accepted references:

- a callable, returned as-is
- ``"service:method"`` where *service* is a container identifier
- ``"package.module:attr"`` or ``"package.module:Class.method"``
- ``"service"`` naming a callable container entry
- ``(target, "method")`` where *target* is an object, a class, or a
  string resolved as above

Classes reached on the way to a method are instantiated without
arguments unless the container provides them.
"""

import importlib
import inspect
from collections.abc import Mapping
from typing import Any

from perch.errors import ResolutionError
from perch.protocols import ServiceLocator


def _defines_call(cls: type) -> bool:
    return any("__call__" in vars(klass) for klass in cls.__mro__[:-1])


class CallableResolver:
    """Resolves route callable references, consulting a container first."""

    __slots__ = ("_container",)

    def __init__(self, container: ServiceLocator | None = None) -> None:
        self._container = container

    def resolve(self, ref: Any) -> Any:
        """Return a callable for *ref*; raise ``ResolutionError`` otherwise."""
        if isinstance(ref, list | tuple):
            if len(ref) != 2 or not isinstance(ref[1], str):
                msg = f"Callable pair must be (target, 'method'), got {ref!r}"
                raise ResolutionError(msg)
            target, method = ref
            if isinstance(target, str):
                target = self._lookup(target)
            return self._checked(getattr(self._instance(target), method, None), ref)

        if isinstance(ref, str):
            return self._checked(self._resolve_string(ref), ref)

        return self._checked(ref, ref)

    def _resolve_string(self, ref: str) -> Any:
        service, sep, attr = ref.partition(":")
        if not sep:
            return self._instance(self._lookup(ref))
        if self._container is not None and self._container.has(service):
            return getattr(self._container.get(service), attr, None)

        obj: Any = self._lookup(service)
        for part in attr.split("."):
            obj = getattr(self._instance(obj), part, None)
            if obj is None:
                return None
        if inspect.isclass(obj) and _defines_call(obj):
            return self._instance(obj)
        return obj

    def _lookup(self, identifier: str) -> Any:
        if self._container is not None and self._container.has(identifier):
            return self._container.get(identifier)
        module_path, sep, attr = identifier.partition(":")
        try:
            module = importlib.import_module(module_path)
        except ImportError as exc:
            msg = f"Cannot resolve {identifier!r}: {exc}"
            raise ResolutionError(msg) from exc
        if not sep:
            return module
        obj: Any = module
        for part in attr.split("."):
            obj = getattr(obj, part, None)
            if obj is None:
                msg = f"Cannot resolve {identifier!r}: no attribute {part!r}"
                raise ResolutionError(msg)
        return obj

    def _instance(self, target: Any) -> Any:
        if inspect.isclass(target):
            try:
                return target()
            except TypeError as exc:
                msg = f"Cannot instantiate {target.__qualname__}: {exc}"
                raise ResolutionError(msg) from exc
        return target

    @staticmethod
    def _checked(func: Any, ref: Any) -> Any:
        if func is None or not callable(func) or inspect.ismodule(func):
            msg = f"{ref!r} is not resolvable to a callable"
            raise ResolutionError(msg)
        return func


class RequestResponse:
    """Default strategy: ``func(request, response, arguments)``."""

    def __call__(
        self,
        func: Any,
        request: Any,
        response: Any,
        arguments: Mapping[str, Any],
    ) -> Any:
        return func(request, response, dict(arguments))


class RequestResponseArgs:
    """Arguments spread as keywords: ``func(request, response, **arguments)``."""

    def __call__(
        self,
        func: Any,
        request: Any,
        response: Any,
        arguments: Mapping[str, Any],
    ) -> Any:
        return func(request, response, **arguments)
