"""Service container — the stock ``ServiceLocator``.

Holds ready instances or zero-argument factories keyed by identifier.
Factories run on first lookup and their result is kept::

    container = Container()
    container.set("json_handler", JsonResponseHandler())
    container.factory("users", lambda: UserController(db))
"""

import threading
from collections.abc import Callable
from typing import Any

from perch.errors import ServiceNotFound


class Container:
    """Identifier -> service lookup with lazy, thread-safe factories."""

    __slots__ = ("_factories", "_lock", "_services")

    def __init__(self, services: dict[str, Any] | None = None) -> None:
        self._services: dict[str, Any] = dict(services or {})
        self._factories: dict[str, Callable[[], Any]] = {}
        self._lock = threading.Lock()

    def set(self, identifier: str, service: Any) -> None:
        """Register a ready instance."""
        self._services[identifier] = service

    def factory(self, identifier: str, factory: Callable[[], Any]) -> None:
        """Register a factory called on first ``get()``."""
        self._factories[identifier] = factory

    def has(self, identifier: str) -> bool:
        return identifier in self._services or identifier in self._factories

    def get(self, identifier: str) -> Any:
        """Return the service for *identifier*.

        Raises ``ServiceNotFound`` if nothing is registered under it.
        """
        if identifier in self._services:
            return self._services[identifier]
        if identifier not in self._factories:
            raise ServiceNotFound(identifier)
        with self._lock:
            # Double-check: another thread may have built it meanwhile
            if identifier not in self._services:
                self._services[identifier] = self._factories[identifier]()
            return self._services[identifier]

    def __contains__(self, identifier: object) -> bool:
        return isinstance(identifier, str) and self.has(identifier)
