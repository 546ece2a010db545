"""Response handler registry — typed-response tag -> handler.

Mirrors the ``Router`` pattern: mutable while the app is configured,
frozen before the first request, read-only afterwards. Entries are
either handler objects or container identifiers; nothing is validated
here because identifiers may not be resolvable until dispatch.

Free-threading safety:
    - Registration happens during setup (single-threaded)
    - After ``freeze()`` the dict is never mutated
"""

from collections.abc import Iterator, Mapping
from typing import Any

from perch.responses.types import ResponseType


def type_tag(key: type[ResponseType] | ResponseType | str) -> str:
    """Normalize a typed-response class, instance or tag to its tag."""
    if isinstance(key, str):
        return key
    if isinstance(key, ResponseType) or (isinstance(key, type) and issubclass(key, ResponseType)):
        return key.tag
    msg = f"Expected a ResponseType subclass or tag, got {key!r}"
    raise TypeError(msg)


class ResponseHandlerRegistry:
    """Maps typed-response tags to handlers or handler service identifiers.

    The last registration for a tag wins.
    """

    __slots__ = ("_frozen", "_handlers")

    def __init__(self, handlers: Mapping[Any, Any] | None = None) -> None:
        self._handlers: dict[str, Any] = {}
        self._frozen = False
        for key, handler in (handlers or {}).items():
            self.register(key, handler)

    def register(self, key: type[ResponseType] | str, handler: Any) -> None:
        """Register *handler* (object or service identifier) for *key*."""
        if self._frozen:
            msg = "Cannot register response handlers after freeze."
            raise RuntimeError(msg)
        self._handlers[type_tag(key)] = handler

    def resolve(self, key: type[ResponseType] | ResponseType | str) -> Any | None:
        """Return the registered entry for *key*, or ``None``."""
        return self._handlers.get(type_tag(key))

    def freeze(self) -> None:
        """Make the registry read-only."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def __contains__(self, key: object) -> bool:
        try:
            return type_tag(key) in self._handlers  # type: ignore[arg-type]
        except TypeError:
            return False

    def __iter__(self) -> Iterator[str]:
        return iter(self._handlers)

    def __len__(self) -> int:
        return len(self._handlers)
