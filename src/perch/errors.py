"""Perch exception hierarchy.

Shared across the loader, the metadata builder, the router and the
dispatcher so every module raises and catches the same types.

Startup errors (``PathNotFound``, ``MappingLoadError``, ``MappingError``)
abort initialization. Request-time errors propagate to the host.
"""

from dataclasses import dataclass


class PerchError(Exception):
    """Base for all perch-specific errors."""


class ConfigurationError(PerchError):
    """Raised when routing configuration is invalid.

    Typically surfaces during ``RoutingApp._freeze()`` at startup, or at
    dispatch time when a lazily-resolved collaborator turns out unusable.
    """


class MappingError(ConfigurationError):
    """A route or group definition in the mapping tree is malformed."""


class PathNotFound(ConfigurationError):  # noqa: N818 — mirrors NotFound naming
    """A mapping source path is neither a file nor a directory."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Path {path!r} does not exist")


class MappingLoadError(ConfigurationError):
    """A mapping file could not be read or parsed.

    The underlying exception is chained as ``__cause__``.
    """

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot load mapping file {path!r}: {reason}")


class InvalidResponseHandler(ConfigurationError):
    """A registered response handler does not expose ``handle()``."""

    def __init__(self, expected: str, actual: str) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"Response handler should implement {expected}, {actual!r} given")


class UnregisteredResponseType(PerchError):  # noqa: N818
    """A handler returned a typed response nobody registered a handler for."""

    def __init__(self, type_name: str) -> None:
        self.type_name = type_name
        super().__init__(f"No handler registered for response type {type_name!r}")


class ResolutionError(PerchError):
    """A route callable reference could not be resolved to a callable."""


class ServiceNotFound(PerchError, LookupError):  # noqa: N818
    """The service locator has no entry for the requested identifier."""

    def __init__(self, identifier: str) -> None:
        self.identifier = identifier
        super().__init__(f"Service {identifier!r} is not registered")


@dataclass(frozen=True, slots=True)
class HTTPError(PerchError):
    """An error that maps directly to an HTTP status code.

    Raised by the router and by parameter transformers. ``RoutingApp``
    catches these and turns them into plain responses.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """404 — no route matched the request path."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class MethodNotAllowed(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """405 — route exists but not for this HTTP method.

    Includes an ``Allow`` header listing the valid methods.
    """

    def __init__(self, allowed: frozenset[str], detail: str = "") -> None:
        allow_value = ", ".join(sorted(allowed))
        default_detail = f"Method not allowed. Allowed methods: {allow_value}"
        super().__init__(
            status=405,
            detail=detail or default_detail,
            headers=(("Allow", allow_value),),
        )
