"""Collaborator protocols consumed by the dispatcher.

Structural protocols: the host framework's own request, response and
container objects work as long as they have the right shape. No base
class required.
"""

from collections.abc import Awaitable, Callable, Mapping
from typing import Any, Protocol, TypeAlias, runtime_checkable


class RequestLike(Protocol):
    """A request exposing a single header-line lookup."""

    def header_line(self, name: str) -> str: ...


class BodyLike(Protocol):
    @property
    def writable(self) -> bool: ...

    def write(self, data: str) -> int: ...


@runtime_checkable
class ResponseLike(Protocol):
    """A response with a protocol version and an appendable body."""

    @property
    def protocol_version(self) -> str: ...

    @property
    def body(self) -> BodyLike: ...


@runtime_checkable
class ServiceLocator(Protocol):
    """Lookup-by-identifier for lazily referenced handlers and transformers.

    ``get`` raises ``ServiceNotFound`` (or the host's own not-found error)
    for unknown identifiers.
    """

    def get(self, identifier: str) -> Any: ...

    def has(self, identifier: str) -> bool: ...


class InvocationStrategy(Protocol):
    """Calls a resolved route callable with request, response and arguments.

    May return an awaitable; the dispatcher awaits it.
    """

    def __call__(
        self,
        func: Any,
        request: Any,
        response: Any,
        arguments: Mapping[str, Any],
    ) -> Any: ...


@runtime_checkable
class ParameterTransformer(Protocol):
    """Turns raw route arguments into the values the callable receives.

    *parameters* maps argument names to their declared constraint.
    """

    def transform(
        self,
        arguments: Mapping[str, Any],
        parameters: Mapping[str, Any],
    ) -> dict[str, Any]: ...


# The rest of the chain after a route middleware
Next: TypeAlias = Callable[[Any, Any], Awaitable[Any]]


class RouteMiddleware(Protocol):
    """Middleware declared on a route or group.

    Accepts functions and callable objects, sync or async::

        async def timing(request, response, next):
            start = time.monotonic()
            response = await next(request, response)
            return response.with_header("X-Time", f"{time.monotonic() - start:.3f}")

    Group middleware wraps the route's own; the outermost group runs first.
    Returning without calling ``next`` short-circuits the route.
    """

    def __call__(self, request: Any, response: Any, next: Next) -> Any: ...
