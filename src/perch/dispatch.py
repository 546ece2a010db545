"""Dispatcher — turns a matched route into a response.

Per request, in order:

1. XHR guard: a route flagged ``xml_http_request`` answers ``400`` unless
   the request carries ``X-Requested-With: XMLHttpRequest``.
2. Resolve the route's callable reference and its middleware.
3. Run the middleware chain, group middleware outermost, each calling
   ``next(request, response)`` to continue. At the end of the chain:
4. Transform arguments, when the route names a parameter transformer.
5. Invoke the callable through the invocation strategy.
6. Interpret the result:

   - ``ResponseType``   -> rendered by its registered handler
   - response object    -> pass through
   - ``str``            -> appended to the current body if writable
   - anything else      -> the current response, unchanged

Errors from steps 2-6 propagate to the host; nothing is retried.
"""

import logging
from collections.abc import Mapping
from typing import Any

from perch._internal.invoke import invoke
from perch.errors import ConfigurationError, InvalidResponseHandler, UnregisteredResponseType
from perch.http.response import Response
from perch.invocation import CallableResolver, RequestResponse
from perch.mapping.metadata import RouteMetadata, effective_parameters
from perch.protocols import (
    InvocationStrategy,
    Next,
    ParameterTransformer,
    RequestLike,
    ResponseLike,
    ServiceLocator,
)
from perch.responses.handlers import ResponseTypeHandler
from perch.responses.registry import ResponseHandlerRegistry
from perch.responses.types import ResponseType

logger = logging.getLogger("perch.dispatch")


class Dispatcher:
    """Runs route callables and renders what they return.

    Holds only read-only state after construction, so one instance
    serves concurrent requests.
    """

    __slots__ = (
        "_container",
        "_default_transformer",
        "_registry",
        "_resolver",
        "_strategy",
        "_xhr_header",
        "_xhr_value",
    )

    def __init__(
        self,
        registry: ResponseHandlerRegistry,
        *,
        container: ServiceLocator | None = None,
        resolver: CallableResolver | None = None,
        strategy: InvocationStrategy | None = None,
        default_transformer: Any = None,
        xhr_header: str = "X-Requested-With",
        xhr_value: str = "XMLHttpRequest",
    ) -> None:
        self._registry = registry
        self._container = container
        self._resolver = resolver or CallableResolver(container)
        self._strategy: InvocationStrategy = strategy or RequestResponse()
        self._default_transformer = default_transformer
        self._xhr_header = xhr_header
        self._xhr_value = xhr_value.lower()

    async def handle(
        self,
        callable_ref: Any,
        request: RequestLike,
        response: ResponseLike,
        metadata: RouteMetadata | None = None,
        arguments: Mapping[str, Any] | None = None,
    ) -> Any:
        """Dispatch one request to *callable_ref* and return the final response."""
        if metadata is not None and metadata.xml_http_request and not self.is_xhr(request):
            logger.warning(
                "Rejecting non-XHR request for %s",
                metadata.full_name or metadata.full_pattern,
            )
            return Response(status=400, protocol_version=response.protocol_version)

        func = self._resolver.resolve(callable_ref)
        middleware = self.resolve_middleware(metadata)
        raw_arguments = dict(arguments or {})

        async def endpoint(req: Any, resp: Any) -> Any:
            args = await self.transform_arguments(raw_arguments, metadata)
            result = await invoke(self._strategy, func, req, resp, args)
            return await self.interpret(result, resp)

        # Wrap route middleware around the endpoint, outermost first
        handler: Next = endpoint
        for mw in reversed(middleware):
            outer = handler

            async def make_next(req: Any, resp: Any, _mw: Any = mw, _next: Next = outer) -> Any:
                return await invoke(_mw, req, resp, _next)

            handler = make_next

        return await handler(request, response)

    def resolve_middleware(self, metadata: RouteMetadata | None) -> tuple[Any, ...]:
        """Resolve the route's middleware chain, outermost first."""
        if metadata is None:
            return ()
        return tuple(self._resolver.resolve(ref) for ref in metadata.all_middleware)

    def is_xhr(self, request: RequestLike) -> bool:
        return request.header_line(self._xhr_header).lower() == self._xhr_value

    async def transform_arguments(
        self,
        arguments: dict[str, Any],
        metadata: RouteMetadata | None,
    ) -> dict[str, Any]:
        """Run the route's transformer over *arguments*, if it has a usable one."""
        if metadata is None:
            return arguments
        transformer = metadata.transformer or self._default_transformer
        if transformer is None:
            return arguments
        if isinstance(transformer, str):
            transformer = self._service(transformer)
        if not isinstance(transformer, ParameterTransformer):
            logger.debug(
                "Transformer %s has no transform(); arguments unchanged",
                type(transformer).__name__,
            )
            return arguments
        return await invoke(transformer.transform, arguments, effective_parameters(metadata))

    async def interpret(self, result: Any, response: ResponseLike) -> Any:
        """Turn a callable's return value into the final response."""
        if isinstance(result, ResponseType):
            return await self.handle_response_type(result)
        if isinstance(result, ResponseLike):
            return result
        if isinstance(result, str):
            if response.body.writable:
                response.body.write(result)
            else:
                logger.debug("Body not writable; discarding %d chars", len(result))
        return response

    async def handle_response_type(self, response_type: ResponseType) -> Any:
        """Render *response_type* through its registered handler."""
        entry = self._registry.resolve(response_type)
        if entry is None:
            raise UnregisteredResponseType(type(response_type).__qualname__)

        handler = self._service(entry) if isinstance(entry, str) else entry
        if not isinstance(handler, ResponseTypeHandler):
            raise InvalidResponseHandler(
                ResponseTypeHandler.__qualname__,
                type(handler).__qualname__,
            )
        logger.debug("Rendering %s with %s", response_type.tag, type(handler).__name__)
        return await invoke(handler.handle, response_type)

    def _service(self, identifier: str) -> Any:
        if self._container is None:
            msg = f"Cannot resolve service {identifier!r}: no service container configured"
            raise ConfigurationError(msg)
        return self._container.get(identifier)
