"""Routing application facade.

Mutable during setup (extra routes, response handlers). Frozen on the
first request or an explicit ``freeze()``: sources are loaded, metadata
built, the router compiled and the handler registry locked.
"""

import logging
import threading
from typing import Any

from perch.config import RoutingConfig
from perch.dispatch import Dispatcher
from perch.errors import HTTPError
from perch.http.response import Body, Response
from perch.invocation import CallableResolver
from perch.mapping.builder import build_metadata
from perch.mapping.loading import load_sources
from perch.mapping.metadata import RouteMetadata
from perch.protocols import RequestLike, ServiceLocator
from perch.responses.handlers import ViewResponseHandler
from perch.responses.registry import ResponseHandlerRegistry
from perch.responses.types import ResponseType, ViewResponse
from perch.routing.params import PlaceholderAliases
from perch.routing.router import Router

logger = logging.getLogger("perch.app")


def error_response(exc: HTTPError, protocol_version: str = "1.1") -> Response:
    """Plain-text response for an ``HTTPError``."""
    return Response(
        status=exc.status,
        headers=exc.headers,
        body=Body(exc.detail),
        content_type="text/plain; charset=utf-8",
        protocol_version=protocol_version,
    )


class RoutingApp:
    """Loads mapped routes and dispatches requests to them.

    Usage::

        app = RoutingApp(RoutingConfig(sources=(MappingSource.yaml("routes"),)))
        app.freeze()  # optional: surface mapping errors at startup
        response = await app.handle(Request.build("GET", "/users/42"))

    Thread safety:
        The freeze transition uses a Lock + double-check so exactly one
        thread loads and compiles, even if several requests arrive first.
    """

    __slots__ = (
        "_container",
        "_dispatcher",
        "_freeze_lock",
        "_frozen",
        "_pending_routes",
        "_registry",
        "_resolver",
        "_router",
        "config",
    )

    def __init__(
        self,
        config: RoutingConfig | None = None,
        *,
        container: ServiceLocator | None = None,
        resolver: CallableResolver | None = None,
    ) -> None:
        self.config: RoutingConfig = config or RoutingConfig()
        self._container = container
        self._resolver = resolver
        self._registry = ResponseHandlerRegistry(self.config.response_handlers)
        if self.config.template_dir is not None and ViewResponse not in self._registry:
            self._registry.register(
                ViewResponse, ViewResponseHandler(template_dir=self.config.template_dir)
            )
        self._pending_routes: list[RouteMetadata] = []
        self._frozen = False
        self._freeze_lock = threading.Lock()

        # Compiled state — set during _freeze()
        self._router: Router | None = None
        self._dispatcher: Dispatcher | None = None

    # -- Setup --

    def add_route(self, route: RouteMetadata) -> None:
        """Register a route in addition to the configured sources."""
        self._check_not_frozen()
        self._pending_routes.append(route)

    def register_response_handler(self, key: type[ResponseType] | str, handler: Any) -> None:
        """Register a handler object or container identifier for a typed response."""
        self._check_not_frozen()
        self._registry.register(key, handler)

    # -- Runtime --

    @property
    def router(self) -> Router:
        self._ensure_frozen()
        assert self._router is not None
        return self._router

    @property
    def routes(self) -> list[RouteMetadata]:
        """All compiled routes, in matching priority order."""
        return self.router.routes

    def url_for(self, name: str, **params: Any) -> str:
        return self.router.url_for(name, **params)

    async def handle(self, request: RequestLike, response: Any = None) -> Any:
        """Match *request* and dispatch it; HTTP errors become responses."""
        self._ensure_frozen()
        assert self._router is not None
        assert self._dispatcher is not None

        method = getattr(request, "method", "GET")
        path = getattr(request, "path", "/")
        version = getattr(request, "http_version", "1.1")
        if response is None:
            response = Response(protocol_version=version)

        try:
            match = self._router.match(method, path)
            return await self._dispatcher.handle(
                match.route.invokable,
                request,
                response,
                match.route,
                match.arguments,
            )
        except HTTPError as exc:
            logger.debug("%d %s %s — %s", exc.status, method, path, exc.detail)
            return error_response(exc, version)

    def freeze(self) -> None:
        """Load, build and compile now instead of on the first request."""
        self._ensure_frozen()

    # -- Internal --

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = "Cannot modify the routing app after it has been frozen."
            raise RuntimeError(msg)

    def _ensure_frozen(self) -> None:
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._freeze()

    def _freeze(self) -> None:
        """Compile the app into its frozen runtime state.

        MUST only be called while holding _freeze_lock.
        """
        tree = load_sources(self.config.sources)
        routes = sorted(
            [*build_metadata(tree), *self._pending_routes],
            key=lambda r: -r.priority,
        )

        router = Router(PlaceholderAliases(self.config.placeholder_aliases))
        for route in routes:
            router.add(route)
        router.compile()

        self._registry.freeze()
        self._router = router
        self._dispatcher = Dispatcher(
            self._registry,
            container=self._container,
            resolver=self._resolver,
            strategy=self.config.invocation_strategy,
            default_transformer=self.config.parameter_transformer,
            xhr_header=self.config.xhr_header,
            xhr_value=self.config.xhr_value,
        )
        self._frozen = True
        logger.info("Compiled %d route(s) from %d source(s)", len(routes), len(self.config.sources))
