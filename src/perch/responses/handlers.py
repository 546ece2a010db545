"""Response type handlers — render typed responses into wire responses.

A handler is any object with a ``handle(response_type)`` method. No base
class required; the dispatcher checks the shape at dispatch time.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from perch.errors import ConfigurationError
from perch.http.response import Response
from perch.responses.types import PayloadResponse, RedirectResponse, ResponseType, ViewResponse

if TYPE_CHECKING:
    from kida import Environment


@runtime_checkable
class ResponseTypeHandler(Protocol):
    """Builds a response from a typed response. May be ``async``."""

    def handle(self, response_type: Any) -> Any: ...


def _base_response(response_type: ResponseType) -> Response:
    base = response_type.response
    if isinstance(base, Response):
        return base.with_body("")
    if base is not None:
        return Response(protocol_version=getattr(base, "protocol_version", "1.1"))
    return Response()


def _expect(response_type: Any, expected: type[ResponseType], handler: object) -> None:
    if not isinstance(response_type, expected):
        msg = (
            f"{type(handler).__name__} handles {expected.__name__}, "
            f"got {type(response_type).__name__}"
        )
        raise ConfigurationError(msg)


class JsonResponseHandler:
    """``PayloadResponse`` -> ``application/json`` body."""

    __slots__ = ("_indent",)

    def __init__(self, *, pretty: bool = False) -> None:
        self._indent = 2 if pretty else None

    def handle(self, response_type: PayloadResponse) -> Response:
        _expect(response_type, PayloadResponse, self)
        body = json.dumps(response_type.payload, indent=self._indent, default=str)
        return (
            _base_response(response_type)
            .with_body(body)
            .with_status(response_type.status)
            .with_content_type("application/json; charset=utf-8")
        )


class RedirectResponseHandler:
    """``RedirectResponse`` -> empty body with a ``Location`` header."""

    def handle(self, response_type: RedirectResponse) -> Response:
        _expect(response_type, RedirectResponse, self)
        return (
            _base_response(response_type)
            .with_status(response_type.status)
            .with_header("Location", response_type.url)
        )


class ViewResponseHandler:
    """``ViewResponse`` -> template rendered through kida.

    Pass a ready kida ``Environment``, or a template directory to build
    one. Requires the ``views`` extra (``pip install perch-routing[views]``).
    """

    __slots__ = ("_env",)

    def __init__(
        self,
        env: Environment | None = None,
        *,
        template_dir: str | Path | None = None,
    ) -> None:
        if env is None:
            if template_dir is None:
                msg = "ViewResponseHandler needs a kida Environment or a template_dir."
                raise ConfigurationError(msg)
            from kida import Environment, FileSystemLoader

            env = Environment(loader=FileSystemLoader(str(template_dir)), autoescape=True)
        self._env = env

    def handle(self, response_type: ViewResponse) -> Response:
        _expect(response_type, ViewResponse, self)
        template = self._env.get_template(response_type.template)
        html = template.render(response_type.context)
        return (
            _base_response(response_type)
            .with_body(html)
            .with_status(response_type.status)
            .with_content_type("text/html; charset=utf-8")
        )
