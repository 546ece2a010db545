"""Typed response values that route callables return.

A typed response says *what* to render, not how. The dispatcher looks
up the handler registered for the value's ``tag`` and lets it build the
wire response::

    def show(request, response, arguments):
        return PayloadResponse({"id": arguments["id"]}, response=response)

Subclasses get a tag of ``"module.QualName"`` unless they set one.
Tags are not inherited: a subclass needs its own handler registration.
"""

from dataclasses import dataclass, field
from typing import Any, ClassVar


@dataclass(frozen=True, slots=True)
class ResponseType:
    """Base for typed responses.

    ``response`` optionally carries the host response the handler should
    build on (protocol version, headers already set by middleware).
    """

    tag: ClassVar[str] = "response"

    response: Any = field(default=None, kw_only=True, compare=False)

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super(ResponseType, cls).__init_subclass__(**kwargs)
        if "tag" not in cls.__dict__:
            cls.tag = f"{cls.__module__}.{cls.__qualname__}"


@dataclass(frozen=True, slots=True)
class PayloadResponse(ResponseType):
    """Serialize *payload* (JSON by default)."""

    tag: ClassVar[str] = "payload"

    payload: Any = None
    status: int = 200


@dataclass(frozen=True, slots=True)
class ViewResponse(ResponseType):
    """Render template *template* with *context*."""

    tag: ClassVar[str] = "view"

    template: str = ""
    context: dict[str, Any] = field(default_factory=dict)
    status: int = 200


@dataclass(frozen=True, slots=True)
class RedirectResponse(ResponseType):
    """Redirect to *url*."""

    tag: ClassVar[str] = "redirect"

    url: str = "/"
    status: int = 302
