"""Typed responses and the handlers that render them."""

from perch.responses.handlers import (
    JsonResponseHandler,
    RedirectResponseHandler,
    ResponseTypeHandler,
    ViewResponseHandler,
)
from perch.responses.registry import ResponseHandlerRegistry
from perch.responses.types import PayloadResponse, RedirectResponse, ResponseType, ViewResponse

__all__ = [
    "JsonResponseHandler",
    "PayloadResponse",
    "RedirectResponse",
    "RedirectResponseHandler",
    "ResponseHandlerRegistry",
    "ResponseType",
    "ResponseTypeHandler",
    "ViewResponse",
    "ViewResponseHandler",
]
