"""Routing configuration.

RoutingConfig is a frozen dataclass — immutable after creation, no
string-key dict lookups.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from perch.responses.handlers import JsonResponseHandler, RedirectResponseHandler
from perch.responses.types import PayloadResponse, RedirectResponse
from perch.sources import MappingSource


def default_response_handlers() -> dict[Any, Any]:
    """Handlers for the built-in typed responses that need no setup."""
    return {
        PayloadResponse: JsonResponseHandler(),
        RedirectResponse: RedirectResponseHandler(),
    }


@dataclass(frozen=True, slots=True)
class RoutingConfig:
    """Routing configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = RoutingConfig(
            sources=(MappingSource.yaml("routes"),),
            response_handlers={**default_response_handlers(), MyType: "my_handler"},
        )
    """

    # Where route definitions come from, merged in this order
    sources: tuple[MappingSource, ...] = ()

    # Typed response class or tag -> handler object or container identifier
    response_handlers: Mapping[Any, Any] = field(default_factory=default_response_handlers)

    # Extra placeholder aliases, e.g. {"slug": "[a-z0-9-]+"}
    placeholder_aliases: Mapping[str, str] = field(default_factory=dict)

    # Templates for ViewResponse (kida); None leaves ViewResponse unregistered
    template_dir: str | Path | None = None

    # XHR guard
    xhr_header: str = "X-Requested-With"
    xhr_value: str = "XMLHttpRequest"

    # Invocation strategy; None means RequestResponse
    invocation_strategy: Any = None

    # Transformer used by routes that don't name one; None disables
    parameter_transformer: Any = None
