"""Immutable HTTP request metadata.

Only what routing needs: method, path, headers and protocol version.
Body handling stays with the host framework.
"""

from __future__ import annotations

from collections.abc import MutableMapping
from dataclasses import dataclass, field
from typing import Any

from perch.http.headers import HeaderPairs, Headers


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request."""

    method: str
    path: str
    headers: Headers = field(default_factory=Headers)
    http_version: str = "1.1"
    query_string: str = ""

    @classmethod
    def build(
        cls,
        method: str,
        path: str,
        headers: HeaderPairs = (),
        *,
        http_version: str = "1.1",
    ) -> Request:
        """Build a request from plain strings; a query string is split off *path*."""
        path, _, query = path.partition("?")
        return cls(
            method=method.upper(),
            path=path or "/",
            headers=Headers(headers),
            http_version=http_version,
            query_string=query,
        )

    @classmethod
    def from_scope(cls, scope: MutableMapping[str, Any]) -> Request:
        """Build a request from an ASGI HTTP scope, for ASGI hosts."""
        return cls(
            method=scope["method"],
            path=scope["path"],
            headers=Headers(scope.get("headers", ())),
            http_version=scope.get("http_version", "1.1"),
            query_string=scope.get("query_string", b"").decode("latin-1"),
        )

    def header_line(self, name: str) -> str:
        """All values of header *name* joined by ``", "``; empty if absent."""
        return self.headers.line(name)
