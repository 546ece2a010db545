"""HTTP response with chainable .with_*() transformation API.

Each transformation returns a new Response that shares the same body
stream. Status, headers and protocol version are immutable; the body is
a writable buffer unless created read-only, so route callables returning
plain strings can append to it.
"""

from __future__ import annotations

import io
from collections.abc import Mapping
from dataclasses import dataclass, field, replace


class Body:
    """A response body stream.

    ``write()`` appends; a read-only body raises ``OSError`` on write.
    """

    __slots__ = ("_buffer", "_writable")

    def __init__(self, content: str | bytes = b"", *, writable: bool = True) -> None:
        data = content.encode("utf-8") if isinstance(content, str) else content
        self._buffer = io.BytesIO()
        self._buffer.write(data)
        self._writable = writable

    @property
    def writable(self) -> bool:
        return self._writable

    def write(self, data: str | bytes) -> int:
        """Append *data*; returns the number of bytes written."""
        if not self._writable:
            msg = "Response body is not writable"
            raise OSError(msg)
        chunk = data.encode("utf-8") if isinstance(data, str) else data
        return self._buffer.write(chunk)

    def getvalue(self) -> bytes:
        return self._buffer.getvalue()

    def __len__(self) -> int:
        return len(self._buffer.getbuffer())

    def __repr__(self) -> str:
        return f"Body({len(self)} bytes, writable={self._writable})"


@dataclass(frozen=True, slots=True)
class Response:
    """An HTTP response built through immutable transformations.

    Construct, then chain ``.with_*()`` calls to set status, headers and
    protocol version. Each call returns a new ``Response``.
    """

    status: int = 200
    headers: tuple[tuple[str, str], ...] = ()
    body: Body = field(default_factory=Body, compare=False)
    content_type: str = "text/html; charset=utf-8"
    protocol_version: str = "1.1"

    @classmethod
    def of(cls, content: str | bytes = "", status: int = 200, **kwargs: object) -> Response:
        """Shorthand: a response with *content* already in the body."""
        return cls(status=status, body=Body(content), **kwargs)  # type: ignore[arg-type]

    # -- Chainable transformations --

    def with_status(self, status: int) -> Response:
        """Return a new Response with a different status code."""
        return replace(self, status=status)

    def with_header(self, name: str, value: str) -> Response:
        """Return a new Response with an additional header."""
        return replace(self, headers=(*self.headers, (name, value)))

    def with_headers(self, headers: Mapping[str, str]) -> Response:
        """Return a new Response with additional headers."""
        new = tuple(headers.items())
        return replace(self, headers=(*self.headers, *new))

    def with_content_type(self, content_type: str) -> Response:
        """Return a new Response with a different content type."""
        return replace(self, content_type=content_type)

    def with_protocol_version(self, version: str) -> Response:
        """Return a new Response speaking a different HTTP version."""
        return replace(self, protocol_version=version)

    def with_body(self, content: str | bytes) -> Response:
        """Return a new Response with a fresh body holding *content*."""
        return replace(self, body=Body(content))

    # -- Accessors --

    def header(self, name: str, default: str | None = None) -> str | None:
        """Return the first value of header *name* (case-insensitive)."""
        name_lower = name.lower()
        for key, value in self.headers:
            if key.lower() == name_lower:
                return value
        return default

    @property
    def text(self) -> str:
        """The body decoded as UTF-8."""
        return self.body.getvalue().decode("utf-8")
