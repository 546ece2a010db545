"""Request headers, looked up case-insensitively.

Names are folded to lowercase once, at construction. Repeated headers
keep every value in arrival order; :meth:`Headers.line` joins them the
way a single header line would carry them, which is what the XHR guard
compares against.
"""

from collections.abc import Iterable, Iterator, Mapping
from typing import TypeAlias

HeaderPairs: TypeAlias = Mapping[str, str] | Iterable[tuple[str | bytes, str | bytes]]


def _text(value: str | bytes) -> str:
    return value.decode("latin-1") if isinstance(value, bytes) else value


class Headers(Mapping[str, tuple[str, ...]]):
    """Immutable lowercase-name -> values mapping.

    Accepts a plain dict, ``(name, value)`` string pairs, or the raw byte
    pairs of an ASGI scope::

        headers = Headers({"X-Requested-With": "XMLHttpRequest"})
        headers["x-requested-with"]  # ("XMLHttpRequest",)
        headers.line("X-Requested-With")  # "XMLHttpRequest"
    """

    __slots__ = ("_values",)

    def __init__(self, pairs: HeaderPairs = ()) -> None:
        items = pairs.items() if isinstance(pairs, Mapping) else pairs
        collected: dict[str, list[str]] = {}
        for name, value in items:
            collected.setdefault(_text(name).lower(), []).append(_text(value))
        self._values = {name: tuple(values) for name, values in collected.items()}

    def __getitem__(self, name: str) -> tuple[str, ...]:
        return self._values[name.lower()]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"Headers({self._values!r})"

    def first(self, name: str, default: str | None = None) -> str | None:
        """The first value of *name*, or *default* when absent."""
        values = self._values.get(name.lower())
        return values[0] if values else default

    def line(self, name: str) -> str:
        """All values of *name* joined by ``", "``; empty when absent."""
        return ", ".join(self._values.get(name.lower(), ()))
