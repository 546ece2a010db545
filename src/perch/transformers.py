"""Parameter transformers — typed route arguments.

A route (or any of its groups) may declare ``parameters``, mapping an
argument name to a constraint. When the route also names a transformer,
the dispatcher hands it the raw path arguments and the merged
declarations before invoking the route callable.

``TypeTransformer`` is the stock implementation::

    parameters: {id: int, ratio: float, draft: bool}
"""

from collections.abc import Callable, Mapping
from typing import Any

from perch.errors import NotFound

_TRUE = frozenset({"1", "true", "yes", "on"})
_FALSE = frozenset({"0", "false", "no", "off", ""})


def _to_bool(value: str) -> bool:
    lowered = value.lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    msg = f"invalid boolean {value!r}"
    raise ValueError(msg)


# Constraint name -> converter
CONVERTERS: dict[str, Callable[[str], Any]] = {
    "str": str,
    "string": str,
    "int": int,
    "integer": int,
    "float": float,
    "bool": _to_bool,
    "boolean": _to_bool,
}


class TypeTransformer:
    """Convert declared arguments by constraint name or converter callable.

    Undeclared arguments and unknown constraint names pass through
    untouched. A value that fails conversion raises ``NotFound``: the
    URL named something that cannot exist.
    """

    __slots__ = ("_converters",)

    def __init__(self, converters: Mapping[str, Callable[[str], Any]] | None = None) -> None:
        self._converters = {**CONVERTERS, **(converters or {})}

    def transform(
        self,
        arguments: Mapping[str, Any],
        parameters: Mapping[str, Any],
    ) -> dict[str, Any]:
        transformed = dict(arguments)
        for name, constraint in parameters.items():
            if name not in transformed:
                continue
            converter = constraint if callable(constraint) else self._converters.get(constraint)
            if converter is None:
                continue
            try:
                transformed[name] = converter(transformed[name])
            except (TypeError, ValueError) as exc:
                msg = f"Invalid value for {name!r}: {exc}"
                raise NotFound(msg) from exc
        return transformed
