"""Placeholder aliases for route patterns.

A pattern segment like ``{id:int}`` names a placeholder and an alias;
the alias expands to a regex. Unknown aliases are used as raw regexes,
so ``{slug:[a-z-]+}`` also works.
"""

import re
from collections.abc import Mapping
from types import MappingProxyType

# Built-in aliases -> regex
DEFAULT_ALIASES: Mapping[str, str] = MappingProxyType({
    "str": r"[^/]+",
    "any": r"[^/]+",
    "int": r"\d+",
    "float": r"\d+(?:\.\d+)?",
    "alpha": r"[A-Za-z]+",
    "alnum": r"[A-Za-z0-9]+",
    "uuid": r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}",
    "path": r".+",
})


class PlaceholderAliases:
    """Alias table: built-in aliases overlaid by configured ones."""

    __slots__ = ("_aliases",)

    def __init__(self, aliases: Mapping[str, str] | None = None) -> None:
        self._aliases: dict[str, str] = {**DEFAULT_ALIASES, **(aliases or {})}

    def regex(self, alias: str) -> str:
        """Expand *alias*; unknown aliases are taken as raw regexes."""
        return self._aliases.get(alias, alias)

    def compile(self, alias: str) -> re.Pattern[str]:
        return re.compile(f"^(?:{self.regex(alias)})$")

    def __contains__(self, alias: object) -> bool:
        return alias in self._aliases
