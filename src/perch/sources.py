"""Mapping sources — where route definitions come from.

A *mapping source* is an ordered set of filesystem paths plus the format
the files are written in. Sources are configured once and handed to
:func:`perch.mapping.loading.load_sources` at startup::

    sources = (
        MappingSource.yaml("config/routes"),
        MappingSource.annotation("app/controllers"),
    )
"""

from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path


class MappingFormat(StrEnum):
    """File formats a mapping source can be written in."""

    ANNOTATION = "annotation"
    JSON = "json"
    YAML = "yaml"
    ARRAY = "array"


@dataclass(frozen=True, slots=True)
class MappingSource:
    """A configured batch of route definitions. Immutable after creation.

    Paths may be files or directories; directories are walked
    recursively for files matching the format's extensions.
    """

    paths: tuple[str, ...]
    format: MappingFormat

    def __init__(self, paths: str | Path | tuple[str | Path, ...] | list[str | Path],
                 format: MappingFormat | str) -> None:
        if isinstance(paths, str | Path):
            paths = (paths,)
        object.__setattr__(self, "paths", tuple(str(p) for p in paths))
        object.__setattr__(self, "format", MappingFormat(format))

    @classmethod
    def json(cls, *paths: str | Path) -> "MappingSource":
        return cls(paths, MappingFormat.JSON)

    @classmethod
    def yaml(cls, *paths: str | Path) -> "MappingSource":
        return cls(paths, MappingFormat.YAML)

    @classmethod
    def array(cls, *paths: str | Path) -> "MappingSource":
        return cls(paths, MappingFormat.ARRAY)

    @classmethod
    def annotation(cls, *paths: str | Path) -> "MappingSource":
        return cls(paths, MappingFormat.ANNOTATION)
