"""Multi-source mapping loader.

Walks every configured source path, loads each matching file through
its format loader, and folds all fragments into one merged mapping tree.
Runs once at startup; any failure aborts the whole load and no partial
tree is returned.
"""

import logging
from collections.abc import Iterable, Iterator, Mapping
from pathlib import Path

from perch._internal.types import Fragment
from perch.errors import PathNotFound
from perch.mapping.loaders import FileLoader, get_loader
from perch.mapping.merge import merge_all
from perch.sources import MappingFormat, MappingSource

logger = logging.getLogger("perch.loader")


def _matches(path: Path, extensions: tuple[str, ...]) -> bool:
    return path.suffix.lower() in extensions


def iter_mapping_files(directory: Path, extensions: tuple[str, ...]) -> Iterator[Path]:
    """Yield files under *directory* whose suffix matches, at any depth.

    Files at each level come first (sorted), then subdirectories (sorted).
    Hidden directories and ``__pycache__`` are skipped.
    """
    entries = sorted(directory.iterdir())
    for item in entries:
        if item.is_file() and _matches(item, extensions):
            yield item
    for item in entries:
        if not item.is_dir():
            continue
        if item.name.startswith(".") or item.name == "__pycache__":
            logger.debug("Skipping directory %s", item)
            continue
        yield from iter_mapping_files(item, extensions)


def load_fragments(
    source: MappingSource,
    loader: FileLoader | None = None,
) -> list[Fragment]:
    """Load every file of one source, in path order.

    Raises ``PathNotFound`` when a path is neither a file nor a directory,
    and ``MappingLoadError`` when a file fails to parse.
    """
    loader = loader or get_loader(source.format)
    fragments: list[Fragment] = []
    for raw_path in source.paths:
        path = Path(raw_path)
        if path.is_dir():
            files = list(iter_mapping_files(path, loader.extensions))
        elif path.is_file():
            files = [path]
        else:
            raise PathNotFound(raw_path)

        for file in files:
            logger.debug("Loading %s mapping file %s", source.format, file)
            fragments.append(loader.load_file(file))
    return fragments


def load_sources(
    sources: Iterable[MappingSource],
    loaders: Mapping[MappingFormat, FileLoader] | None = None,
) -> Fragment:
    """Load and merge all *sources* into one mapping tree.

    Fragments are merged left to right across sources and paths in
    configured order. No sources gives an empty tree.
    """
    loaders = loaders or {}
    fragments: list[Fragment] = []
    for source in sources:
        fragments.extend(load_fragments(source, loaders.get(source.format)))

    tree = merge_all(fragments)
    logger.info("Loaded %d mapping fragment(s)", len(fragments))
    return tree
