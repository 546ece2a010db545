"""Format-specific file loaders.

Each loader turns one file into a raw mapping fragment (a ``dict`` or a
``list``). Parse failures surface as :class:`MappingLoadError` naming the
file, with the original exception chained.

Free-threading safety:
    Loaders are stateless; one shared instance per format.
"""

import importlib.util
import json
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

import yaml

from perch._internal.types import Fragment
from perch.annotations import collect_definitions
from perch.errors import MappingLoadError
from perch.sources import MappingFormat


@runtime_checkable
class FileLoader(Protocol):
    """Loads one mapping file of a given format."""

    extensions: tuple[str, ...]

    def load_file(self, path: Path) -> Fragment: ...


def _check_fragment(path: Path, data: Any) -> Fragment:
    if data is None:
        return {}
    if not isinstance(data, dict | list):
        raise MappingLoadError(
            str(path), f"expected a mapping or a list at top level, got {type(data).__name__}"
        )
    return data


def _exec_module(path: Path) -> Any:
    """Import a Python file by location, outside ``sys.modules``."""
    module_name = f"_perch_mapping_{path.stem}_{id(path)}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise MappingLoadError(str(path), "not an importable Python file")
    module = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)
    except Exception as exc:
        raise MappingLoadError(str(path), f"{type(exc).__name__}: {exc}") from exc
    return module


class JsonLoader:
    extensions = (".json",)

    def load_file(self, path: Path) -> Fragment:
        try:
            text = path.read_text(encoding="utf-8")
            data = json.loads(text) if text.strip() else None
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise MappingLoadError(str(path), str(exc)) from exc
        return _check_fragment(path, data)


class YamlLoader:
    extensions = (".yml", ".yaml")

    def load_file(self, path: Path) -> Fragment:
        try:
            with path.open(encoding="utf-8") as fh:
                data = yaml.safe_load(fh)
        except (OSError, UnicodeDecodeError, yaml.YAMLError) as exc:
            raise MappingLoadError(str(path), str(exc)) from exc
        return _check_fragment(path, data)


class ArrayLoader:
    """Python modules exposing a module-level ``routes`` mapping or list."""

    extensions = (".py",)

    def load_file(self, path: Path) -> Fragment:
        module = _exec_module(path)
        if not hasattr(module, "routes"):
            raise MappingLoadError(str(path), "module does not define 'routes'")
        return _check_fragment(path, module.routes)


class AnnotationLoader:
    """Python modules whose functions and classes carry ``@route``/``@group``."""

    extensions = (".py",)

    def load_file(self, path: Path) -> Fragment:
        module = _exec_module(path)
        return collect_definitions(vars(module), module.__name__)


LOADERS: dict[MappingFormat, FileLoader] = {
    MappingFormat.JSON: JsonLoader(),
    MappingFormat.YAML: YamlLoader(),
    MappingFormat.ARRAY: ArrayLoader(),
    MappingFormat.ANNOTATION: AnnotationLoader(),
}


def get_loader(fmt: MappingFormat | str) -> FileLoader:
    """Return the shared loader for *fmt*."""
    return LOADERS[MappingFormat(fmt)]
