"""Resource bundle lookup.

A bundle is a directory named ``<name>.bundle`` that sits next to the module
defining its owner. Lookups never raise: a missing bundle is reported as
``None``.
"""

from __future__ import annotations

import inspect
import json
import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, TypeVar

from ruamel.yaml import YAML

from ..codable import JSONDecoder, decode
from ..utils.file_io import ResourceFormat, detect_format, read_text

__all__ = ["BUNDLE_SUFFIX", "Bundle", "locate_bundle", "resource_path"]

LOGGER = logging.getLogger(__name__)
T = TypeVar("T")

BUNDLE_SUFFIX = ".bundle"
_INFO_FILES: tuple[str, ...] = ("Info.json", "Info.yaml", "Info.yml")


def _yaml_parser() -> YAML:
    parser = YAML(typ="safe")
    parser.allow_duplicate_keys = False
    return parser


def resource_path(owner: Any) -> str | None:
    """Return the directory holding the module that defines ``owner``."""

    module = owner if inspect.ismodule(owner) else sys.modules.get(getattr(owner, "__module__", "") or "")
    if module is None:
        return None
    try:
        source = inspect.getfile(module)
    except TypeError:
        # Built-in modules have no file on disk.
        return None
    return os.path.dirname(os.path.abspath(source))


@dataclass(slots=True, frozen=True)
class Bundle:
    """Handle on a resource directory."""

    path: Path

    @classmethod
    def at(cls, path: Path | str) -> Bundle | None:
        """Return a bundle for ``path`` when it is an existing directory."""

        candidate = Path(path)
        if not candidate.is_dir():
            return None
        return cls(candidate)

    @property
    def name(self) -> str:
        name = self.path.name
        return name[: -len(BUNDLE_SUFFIX)] if name.endswith(BUNDLE_SUFFIX) else name

    def info(self) -> dict[str, Any]:
        """Return the bundle's ``Info`` metadata, or ``{}`` when it has none."""

        for filename in _INFO_FILES:
            candidate = self.path / filename
            if candidate.is_file():
                loaded = self._parse(candidate)
                return dict(loaded) if isinstance(loaded, dict) else {}
        return {}

    @property
    def identifier(self) -> str | None:
        value = self.info().get("identifier")
        return str(value) if value is not None else None

    def path_for_resource(
        self,
        name: str,
        extension: str | None = None,
        subdirectory: str | None = None,
    ) -> Path | None:
        filename = f"{name}.{extension.lstrip('.')}" if extension else name
        base = self.path / subdirectory if subdirectory else self.path
        candidate = base / filename
        return candidate if candidate.is_file() else None

    def paths_for_resources(self, extension: str, subdirectory: str | None = None) -> list[Path]:
        base = self.path / subdirectory if subdirectory else self.path
        if not base.is_dir():
            return []
        suffix = "." + extension.lstrip(".")
        return sorted(item for item in base.iterdir() if item.is_file() and item.suffix == suffix)

    def read_text(self, name: str, extension: str | None = None, subdirectory: str | None = None) -> str:
        target = self._require(name, extension, subdirectory)
        return read_text(target)

    def load_resource(self, name: str, extension: str | None = None, subdirectory: str | None = None) -> Any:
        """Read a resource and parse it as JSON or YAML when its format says so."""

        return self._parse(self._require(name, extension, subdirectory))

    def decode_resource(
        self,
        type_: type[T] | Any,
        name: str,
        extension: str = "json",
        *,
        subdirectory: str | None = None,
        decoder: JSONDecoder | None = None,
    ) -> T:
        """Decode a JSON resource into ``type_``."""

        target = self._require(name, extension, subdirectory)
        return decode(type_, target.read_bytes(), decoder)

    def _require(self, name: str, extension: str | None, subdirectory: str | None) -> Path:
        target = self.path_for_resource(name, extension, subdirectory)
        if target is None:
            filename = f"{name}.{extension.lstrip('.')}" if extension else name
            raise FileNotFoundError(f"Resource {filename!r} not found in bundle {self.path}")
        return target

    def _parse(self, target: Path) -> Any:
        text = read_text(target)
        fmt = detect_format(target, text)
        if fmt is ResourceFormat.JSON:
            return json.loads(text)
        if fmt is ResourceFormat.YAML:
            return _yaml_parser().load(text)
        return text


def locate_bundle(owner: Any, subdirectory: str | None = None) -> Bundle | None:
    """Find ``<resource dir of owner>/<subdirectory>.bundle``.

    ``subdirectory`` defaults to the owner's name. Returns ``None`` when the
    directory does not exist.
    """

    name = subdirectory if subdirectory is not None else getattr(owner, "__name__", str(owner))
    path = f"{resource_path(owner) or ''}/{name}{BUNDLE_SUFFIX}"
    bundle = Bundle.at(path)
    if bundle is None:
        LOGGER.debug("No resource bundle at %s", path)
    return bundle
