"""Package manifest loaded from a YAML file.

Example:

    package:
      name: demo
      version: "1.0"
      arch: amd64
      maintainer: Jane Doe <jane@example.org>
      depends: [libc6]
      description: |
        Demo tool
        Longer text shown by package managers.
    files:
      - src: build/demo
        dst: ./usr/bin/demo
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from debpack.core.errors import InvalidEntryError, ManifestError
from debpack.deb.types import FileEntry, PackageInfo

_STRING_FIELDS = (
    "name",
    "version",
    "section",
    "priority",
    "architecture",
    "maintainer",
    "vendor",
    "homepage",
    "description",
    "replaces",
    "provides",
)
_LIST_FIELDS = ("depends", "conflicts")
_ALIASES = {"arch": "architecture"}


@dataclass(frozen=True)
class Manifest:
    path: Path
    info: PackageInfo
    files: tuple[FileEntry, ...]

    def default_filename(self) -> str:
        arch = self.info.architecture or "all"
        return f"{self.info.name}_{self.info.version}_{arch}.deb"


def load_manifest(path: Path) -> Manifest:
    """Load and structurally validate a package manifest.

    Relative source paths are resolved against the manifest's directory.

    Raises:
        ManifestError: missing file, bad YAML, or malformed fields
    """
    if not path.exists():
        raise ManifestError(f"Manifest not found: {path}")

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ManifestError(f"Failed to load manifest from {path}: {e}") from e

    if not isinstance(data, dict):
        raise ManifestError(f"Manifest {path} must be a mapping")

    info = _parse_package(path, data.get("package"))
    files = _parse_files(path, data.get("files"))
    return Manifest(path=path, info=info, files=files)


def _parse_package(path: Path, raw: Any) -> PackageInfo:
    if not isinstance(raw, dict):
        raise ManifestError(f"{path}: 'package' must be a mapping")

    values: dict[str, Any] = {}
    for key, value in raw.items():
        field = _ALIASES.get(key, key)
        if field in _STRING_FIELDS:
            if not isinstance(value, str):
                raise ManifestError(
                    f"{path}: package.{key} must be a string, got {type(value).__name__}",
                    'Quote numeric values, e.g. version: "1.10"',
                )
            values[field] = value
        elif field in _LIST_FIELDS:
            values[field] = _as_str_tuple(path, key, value)
        else:
            raise ManifestError(f"{path}: unknown package field '{key}'")

    for required in ("name", "version"):
        if not values.get(required):
            raise ManifestError(f"{path}: package.{required} is required")

    return PackageInfo(**values)


def _as_str_tuple(path: Path, key: str, value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    if isinstance(value, list) and all(isinstance(v, str) for v in value):
        return tuple(value)
    raise ManifestError(f"{path}: package.{key} must be a string or a list of strings")


def _parse_files(path: Path, raw: Any) -> tuple[FileEntry, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, list):
        raise ManifestError(f"{path}: 'files' must be a list")

    base = path.parent
    entries: list[FileEntry] = []
    for i, item in enumerate(raw):
        if not isinstance(item, dict) or not isinstance(item.get("src"), str) or not isinstance(
            item.get("dst"), str
        ):
            raise ManifestError(f"{path}: files[{i}] must have string 'src' and 'dst'")
        src = Path(item["src"]).expanduser()
        if not src.is_absolute():
            src = base / src
        try:
            entries.append(FileEntry(src=src, dst=item["dst"]))
        except InvalidEntryError as e:
            raise ManifestError(f"{path}: files[{i}]: {e.message}", e.suggestion) from e
    return tuple(entries)
