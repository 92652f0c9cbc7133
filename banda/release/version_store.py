"""Version identifier stored in the repository's manifest.

Two manifest layouts are recognized, checked in this order:

1. package.json with a top-level `"version": "#.#.#"` field
2. version.properties with a `VERSION=#.#.#` line

Writes replace the first textual occurrence of the old value in the
recognized format and leave the rest of the file byte-for-byte intact.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from banda.core.result import Err, Ok, Result
from banda.core.structured import as_str_dict, get_str
from banda.platform.files import atomic_write_text
from banda.release.errors import VersionNotFound, VersionWriteFailed
from banda.release.semver import is_valid_version

__all__ = [
    "FileVersionStore",
    "JSON_MANIFEST",
    "PROPERTIES_MANIFEST",
    "VersionStore",
]

JSON_MANIFEST = "package.json"
PROPERTIES_MANIFEST = "version.properties"

_PROPERTIES_RE = re.compile(r"^VERSION=(\d+\.\d+\.\d+)\s*$", re.MULTILINE)


class VersionStore(Protocol):
    def read_version(self) -> Result[str, VersionNotFound]: ...

    def write_version(
        self, old: str, new: str
    ) -> Result[None, VersionNotFound | VersionWriteFailed]: ...


@dataclass(frozen=True, slots=True)
class _Manifest:
    path: Path
    version: str


class FileVersionStore:
    """Version store over the manifests in a working directory."""

    def __init__(self, root: Path) -> None:
        self.root = root

    def read_version(self) -> Result[str, VersionNotFound]:
        manifest = self._locate()
        if manifest is None:
            return Err(VersionNotFound(directory=str(self.root)))
        return Ok(manifest.version)

    def write_version(
        self, old: str, new: str
    ) -> Result[None, VersionNotFound | VersionWriteFailed]:
        manifest = self._locate()
        if manifest is None:
            return Err(VersionNotFound(directory=str(self.root)))

        try:
            text = manifest.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            return Err(VersionWriteFailed(path=str(manifest.path), detail=str(e)))
        if manifest.path.name == JSON_MANIFEST:
            pattern = re.compile(r'("version"\s*:\s*")' + re.escape(old) + '"')
            replacement = rf"\g<1>{new}" + '"'
        else:
            pattern = re.compile(r"^VERSION=" + re.escape(old) + r"(\s*)$", re.MULTILINE)
            replacement = rf"VERSION={new}\g<1>"

        updated, count = pattern.subn(replacement, text, count=1)
        if count == 0:
            return Err(VersionNotFound(directory=str(self.root)))

        try:
            atomic_write_text(manifest.path, updated, encoding="utf-8")
        except OSError as e:
            return Err(VersionWriteFailed(path=str(manifest.path), detail=str(e)))
        return Ok(None)

    def _locate(self) -> _Manifest | None:
        json_path = self.root / JSON_MANIFEST
        if json_path.is_file():
            version = _read_json_version(json_path)
            if version is not None:
                return _Manifest(path=json_path, version=version)

        properties_path = self.root / PROPERTIES_MANIFEST
        if properties_path.is_file():
            try:
                text = properties_path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError):
                return None
            m = _PROPERTIES_RE.search(text)
            if m is not None:
                return _Manifest(path=properties_path, version=m.group(1))

        return None


def _read_json_version(path: Path) -> str | None:
    try:
        obj: object = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError):
        return None
    d = as_str_dict(obj)
    if d is None:
        return None
    version = get_str(d, "version")
    if version is None or not is_valid_version(version):
        return None
    return version
