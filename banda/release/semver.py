from __future__ import annotations

import re
from dataclasses import dataclass

__all__ = ["SemVer", "is_valid_version", "parse_version", "suggest_next_version"]

_VERSION_RE = re.compile(r"(\d+)\.(\d+)\.(\d+)")


@dataclass(frozen=True, slots=True, order=True)
class SemVer:
    major: int
    minor: int
    patch: int

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"

    def next_minor(self) -> SemVer:
        return SemVer(self.major, self.minor + 1, 0)


def parse_version(text: str) -> SemVer | None:
    m = _VERSION_RE.fullmatch(text)
    if m is None:
        return None
    return SemVer(int(m.group(1)), int(m.group(2)), int(m.group(3)))


def is_valid_version(text: str) -> bool:
    return parse_version(text) is not None


def suggest_next_version(release_version: str) -> str:
    """Next minor of release_version with the patch zeroed ("1.4.6" -> "1.5.0").

    An unparseable version suggests "1.0.0".
    """
    parsed = parse_version(release_version)
    if parsed is None:
        return "1.0.0"
    return str(parsed.next_minor())
