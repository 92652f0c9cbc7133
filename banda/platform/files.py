"""Filesystem helpers."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

__all__ = ["atomic_write_text", "delete_if_exists", "touch"]


def atomic_write_text(path: Path, content: str, *, encoding: str = "utf-8") -> None:
    """Write text to path atomically using temp file + replace."""
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{path.name}.",
        suffix=".tmp",
        dir=str(path.parent),
    )
    tmp_path = Path(tmp_name)

    try:
        with os.fdopen(fd, "w", encoding=encoding, newline="") as handle:
            handle.write(content)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_path, path)
    finally:
        if tmp_path.exists():
            tmp_path.unlink(missing_ok=True)


def touch(path: Path) -> None:
    """Create an empty file (and its parent directory) if it does not exist."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.touch(exist_ok=True)


def delete_if_exists(path: Path) -> bool:
    """Delete path if it is a file.

    Returns True if a file was removed, False if there was nothing to remove.
    A missing file is not an error; other OS errors propagate.
    """
    try:
        path.unlink()
    except FileNotFoundError:
        return False
    return True
