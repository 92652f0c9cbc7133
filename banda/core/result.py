"""Result type for explicit error handling.

Every fallible operation in banda (git commands, checkpoint I/O, version
manifests, negotiation) returns a Result instead of raising, so the release
flow can decide per call whether a failure halts the run, marks a stage or is
ignored.

Usage:
    def read_version(path: Path) -> Result[str, VersionNotFound]:
        if not path.exists():
            return Err(VersionNotFound())
        return Ok("1.4.6")

    match read_version(manifest):
        case Ok(version):
            console.print(f"version: {version}")
        case Err(error):
            console.error(render_error(error))

Callers narrow with isinstance(result, Err) or a match statement.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeAlias, TypeVar

__all__ = ["Err", "Ok", "Result"]

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Successful result.

    Attributes:
        value: The success value.
    """

    value: T

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Failed result.

    Attributes:
        error: The error value.
    """

    error: E

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


Result: TypeAlias = Ok[T] | Err[E]
