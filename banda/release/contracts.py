"""Cross-layer contracts for the release workflow.

The negotiation and the engine only see these protocols; banda.git.Repository
satisfies VcsClient structurally and tests substitute in-memory fakes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from banda.core.result import Result
from banda.git.repository import GitError
from banda.release.errors import RequestManualMergeToFinish


class VcsClient(Protocol):
    def is_installed(self) -> bool: ...

    def is_repository(self) -> bool: ...

    def is_clean(self) -> bool: ...

    def current_branch(self) -> str: ...

    def checkout(self, branch: str) -> bool: ...

    def create_branch(self, name: str, start: str) -> bool: ...

    def merge(self, branch: str) -> Result[None, GitError]: ...

    def has_conflicts(self) -> bool: ...

    def commit(self, message: str) -> bool: ...

    def push(self, remote: str, ref: str, *, set_upstream: bool = False) -> bool: ...

    def pull(self, remote: str, branch: str) -> bool: ...

    def delete_local_branch(self, name: str, *, force: bool = True) -> bool: ...

    def delete_remote_branch(self, remote: str, name: str) -> bool: ...

    def remote_exists(self, remote: str, branch: str | None = None) -> Result[bool, GitError]: ...

    def tag_exists(self, tag: str) -> bool: ...

    def create_tag(self, tag: str, message: str) -> bool: ...


@dataclass(frozen=True, slots=True)
class Finished:
    """Workflow completed.

    Attributes:
        advisory: Set when the development branch could not be pushed and the
            merge branch was pushed for someone else to merge instead.
    """

    advisory: RequestManualMergeToFinish | None = None
