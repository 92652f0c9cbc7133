"""Release workflow data model.

WorkflowParameters is negotiated once per run (or rehydrated from a
checkpoint) and is read-only afterwards. The release branch and the
development-merge branch are always derived from it, never stored, so a
resumed run computes exactly the names the interrupted run used.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from banda.core.config import (
    DEFAULT_MERGE_BRANCH_PREFIX,
    DEFAULT_RELEASE_BRANCH_PREFIX,
    DEFAULT_TAG_PREFIX,
    NamingConfig,
)

__all__ = [
    "Stage",
    "WorkflowParameters",
    "development_merge_branch_name",
    "release_branch_name",
    "release_tag",
]


class Stage(StrEnum):
    """Interruptible stages, in workflow order.

    The value is the suffix of the stage's marker file.
    """

    SOURCE_MERGE = "source-merge"
    TARGET_MERGE = "target-merge"
    TAGGING = "tagging"
    DEVELOPMENT_PULL = "development-pull"
    DEVELOPMENT_MERGE = "development-merge"

    @property
    def position(self) -> int:
        return list(Stage).index(self)


@dataclass(frozen=True, slots=True)
class WorkflowParameters:
    """The negotiated configuration of one release run."""

    remote: str
    source_branch: str
    target_branch: str
    development_branch: str
    release_version: str
    next_version: str
    release_tag: str

    def release_branch(self, naming: NamingConfig | None = None) -> str:
        prefix = naming.release_branch_prefix if naming else DEFAULT_RELEASE_BRANCH_PREFIX
        return release_branch_name(self.release_tag, prefix=prefix)

    def development_merge_branch(self, naming: NamingConfig | None = None) -> str:
        prefix = naming.merge_branch_prefix if naming else DEFAULT_MERGE_BRANCH_PREFIX
        return development_merge_branch_name(
            self.target_branch, self.development_branch, prefix=prefix
        )


def release_tag(version: str, *, prefix: str = DEFAULT_TAG_PREFIX) -> str:
    return f"{prefix}{version}"


def release_branch_name(tag: str, *, prefix: str = DEFAULT_RELEASE_BRANCH_PREFIX) -> str:
    return f"{prefix}{tag}"


def development_merge_branch_name(
    target_branch: str, development_branch: str, *, prefix: str = DEFAULT_MERGE_BRANCH_PREFIX
) -> str:
    return f"{prefix}/{target_branch}-to-{development_branch}"
