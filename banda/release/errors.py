"""Error and halt variants for the release flow.

Each variant is a frozen dataclass carrying the names it talks about; the
text shown to the operator is produced by banda.release.messages. Layers
return these inside Err(...) and never raise them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias

__all__ = [
    # preconditions
    "GitNotInstalled",
    "NotARepository",
    "WorkingTreeDirty",
    "PreconditionError",
    # negotiation
    "BranchCollision",
    "BranchNotFound",
    "CheckoutFailed",
    "CheckpointWriteFailed",
    "CorruptCheckpoint",
    "RemoteUnreachable",
    "TagCollision",
    "UnresolvedConflict",
    "VersionNotFound",
    "VersionWriteFailed",
    "NegotiationError",
    # workflow
    "BranchCreateFailed",
    "CommitFailed",
    "FixFailedMerge",
    "FixMergeConflicts",
    "FixPullConflicts",
    "MergeFailed",
    "PullFailed",
    "RequestManualMerge",
    "RequestManualMergeToFinish",
    "RequestTagPermission",
    "WorkflowHalt",
    "ReleaseError",
    "is_resumable",
]


# -----------------------------------------------------------------------------
# Preconditions
# -----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class GitNotInstalled:
    pass


@dataclass(frozen=True, slots=True)
class NotARepository:
    path: str


@dataclass(frozen=True, slots=True)
class WorkingTreeDirty:
    pass


# -----------------------------------------------------------------------------
# Negotiation and checkpoint I/O
# -----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class RemoteUnreachable:
    remote: str
    detail: str | None = None


@dataclass(frozen=True, slots=True)
class BranchNotFound:
    branch: str
    remote: str


@dataclass(frozen=True, slots=True)
class BranchCollision:
    """Two workflow roles were given the same branch."""

    branch: str
    first_role: str
    second_role: str


@dataclass(frozen=True, slots=True)
class CheckoutFailed:
    branch: str


@dataclass(frozen=True, slots=True)
class UnresolvedConflict:
    """Pulling `branch` from its remote failed or left conflicts."""

    branch: str


@dataclass(frozen=True, slots=True)
class TagCollision:
    tag: str


@dataclass(frozen=True, slots=True)
class VersionNotFound:
    directory: str


@dataclass(frozen=True, slots=True)
class VersionWriteFailed:
    path: str
    detail: str


@dataclass(frozen=True, slots=True)
class CorruptCheckpoint:
    path: str
    detail: str


@dataclass(frozen=True, slots=True)
class CheckpointWriteFailed:
    path: str
    detail: str


# -----------------------------------------------------------------------------
# Workflow halts
# -----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class FixMergeConflicts:
    """Merging `merging` into `branch` stopped on conflicts."""

    branch: str
    merging: str


@dataclass(frozen=True, slots=True)
class FixFailedMerge:
    """Merging `merging` into `branch` failed without conflicts; marked for a retry."""

    branch: str
    merging: str
    detail: str


@dataclass(frozen=True, slots=True)
class RequestManualMerge:
    """`branch` was pushed because `target` could not be; someone must merge it."""

    branch: str
    target: str


@dataclass(frozen=True, slots=True)
class RequestTagPermission:
    tag: str


@dataclass(frozen=True, slots=True)
class FixPullConflicts:
    branch: str


@dataclass(frozen=True, slots=True)
class PullFailed:
    branch: str


@dataclass(frozen=True, slots=True)
class BranchCreateFailed:
    branch: str


@dataclass(frozen=True, slots=True)
class MergeFailed:
    branch: str
    merging: str
    detail: str


@dataclass(frozen=True, slots=True)
class CommitFailed:
    branch: str


@dataclass(frozen=True, slots=True)
class RequestManualMergeToFinish:
    """Advisory: the run finished, but `branch` still has to be merged into `development`."""

    branch: str
    development: str


PreconditionError: TypeAlias = GitNotInstalled | NotARepository | WorkingTreeDirty

NegotiationError: TypeAlias = (
    RemoteUnreachable
    | BranchNotFound
    | BranchCollision
    | CheckoutFailed
    | UnresolvedConflict
    | TagCollision
    | VersionNotFound
    | CorruptCheckpoint
    | CheckpointWriteFailed
)

WorkflowHalt: TypeAlias = (
    FixMergeConflicts
    | FixFailedMerge
    | RequestManualMerge
    | RequestTagPermission
    | FixPullConflicts
    | PullFailed
    | BranchCreateFailed
    | MergeFailed
    | CommitFailed
    | VersionNotFound
    | VersionWriteFailed
    | CheckoutFailed
    | CheckpointWriteFailed
)

ReleaseError: TypeAlias = PreconditionError | NegotiationError | WorkflowHalt


_RESUMABLE = (
    FixMergeConflicts,
    FixFailedMerge,
    RequestManualMerge,
    RequestTagPermission,
    FixPullConflicts,
)


def is_resumable(error: object) -> bool:
    """True for halts that left a stage marker behind."""
    return isinstance(error, _RESUMABLE)
