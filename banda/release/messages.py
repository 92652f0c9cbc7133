"""Operator-facing text for the release flow.

Error variants are rendered by render_error; progress lines are built by the
small status functions below so tests can compare against exactly the text
the flow prints.
"""

from __future__ import annotations

from banda.release.errors import (
    BranchCollision,
    BranchCreateFailed,
    BranchNotFound,
    CheckoutFailed,
    CheckpointWriteFailed,
    CommitFailed,
    CorruptCheckpoint,
    FixFailedMerge,
    FixMergeConflicts,
    FixPullConflicts,
    GitNotInstalled,
    MergeFailed,
    NotARepository,
    PullFailed,
    ReleaseError,
    RemoteUnreachable,
    RequestManualMerge,
    RequestManualMergeToFinish,
    RequestTagPermission,
    TagCollision,
    UnresolvedConflict,
    VersionNotFound,
    VersionWriteFailed,
    WorkingTreeDirty,
)

FINISHED = "Finished!"
RESUMING = "Resuming..."
NO_VERSION_UPDATE_NEEDED = "No need to update package version. Skipping."
CHECKING_TAG_UNIQUENESS = "Checking tag uniqueness..."

# Prompts
ASK_CONTINUE = "The previous process did not complete - continue it?"
ASK_REMOTE = "Git remote to use"
ASK_SOURCE_BRANCH = "Source branch to use"
ASK_TARGET_BRANCH = "Target branch to use"
ASK_DEVELOPMENT_BRANCH = "Development branch to use"
ASK_RELEASE_VERSION = "Version number for this release"


def ask_next_version(development_branch: str) -> str:
    return f"Next app version to use in development branch '{development_branch}'"


def render_error(error: ReleaseError | RequestManualMergeToFinish) -> str:
    match error:
        case GitNotInstalled():
            return "Git is not installed. Please install before continuing."
        case NotARepository(path=path):
            return f"The current directory '{path}' is not a Git repository."
        case WorkingTreeDirty():
            return (
                "Working directory is not clean. "
                "Please stash or commit changes before continuing."
            )
        case RemoteUnreachable(remote=remote, detail=detail):
            text = f"Remote '{remote}' does not exist or cannot be reached. Exiting."
            return f"{text} ({detail})" if detail else text
        case BranchNotFound(branch=branch, remote=remote):
            return f"Branch '{branch}' does not exist on remote '{remote}'. Exiting."
        case BranchCollision(first_role=first, second_role=second):
            return f"{second.capitalize()} branch must be different than {first} branch."
        case CheckoutFailed(branch=branch):
            return f"There was an error checking out branch '{branch}'."
        case UnresolvedConflict(branch=branch):
            return (
                f"There were merge conflicts when pulling from remote on branch '{branch}'. "
                "Please fix and restart the process."
            )
        case TagCollision(tag=tag):
            return (
                f"Tag '{tag}' already exists. "
                "Delete it or select a new app version before continuing."
            )
        case VersionNotFound(directory=directory):
            return f"No version found in '{directory}'."
        case VersionWriteFailed(path=path, detail=detail):
            return f"Could not update the version in '{path}': {detail}"
        case CorruptCheckpoint(path=path, detail=detail):
            return f"Saved progress in '{path}' cannot be read ({detail}). Restart without resuming."
        case CheckpointWriteFailed(path=path, detail=detail):
            return f"Could not save progress to '{path}': {detail}"
        case FixMergeConflicts(branch=branch, merging=merging):
            return (
                f"There are merge conflicts between '{merging}' and '{branch}'. "
                f"Please fix the conflicts, commit them to branch '{branch}', "
                "and resume the process."
            )
        case FixFailedMerge(branch=branch, merging=merging, detail=detail):
            return (
                f"Merging '{merging}' into '{branch}' failed: {detail}. "
                f"Please fix branch '{branch}', then resume the process."
            )
        case RequestManualMerge(branch=branch):
            return f"Please have someone merge '{branch}' for you, then continue this process."
        case RequestTagPermission():
            return (
                "You do not have permission to push tags. "
                "Get permission, then resume this process."
            )
        case FixPullConflicts(branch=branch):
            return (
                f"There were merge conflicts when pulling '{branch}' from remote. "
                "Please fix and resume the process."
            )
        case PullFailed(branch=branch):
            return f"There was an error when pulling branch '{branch}'."
        case BranchCreateFailed(branch=branch):
            return f"There was an error creating the branch '{branch}'. Exiting."
        case MergeFailed(branch=branch, merging=merging, detail=detail):
            return f"Merging '{merging}' into '{branch}' failed: {detail}"
        case CommitFailed(branch=branch):
            return f"Could not commit the version update on branch '{branch}'."
        case RequestManualMergeToFinish(branch=branch):
            return f"Please have someone merge '{branch}' for you to finish this process."


# -----------------------------------------------------------------------------
# Status lines
# -----------------------------------------------------------------------------


def checking_remote(remote: str) -> str:
    return f"Checking to make sure remote '{remote}' exists..."


def checking_branch(branch: str, remote: str) -> str:
    return f"Checking to make sure branch '{branch}' exists on remote '{remote}'..."


def already_confirmed_branch(branch: str) -> str:
    return f"Already confirmed that branch '{branch}' exists."


def fetching_branch(role: str, branch: str) -> str:
    return f"Fetching {role} branch '{branch}'..."


def fetching_from_remote(branch: str) -> str:
    return f"Fetching '{branch}' from remote..."


def source_and_target_versions(source_version: str, target_version: str) -> str:
    return f"Source version: {source_version}, Target version: {target_version}"


def version_format_wrong(version: str) -> str:
    return f"Version '{version}' is not in the correct format of #.#.#. Please enter again."


def merging(source: str, into: str) -> str:
    return f"Merging '{source}' -> '{into}'"


def updating_version(version: str, branch: str) -> str:
    return f"Updating and committing the new package version '{version}' in branch '{branch}'..."


def pushing(ref: str) -> str:
    return f"Pushing '{ref}' to remote..."


def cannot_push_branch(branch: str, fallback: str) -> str:
    return f"You do not have permission to write to '{branch}'. Pushing '{fallback}' to remote."


def assuming_merged(branch: str, into: str) -> str:
    return f"Assuming '{branch}' has been merged to '{into}'"


def creating_tag(tag: str, branch: str) -> str:
    return f"Creating release tag '{tag}' in target '{branch}'"


def pushing_tag(tag: str) -> str:
    return f"Pushing tag '{tag}' to remote..."


def creating_release_branch(branch: str, target: str) -> str:
    return f"Creating release branch '{branch}' off target '{target}'"


def creating_merge_branch(branch: str, development: str) -> str:
    return f"Creating temporary merge branch '{branch}' off development branch '{development}'..."


def removing_merge_branch(branch: str) -> str:
    return f"Removing temporary merge branch '{branch}'."


def removing_merge_branch_locally(branch: str) -> str:
    return f"Removing temporary merge branch '{branch}' locally."
