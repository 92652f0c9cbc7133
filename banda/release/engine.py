"""Release workflow engine.

Six stages run in a fixed order:

    1. branch-and-merge-source     release branch off target, merge source in
    2. version-bump-release        write the release version on the release branch
    3. merge-to-target             merge release into target and push it
    4. tag-and-push                tag target and push the tag
    5. merge-target-to-development pull development, merge target into a merge branch
    6. finalize-development        write the next version, merge back, push

A stage that fails in a way the operator can fix writes its marker and halts.
On the next run the latest marked stage is the resume point: earlier stages
are skipped (their markers cleared), the resume stage runs its resumed
variant and later stages run normally.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TypeAlias

from banda.core.config import NamingConfig
from banda.core.result import Err, Ok, Result
from banda.output.console import ConsoleProtocol
from banda.release import messages
from banda.release.checkpoint import CheckpointStore
from banda.release.contracts import Finished, VcsClient
from banda.release.errors import (
    BranchCreateFailed,
    CheckoutFailed,
    CommitFailed,
    FixFailedMerge,
    FixMergeConflicts,
    FixPullConflicts,
    MergeFailed,
    PullFailed,
    RequestManualMerge,
    RequestManualMergeToFinish,
    RequestTagPermission,
    WorkflowHalt,
)
from banda.release.model import Stage, WorkflowParameters
from banda.release.version_store import VersionStore

__all__ = ["WorkflowEngine", "resume_step"]

StepResult: TypeAlias = Result[None, WorkflowHalt]

# Step number (1-based) that each marker resumes.
_RESUME_STEP: dict[Stage, int] = {
    Stage.SOURCE_MERGE: 1,
    Stage.TARGET_MERGE: 3,
    Stage.TAGGING: 4,
    Stage.DEVELOPMENT_PULL: 5,
    Stage.DEVELOPMENT_MERGE: 5,
}


def resume_step(stage: Stage | None) -> int:
    """First step to execute for a resume point (1 when starting fresh)."""
    return 1 if stage is None else _RESUME_STEP[stage]


class WorkflowEngine:
    """Runs the release stages for one set of negotiated parameters."""

    def __init__(
        self,
        params: WorkflowParameters,
        *,
        vcs: VcsClient,
        versions: VersionStore,
        checkpoint: CheckpointStore,
        console: ConsoleProtocol,
        naming: NamingConfig | None = None,
    ) -> None:
        self.params = params
        self.vcs = vcs
        self.versions = versions
        self.checkpoint = checkpoint
        self.console = console
        self.naming = naming or NamingConfig()

        self.release_branch = params.release_branch(self.naming)
        self.merge_branch = params.development_merge_branch(self.naming)

    def run(self) -> Result[Finished, WorkflowHalt]:
        resume = self.resume_point()
        first = resume_step(resume)

        steps: list[Callable[[Stage | None], StepResult]] = [
            self._branch_and_merge_source,
            self._bump_release_version,
            self._merge_to_target,
            self._tag_and_push,
            self._merge_target_to_development,
        ]
        for number, step in enumerate(steps, start=1):
            if number < first:
                continue
            result = step(resume if number == first else None)
            if isinstance(result, Err):
                return result

        return self._finalize_development()

    def resume_point(self) -> Stage | None:
        """Latest marked stage; markers of earlier stages are cleared."""
        marked = self.checkpoint.marked_stages()
        if not marked:
            return None
        for stage in marked[:-1]:
            self.checkpoint.clear_stage(stage)
        return marked[-1]

    # -------------------------------------------------------------------------
    # Stages
    # -------------------------------------------------------------------------

    def _branch_and_merge_source(self, resumed: Stage | None) -> StepResult:
        p = self.params
        if resumed is Stage.SOURCE_MERGE:
            self.checkpoint.clear_stage(Stage.SOURCE_MERGE)
            return Ok(None)

        self.console.print(messages.creating_release_branch(self.release_branch, p.target_branch))
        if not self.vcs.create_branch(self.release_branch, p.target_branch):
            return Err(BranchCreateFailed(branch=self.release_branch))

        self.console.print(messages.merging(p.source_branch, self.release_branch))
        merged = self.vcs.merge(p.source_branch)
        if isinstance(merged, Err):
            if merged.error.conflict:
                return self._halt(
                    Stage.SOURCE_MERGE,
                    FixMergeConflicts(branch=self.release_branch, merging=p.source_branch),
                )
            return Err(
                MergeFailed(
                    branch=self.release_branch,
                    merging=p.source_branch,
                    detail=merged.error.message,
                )
            )
        return Ok(None)

    def _bump_release_version(self, resumed: Stage | None) -> StepResult:
        if not self.vcs.checkout(self.release_branch):
            return Err(CheckoutFailed(branch=self.release_branch))
        return self._bump_version(self.params.release_version, self.release_branch)

    def _merge_to_target(self, resumed: Stage | None) -> StepResult:
        p = self.params
        if resumed is Stage.TARGET_MERGE:
            self.console.print(messages.assuming_merged(self.release_branch, p.target_branch))
            self.checkpoint.clear_stage(Stage.TARGET_MERGE)
            self.vcs.delete_remote_branch(p.remote, self.release_branch)
            return Ok(None)

        self.console.print(messages.merging(self.release_branch, p.target_branch))
        if not self.vcs.checkout(p.target_branch):
            return Err(CheckoutFailed(branch=p.target_branch))
        merged = self.vcs.merge(self.release_branch)
        if isinstance(merged, Err):
            return Err(
                MergeFailed(
                    branch=p.target_branch,
                    merging=self.release_branch,
                    detail=merged.error.message,
                )
            )

        self.console.print(messages.pushing(p.target_branch))
        if self.vcs.push(p.remote, p.target_branch):
            self.console.success("done")
            return Ok(None)

        # No write access to target: publish the release branch for someone who has.
        self.console.warning(messages.cannot_push_branch(p.target_branch, self.release_branch))
        self.vcs.checkout(self.release_branch)
        self.console.print(messages.pushing(self.release_branch))
        self.vcs.push(p.remote, self.release_branch, set_upstream=True)
        return self._halt(
            Stage.TARGET_MERGE,
            RequestManualMerge(branch=self.release_branch, target=p.target_branch),
        )

    def _tag_and_push(self, resumed: Stage | None) -> StepResult:
        p = self.params
        if resumed is Stage.TAGGING:
            self.checkpoint.clear_stage(Stage.TAGGING)
        else:
            self.console.print(messages.fetching_from_remote(p.target_branch))
            if not self.vcs.checkout(p.target_branch):
                return Err(CheckoutFailed(branch=p.target_branch))
            # git refuses to delete the checked-out branch.
            self.vcs.delete_local_branch(self.release_branch)
            if not self.vcs.pull(p.remote, p.target_branch):
                return Err(PullFailed(branch=p.target_branch))
            self.console.success("done")

            self.console.print(messages.creating_tag(p.release_tag, p.target_branch))
            self.vcs.create_tag(p.release_tag, f"Merging branch '{self.release_branch}'")

        self.vcs.checkout(p.target_branch)
        self.console.print(messages.pushing_tag(p.release_tag))
        if not self.vcs.push(p.remote, p.release_tag):
            return self._halt(Stage.TAGGING, RequestTagPermission(tag=p.release_tag))
        self.console.success("done")
        return Ok(None)

    def _merge_target_to_development(self, resumed: Stage | None) -> StepResult:
        p = self.params
        if resumed is Stage.DEVELOPMENT_MERGE:
            self.checkpoint.clear_stage(Stage.DEVELOPMENT_MERGE)
        else:
            if resumed is Stage.DEVELOPMENT_PULL:
                self.checkpoint.clear_stage(Stage.DEVELOPMENT_PULL)

            self.console.print(messages.fetching_branch("development", p.development_branch))
            if not self.vcs.checkout(p.development_branch):
                return Err(CheckoutFailed(branch=p.development_branch))
            if not self.vcs.pull(p.remote, p.development_branch):
                if self.vcs.has_conflicts():
                    return self._halt(
                        Stage.DEVELOPMENT_PULL, FixPullConflicts(branch=p.development_branch)
                    )
                return Err(PullFailed(branch=p.development_branch))
            self.console.success("done")

            self.console.print(
                messages.creating_merge_branch(self.merge_branch, p.development_branch)
            )
            if not self.vcs.create_branch(self.merge_branch, p.development_branch):
                return Err(BranchCreateFailed(branch=self.merge_branch))
            self.console.success("done")

        if not self.vcs.checkout(self.merge_branch):
            return Err(CheckoutFailed(branch=self.merge_branch))
        self.console.print(messages.merging(p.target_branch, self.merge_branch))
        merged = self.vcs.merge(p.target_branch)
        if isinstance(merged, Err):
            if merged.error.conflict:
                return self._halt(
                    Stage.DEVELOPMENT_MERGE,
                    FixMergeConflicts(branch=self.merge_branch, merging=p.target_branch),
                )
            return self._halt(
                Stage.DEVELOPMENT_MERGE,
                FixFailedMerge(
                    branch=self.merge_branch,
                    merging=p.target_branch,
                    detail=merged.error.message,
                ),
            )
        return Ok(None)

    def _finalize_development(self) -> Result[Finished, WorkflowHalt]:
        p = self.params
        bumped = self._bump_version(p.next_version, self.merge_branch)
        if isinstance(bumped, Err):
            return bumped

        self.console.print(messages.merging(self.merge_branch, p.development_branch))
        if not self.vcs.checkout(p.development_branch):
            return Err(CheckoutFailed(branch=p.development_branch))
        merged = self.vcs.merge(self.merge_branch)
        if isinstance(merged, Err):
            return Err(
                MergeFailed(
                    branch=p.development_branch,
                    merging=self.merge_branch,
                    detail=merged.error.message,
                )
            )

        self.console.print(messages.pushing(p.development_branch))
        if self.vcs.push(p.remote, p.development_branch):
            self.console.success("done")
            self.console.print(messages.removing_merge_branch(self.merge_branch))
            self.vcs.delete_local_branch(self.merge_branch, force=False)
            return Ok(Finished())

        self.console.warning(messages.cannot_push_branch(p.development_branch, self.merge_branch))
        self.vcs.checkout(self.merge_branch)
        self.console.print(messages.pushing(self.merge_branch))
        self.vcs.push(p.remote, self.merge_branch, set_upstream=True)
        self.console.success("done")

        # A branch cannot be deleted while checked out.
        self.vcs.checkout(p.development_branch)
        self.console.print(messages.removing_merge_branch_locally(self.merge_branch))
        self.vcs.delete_local_branch(self.merge_branch)
        return Ok(
            Finished(
                advisory=RequestManualMergeToFinish(
                    branch=self.merge_branch, development=p.development_branch
                )
            )
        )

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _bump_version(self, version: str, branch: str) -> StepResult:
        current = self.versions.read_version()
        if isinstance(current, Err):
            return current
        if current.value == version:
            self.console.print(messages.NO_VERSION_UPDATE_NEEDED)
            return Ok(None)

        self.console.print(messages.updating_version(version, branch))
        written = self.versions.write_version(current.value, version)
        if isinstance(written, Err):
            return written
        if not self.vcs.commit(self.naming.commit_message):
            return Err(CommitFailed(branch=branch))
        self.console.success("done")
        return Ok(None)

    def _halt(self, stage: Stage, halt: WorkflowHalt) -> StepResult:
        marked = self.checkpoint.mark_stage(stage)
        if isinstance(marked, Err):
            return marked
        return Err(halt)
