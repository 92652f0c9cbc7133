"""The deploy flow: preconditions, negotiation, workflow, finish.

Every failure is rendered through banda.release.messages and printed as the
last line of output; the typed error is also returned so the CLI can choose
an exit code.
"""

from __future__ import annotations

from pathlib import Path

from banda.core.config import NamingConfig
from banda.core.result import Err, Ok, Result
from banda.output.console import ConsoleProtocol
from banda.release import messages
from banda.release.checkpoint import CheckpointStore
from banda.release.contracts import Finished, VcsClient
from banda.release.engine import WorkflowEngine
from banda.release.errors import (
    GitNotInstalled,
    NotARepository,
    PreconditionError,
    ReleaseError,
    WorkingTreeDirty,
)
from banda.release.negotiation import NegotiationDefaults, ParameterNegotiation
from banda.release.prompts import InputProvider
from banda.release.version_store import VersionStore

__all__ = ["check_preconditions", "deploy"]


def check_preconditions(vcs: VcsClient, working_directory: Path) -> Result[None, PreconditionError]:
    """Git installed, inside a repository, nothing uncommitted. Checked in that order."""
    if not vcs.is_installed():
        return Err(GitNotInstalled())
    if not vcs.is_repository():
        return Err(NotARepository(path=str(working_directory)))
    if not vcs.is_clean():
        return Err(WorkingTreeDirty())
    return Ok(None)


def deploy(
    *,
    vcs: VcsClient,
    versions: VersionStore,
    prompts: InputProvider,
    checkpoint: CheckpointStore,
    console: ConsoleProtocol,
    working_directory: Path,
    defaults: NegotiationDefaults | None = None,
    naming: NamingConfig | None = None,
) -> Result[Finished, ReleaseError]:
    naming = naming or NamingConfig()

    ready = check_preconditions(vcs, working_directory)
    if isinstance(ready, Err):
        return _fail(console, ready.error)

    negotiated = ParameterNegotiation(
        vcs=vcs,
        versions=versions,
        prompts=prompts,
        checkpoint=checkpoint,
        console=console,
        defaults=defaults,
        tag_prefix=naming.tag_prefix,
    ).run()
    if isinstance(negotiated, Err):
        return _fail(console, negotiated.error)

    params = negotiated.value.params
    outcome = WorkflowEngine(
        params,
        vcs=vcs,
        versions=versions,
        checkpoint=checkpoint,
        console=console,
        naming=naming,
    ).run()
    if isinstance(outcome, Err):
        return _fail(console, outcome.error)

    checkpoint.reset()
    initial = negotiated.value.initial_branch or params.development_branch
    if not vcs.checkout(initial) and initial != params.development_branch:
        vcs.checkout(params.development_branch)

    finished = outcome.value
    if finished.advisory is not None:
        console.warning(messages.render_error(finished.advisory))
    console.success(messages.FINISHED)
    return Ok(finished)


def _fail(console: ConsoleProtocol, error: ReleaseError) -> Err[ReleaseError]:
    console.error(messages.render_error(error))
    return Err(error)
