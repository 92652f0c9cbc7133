from __future__ import annotations

from pathlib import Path

import typer

from banda.cli.context import build_context
from banda.core.errors import ErrorCode
from banda.core.result import Err
from banda.git.repository import Repository
from banda.release.checkpoint import CheckpointStore
from banda.release.errors import (
    BranchCreateFailed,
    CheckoutFailed,
    CheckpointWriteFailed,
    CommitFailed,
    CorruptCheckpoint,
    GitNotInstalled,
    MergeFailed,
    NotARepository,
    PullFailed,
    ReleaseError,
    RemoteUnreachable,
    VersionNotFound,
    VersionWriteFailed,
    is_resumable,
)
from banda.release.flow import deploy as run_deploy
from banda.release.negotiation import NegotiationDefaults
from banda.release.prompts import TerminalInput
from banda.release.version_store import FileVersionStore


def deploy(
    target: str | None = typer.Argument(None, help="Target branch (default: master)"),
    source: str | None = typer.Option(None, "--source", "-s", help="Source branch"),
    development: str | None = typer.Option(
        None, "--development", "-w", help="Development branch (default: develop)"
    ),
    release_version: str | None = typer.Option(
        None, "--release-version", "-v", help="Version number for this release"
    ),
    next_version: str | None = typer.Option(
        None, "--next-version", "-n", help="Next version for the development branch"
    ),
    remote: str | None = typer.Option(None, "--remote", "-r", help="Git remote (default: origin)"),
    config: Path | None = typer.Option(None, "--config", help="Path to a config.toml"),
) -> None:
    """Release source into target, tag it and merge back into development.

    Re-run after fixing a halted stage to resume where the last run stopped.
    """
    ctx = build_context(config)
    cwd = ctx.working_directory

    defaults = NegotiationDefaults.from_config(
        ctx.config.defaults,
        remote=remote,
        source_branch=source,
        target_branch=target,
        development_branch=development,
        release_version=release_version,
        next_version=next_version,
    )

    result = run_deploy(
        vcs=Repository(cwd),
        versions=FileVersionStore(cwd),
        prompts=TerminalInput(),
        checkpoint=CheckpointStore.for_working_directory(ctx.state_dir, cwd),
        console=ctx.console,
        working_directory=cwd,
        defaults=defaults,
        naming=ctx.config.naming,
    )
    if isinstance(result, Err):
        raise typer.Exit(code=int(exit_code_for(result.error)))


def exit_code_for(error: ReleaseError) -> ErrorCode:
    if is_resumable(error):
        return ErrorCode.ACTION_REQUIRED
    match error:
        case GitNotInstalled() | NotARepository():
            return ErrorCode.ENV_ERROR
        case RemoteUnreachable():
            return ErrorCode.NETWORK_ERROR
        case (
            CorruptCheckpoint() | CheckpointWriteFailed() | VersionNotFound() | VersionWriteFailed()
        ):
            return ErrorCode.IO_ERROR
        case (
            PullFailed() | MergeFailed() | BranchCreateFailed() | CommitFailed() | CheckoutFailed()
        ):
            return ErrorCode.VCS_ERROR
        case _:
            return ErrorCode.USER_ERROR
