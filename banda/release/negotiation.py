"""Parameter negotiation.

Produces the WorkflowParameters for a run, either by resuming a saved
checkpoint (after the operator confirms) or by asking for each value and
checking it against the repository:

    remote -> source -> target -> development -> release version -> next version

Nothing is persisted until every value has been validated, so a failure here
leaves no resumable state behind.
"""

from __future__ import annotations

from dataclasses import dataclass

from banda.core.config import (
    DEFAULT_DEVELOPMENT_BRANCH,
    DEFAULT_REMOTE,
    DEFAULT_SOURCE_BRANCH,
    DEFAULT_TAG_PREFIX,
    DEFAULT_TARGET_BRANCH,
    DefaultsConfig,
)
from banda.core.result import Err, Ok, Result
from banda.output.console import ConsoleProtocol
from banda.release import messages
from banda.release.checkpoint import CheckpointStore
from banda.release.contracts import VcsClient
from banda.release.errors import (
    BranchCollision,
    BranchNotFound,
    CheckoutFailed,
    NegotiationError,
    RemoteUnreachable,
    TagCollision,
    UnresolvedConflict,
)
from banda.release.model import WorkflowParameters, release_tag
from banda.release.prompts import InputProvider
from banda.release.semver import is_valid_version, suggest_next_version
from banda.release.version_store import VersionStore

__all__ = ["Negotiated", "NegotiationDefaults", "ParameterNegotiation"]


@dataclass(frozen=True, slots=True)
class NegotiationDefaults:
    """Prompt defaults.

    source_branch, release_version and next_version are None unless given on
    the command line; negotiation then derives them (current branch, source
    version, next minor).
    """

    remote: str = DEFAULT_REMOTE
    source_branch: str | None = None
    target_branch: str = DEFAULT_TARGET_BRANCH
    development_branch: str = DEFAULT_DEVELOPMENT_BRANCH
    conventional_source_branch: str = DEFAULT_SOURCE_BRANCH
    release_version: str | None = None
    next_version: str | None = None

    @classmethod
    def from_config(
        cls,
        config: DefaultsConfig,
        *,
        remote: str | None = None,
        source_branch: str | None = None,
        target_branch: str | None = None,
        development_branch: str | None = None,
        release_version: str | None = None,
        next_version: str | None = None,
    ) -> NegotiationDefaults:
        return cls(
            remote=remote or config.remote,
            source_branch=source_branch,
            target_branch=target_branch or config.target_branch,
            development_branch=development_branch or config.development_branch,
            conventional_source_branch=config.source_branch,
            release_version=release_version,
            next_version=next_version,
        )


@dataclass(frozen=True, slots=True)
class Negotiated:
    params: WorkflowParameters
    initial_branch: str
    resumed: bool


class ParameterNegotiation:
    """Gathers and validates the parameters of one release run."""

    def __init__(
        self,
        *,
        vcs: VcsClient,
        versions: VersionStore,
        prompts: InputProvider,
        checkpoint: CheckpointStore,
        console: ConsoleProtocol,
        defaults: NegotiationDefaults | None = None,
        tag_prefix: str = DEFAULT_TAG_PREFIX,
    ) -> None:
        self.vcs = vcs
        self.versions = versions
        self.prompts = prompts
        self.checkpoint = checkpoint
        self.console = console
        self.defaults = defaults or NegotiationDefaults()
        self.tag_prefix = tag_prefix

    def run(self) -> Result[Negotiated, NegotiationError]:
        initial_branch = self.vcs.current_branch()

        if self.checkpoint.has_pending_run():
            if self.prompts.ask_confirm(messages.ASK_CONTINUE, True):
                self.console.print(messages.RESUMING)
                loaded = self.checkpoint.load()
                if isinstance(loaded, Err):
                    return loaded
                return Ok(Negotiated(loaded.value, initial_branch, resumed=True))
            self.checkpoint.reset()

        collected = self._collect(initial_branch)
        if isinstance(collected, Err):
            return collected

        saved = self.checkpoint.save(collected.value)
        if isinstance(saved, Err):
            return saved
        return Ok(Negotiated(collected.value, initial_branch, resumed=False))

    def _collect(self, initial_branch: str) -> Result[WorkflowParameters, NegotiationError]:
        d = self.defaults

        remote = self.prompts.ask_text(messages.ASK_REMOTE, d.remote)
        self.console.print(messages.checking_remote(remote))
        reachable = self.vcs.remote_exists(remote)
        if isinstance(reachable, Err):
            return Err(RemoteUnreachable(remote=remote, detail=reachable.error.message))
        if not reachable.value:
            return Err(RemoteUnreachable(remote=remote))
        self.console.success("confirmed")

        source = self.prompts.ask_text(
            messages.ASK_SOURCE_BRANCH, d.source_branch or self._suggest_source(initial_branch)
        )
        checked = self._check_branch(remote, source)
        if isinstance(checked, Err):
            return checked

        target = self.prompts.ask_text(messages.ASK_TARGET_BRANCH, d.target_branch)
        if target == source:
            return Err(BranchCollision(branch=target, first_role="source", second_role="target"))
        checked = self._check_branch(remote, target)
        if isinstance(checked, Err):
            return checked

        development = self.prompts.ask_text(messages.ASK_DEVELOPMENT_BRANCH, d.development_branch)
        if development == target:
            return Err(
                BranchCollision(branch=development, first_role="target", second_role="development")
            )
        if development == source:
            self.console.print(messages.already_confirmed_branch(development))
        else:
            checked = self._check_branch(remote, development)
            if isinstance(checked, Err):
                return checked

        target_version = self._fetch_version(remote, target, role="target")
        if isinstance(target_version, Err):
            return target_version
        source_version = self._fetch_version(remote, source, role="source")
        if isinstance(source_version, Err):
            return source_version

        self.console.print(
            messages.source_and_target_versions(source_version.value, target_version.value)
        )
        release_version = self._ask_version(
            messages.ASK_RELEASE_VERSION, d.release_version or source_version.value
        )

        tag = release_tag(release_version, prefix=self.tag_prefix)
        self.console.print(messages.CHECKING_TAG_UNIQUENESS)
        if self.vcs.tag_exists(tag):
            return Err(TagCollision(tag=tag))
        self.console.success("confirmed")

        next_version = self._ask_version(
            messages.ask_next_version(development),
            d.next_version or suggest_next_version(release_version),
        )

        return Ok(
            WorkflowParameters(
                remote=remote,
                source_branch=source,
                target_branch=target,
                development_branch=development,
                release_version=release_version,
                next_version=next_version,
                release_tag=tag,
            )
        )

    def _suggest_source(self, initial_branch: str) -> str:
        d = self.defaults
        if not initial_branch or initial_branch == d.target_branch:
            return d.conventional_source_branch
        return initial_branch

    def _check_branch(self, remote: str, branch: str) -> Result[None, NegotiationError]:
        self.console.print(messages.checking_branch(branch, remote))
        exists = self.vcs.remote_exists(remote, branch)
        if isinstance(exists, Err):
            return Err(RemoteUnreachable(remote=remote, detail=exists.error.message))
        if not exists.value:
            return Err(BranchNotFound(branch=branch, remote=remote))
        self.console.success("confirmed")
        return Ok(None)

    def _fetch_version(self, remote: str, branch: str, *, role: str) -> Result[str, NegotiationError]:
        self.console.print(messages.fetching_branch(role, branch))
        if not self.vcs.checkout(branch):
            return Err(CheckoutFailed(branch=branch))
        if not self.vcs.pull(remote, branch) or self.vcs.has_conflicts():
            return Err(UnresolvedConflict(branch=branch))
        self.console.success("done")
        return self.versions.read_version()

    def _ask_version(self, prompt: str, default: str) -> str:
        while True:
            answer = self.prompts.ask_text(prompt, default)
            if is_valid_version(answer):
                return answer
            self.console.error(messages.version_format_wrong(answer))
