"""Git repository abstraction.

Repository is the VCS client the release workflow drives: a thin command
executor over the `git` executable with no knowledge of the workflow itself.
Queries return plain bools/strings where a failure has an obvious meaning
("not clean", "checkout failed"), and Result types where the caller has to
tell failure kinds apart (merge conflicts, an unreachable remote).

Usage:
    repo = Repository(Path.cwd())

    if not repo.checkout("master"):
        ...

    match repo.merge("release/v1.4.6"):
        case Ok(_):
            ...
        case Err(e) if e.conflict:
            print("fix conflicts")
        case Err(e):
            print(f"merge failed: {e.message}")
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from banda.core.result import Err, Ok, Result
from banda.platform.process import ProcessError
from banda.platform.process import run as run_process

__all__ = [
    "GitError",
    "Repository",
]


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: The git command that failed
        message: Error message
        returncode: Process return code
        conflict: True if the command left unmerged paths behind
    """

    command: str
    message: str
    returncode: int = 1
    conflict: bool = False


def _git_error(command: str, e: ProcessError, *, fallback: str) -> GitError:
    return GitError(
        command=command,
        message=e.stderr.strip() or e.stdout.strip() or fallback,
        returncode=e.returncode,
    )


class Repository:
    """Git operations on a single working directory.

    Attributes:
        path: Working directory the commands run in
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def is_installed(self) -> bool:
        """Check that the git executable can be run."""
        return isinstance(self._run(["--version"]), Ok)

    def is_repository(self) -> bool:
        """Check that path is inside a git work tree."""
        result = self._run(["rev-parse", "--is-inside-work-tree"])
        match result:
            case Ok(stdout):
                return stdout.strip() == "true"
            case Err(_):
                return False

    def is_clean(self) -> bool:
        """Check if working tree is clean (no staged, unstaged or untracked changes).

        Returns False if status cannot be determined.
        """
        result = self._run(["status", "--porcelain"])
        match result:
            case Ok(stdout):
                return stdout.strip() == ""
            case Err(_):
                return False

    def current_branch(self) -> str:
        """Get current branch name.

        Returns "" if detached HEAD or on error.
        """
        result = self._run(["branch", "--show-current"])
        match result:
            case Ok(stdout):
                return stdout.strip()
            case Err(_):
                return ""

    def has_conflicts(self) -> bool:
        """True if the index holds unmerged paths."""
        result = self._run(["ls-files", "-u"])
        match result:
            case Ok(stdout):
                return stdout.strip() != ""
            case Err(_):
                return False

    def remote_exists(self, remote: str, branch: str | None = None) -> Result[bool, GitError]:
        """Check a remote, or a branch on a remote.

        Returns:
            Ok(True) if the remote (and branch, when given) exists
            Ok(False) if the remote answered but has no such branch
            Err(GitError) if the remote could not be queried at all
        """
        args = ["ls-remote", remote] if branch is None else ["ls-remote", "--heads", remote, branch]
        result = self._run(args)
        match result:
            case Err(e):
                return Err(_git_error("ls-remote", e, fallback=f"cannot reach remote '{remote}'"))
            case Ok(stdout):
                if branch is None:
                    return Ok(True)
                return Ok(stdout.strip() != "")

    def tag_exists(self, tag: str) -> bool:
        """Check for a tag after fetching all remote tags.

        A failing fetch or lookup counts as "exists": the tag cannot be
        proven free.
        """
        if isinstance(self._run(["fetch", "--all", "--tags", "--force"]), Err):
            return True
        result = self._run(["tag", "-l", tag])
        match result:
            case Ok(stdout):
                return stdout.strip() != ""
            case Err(_):
                return True

    # -------------------------------------------------------------------------
    # Branches
    # -------------------------------------------------------------------------

    def checkout(self, branch: str) -> bool:
        return isinstance(self._run(["checkout", branch]), Ok)

    def create_branch(self, name: str, start: str) -> bool:
        """Create `name` off `start` and check it out.

        Any existing local branch called `name` is deleted first (best-effort).
        Returns False if either `start` or the new branch cannot be checked out.
        """
        if not self.checkout(start):
            return False
        self._run(["branch", "-D", name])
        self._run(["checkout", "-b", name])
        return self.checkout(name)

    def delete_local_branch(self, name: str, *, force: bool = True) -> bool:
        return isinstance(self._run(["branch", "-D" if force else "-d", name]), Ok)

    def delete_remote_branch(self, remote: str, name: str) -> bool:
        return isinstance(self._run(["push", remote, "--delete", name]), Ok)

    # -------------------------------------------------------------------------
    # History
    # -------------------------------------------------------------------------

    def merge(self, branch: str) -> Result[None, GitError]:
        """Merge `branch` into the current branch.

        Returns:
            Ok(None) on success
            Err(GitError) with conflict=True if the merge stopped on conflicts
            Err(GitError) with conflict=False for any other failure
        """
        result = self._run(["merge", "--no-edit", branch])
        match result:
            case Ok(_):
                return Ok(None)
            case Err(e):
                error = _git_error(f"merge {branch}", e, fallback="merge failed")
                if self.has_conflicts():
                    return Err(
                        GitError(
                            command=error.command,
                            message=error.message,
                            returncode=error.returncode,
                            conflict=True,
                        )
                    )
                return Err(error)

    def commit(self, message: str) -> bool:
        """Commit all tracked changes."""
        return isinstance(self._run(["commit", "-a", "-m", message]), Ok)

    def create_tag(self, tag: str, message: str) -> bool:
        """Create an annotated tag at HEAD."""
        return isinstance(self._run(["tag", "-a", tag, "-m", message]), Ok)

    # -------------------------------------------------------------------------
    # Remote
    # -------------------------------------------------------------------------

    def push(self, remote: str, ref: str, *, set_upstream: bool = False) -> bool:
        """Push a branch or tag. False usually means no write permission."""
        args = ["push", "-u", remote, ref] if set_upstream else ["push", remote, ref]
        return isinstance(self._run(args), Ok)

    def pull(self, remote: str, branch: str) -> bool:
        return isinstance(self._run(["pull", "--no-edit", remote, branch]), Ok)

    def _run(self, args: list[str]) -> Result[str, ProcessError]:
        """Run a git command in this repository."""
        return run_process(["git", *args], cwd=self.path)
