"""Exit codes for the banda CLI.

The deploy command maps every failure (precondition, negotiation, workflow
halt) to one of these codes before exiting.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Process exit codes. Values are stable.

    - 0: Success (including the "merge on remote to finish" advisory)
    - 1: User error (bad input, branch collision, dirty working tree)
    - 2: Environment error (git missing, not a repository)
    - 3: VCS error (a git operation failed for an unclassified reason)
    - 4: Network error (remote unreachable)
    - 5: I/O error (checkpoint unreadable or not writable)
    - 6: Action required (a stage halted; fix it and re-run to resume)
    """

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    VCS_ERROR = 3
    NETWORK_ERROR = 4
    IO_ERROR = 5
    ACTION_REQUIRED = 6

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        return self == ErrorCode.OK

    @property
    def is_resumable(self) -> bool:
        """True if re-running deploy will pick up from a saved checkpoint."""
        return self == ErrorCode.ACTION_REQUIRED
