"""Resumable release workflow.

- model / semver: parameters, stages and version arithmetic
- errors / messages: failure variants and the text shown for them
- checkpoint / version_store / prompts: persistence and operator input
- negotiation / engine / flow: the deploy use case
"""

from __future__ import annotations

from .checkpoint import CheckpointStore
from .contracts import Finished, VcsClient
from .engine import WorkflowEngine
from .flow import check_preconditions, deploy
from .model import Stage, WorkflowParameters
from .negotiation import NegotiationDefaults, ParameterNegotiation

__all__ = [
    "CheckpointStore",
    "Finished",
    "NegotiationDefaults",
    "ParameterNegotiation",
    "Stage",
    "VcsClient",
    "WorkflowEngine",
    "WorkflowParameters",
    "check_preconditions",
    "deploy",
]
