"""Persisted progress of an in-flight release.

A checkpoint is a JSON snapshot of the negotiated WorkflowParameters plus one
empty marker file per interruptible stage. Everything is keyed by the working
directory, so several repositories can each have a release in flight:

    <state-dir>/progress/<key>-deploy.json
    <state-dir>/progress/<key>-source-merge.lock
    <state-dir>/progress/<key>-target-merge.lock
    ...

The store is meant for one process at a time; two simultaneous runs against
the same working directory are not supported.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from pathlib import Path

from banda.core.result import Err, Ok, Result
from banda.core.structured import as_str_dict, get_str
from banda.platform.files import atomic_write_text, delete_if_exists, touch
from banda.release.errors import CheckpointWriteFailed, CorruptCheckpoint
from banda.release.model import Stage, WorkflowParameters

__all__ = [
    "CheckpointPaths",
    "CheckpointStore",
    "checkpoint_paths",
    "working_directory_key",
]

_SCHEMA = 1
_UNSAFE_PATH_CHARS = re.compile(r"[\\/:]")
_SNAPSHOT_FIELDS = (
    "remote",
    "source_branch",
    "target_branch",
    "development_branch",
    "release_version",
    "next_version",
    "release_tag",
)


@dataclass(frozen=True, slots=True)
class CheckpointPaths:
    snapshot: Path
    markers: dict[Stage, Path]

    def all_files(self) -> tuple[Path, ...]:
        return (self.snapshot, *self.markers.values())


def working_directory_key(path: Path) -> str:
    """Filesystem-safe key for an absolute working directory path."""
    return _UNSAFE_PATH_CHARS.sub("_", str(path.resolve()))


def checkpoint_paths(state_dir: Path, key: str) -> CheckpointPaths:
    progress = state_dir / "progress"
    return CheckpointPaths(
        snapshot=progress / f"{key}-deploy.json",
        markers={stage: progress / f"{key}-{stage.value}.lock" for stage in Stage},
    )


class CheckpointStore:
    """Snapshot and stage markers for one working directory."""

    def __init__(self, paths: CheckpointPaths) -> None:
        self.paths = paths

    @classmethod
    def for_working_directory(cls, state_dir: Path, working_directory: Path) -> CheckpointStore:
        return cls(checkpoint_paths(state_dir, working_directory_key(working_directory)))

    def has_pending_run(self) -> bool:
        return self.paths.snapshot.is_file()

    def save(self, params: WorkflowParameters) -> Result[None, CheckpointWriteFailed]:
        payload: dict[str, object] = {"schema": _SCHEMA}
        for name in _SNAPSHOT_FIELDS:
            payload[name] = getattr(params, name)

        path = self.paths.snapshot
        try:
            atomic_write_text(path, json.dumps(payload, indent=2) + "\n", encoding="utf-8")
        except OSError as e:
            return Err(CheckpointWriteFailed(path=str(path), detail=str(e)))
        return Ok(None)

    def load(self) -> Result[WorkflowParameters, CorruptCheckpoint]:
        path = self.paths.snapshot
        try:
            obj: object = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            return Err(CorruptCheckpoint(path=str(path), detail=str(e)))

        d = as_str_dict(obj)
        if d is None:
            return Err(CorruptCheckpoint(path=str(path), detail="not a JSON object"))

        schema = d.get("schema")
        if schema != _SCHEMA:
            return Err(CorruptCheckpoint(path=str(path), detail=f"unsupported schema: {schema}"))

        values: dict[str, str] = {}
        for name in _SNAPSHOT_FIELDS:
            value = get_str(d, name)
            if value is None:
                return Err(CorruptCheckpoint(path=str(path), detail=f"missing field '{name}'"))
            values[name] = value

        return Ok(WorkflowParameters(**values))

    def mark_stage(self, stage: Stage) -> Result[None, CheckpointWriteFailed]:
        path = self.paths.markers[stage]
        try:
            touch(path)
        except OSError as e:
            return Err(CheckpointWriteFailed(path=str(path), detail=str(e)))
        return Ok(None)

    def clear_stage(self, stage: Stage) -> bool:
        """Remove a stage marker. Returns False if it was not set."""
        return delete_if_exists(self.paths.markers[stage])

    def stage_is_marked(self, stage: Stage) -> bool:
        return self.paths.markers[stage].is_file()

    def marked_stages(self) -> list[Stage]:
        """Marked stages, in workflow order."""
        return [stage for stage in Stage if self.stage_is_marked(stage)]

    def reset(self) -> None:
        """Delete the snapshot and every marker; missing files are skipped."""
        for path in self.paths.all_files():
            delete_if_exists(path)
