"""Tests for banda.release.checkpoint module."""

from __future__ import annotations

import json
from pathlib import Path

from banda.core.result import Err, Ok
from banda.release.checkpoint import CheckpointStore, checkpoint_paths, working_directory_key
from banda.release.errors import CheckpointWriteFailed, CorruptCheckpoint
from banda.release.model import Stage

from ._fakes import checkpoint_store, release_parameters


class TestPaths:
    def test_key_replaces_separators(self, tmp_path: Path) -> None:
        key = working_directory_key(tmp_path / "repo")
        assert "/" not in key
        assert "\\" not in key
        assert ":" not in key
        assert key.endswith("_repo")

    def test_layout(self, tmp_path: Path) -> None:
        paths = checkpoint_paths(tmp_path, "_home_me_app")

        assert paths.snapshot == tmp_path / "progress" / "_home_me_app-deploy.json"
        assert paths.markers[Stage.TAGGING] == tmp_path / "progress" / "_home_me_app-tagging.lock"
        assert len(paths.all_files()) == 6

    def test_different_directories_do_not_share_state(self, tmp_path: Path) -> None:
        a = CheckpointStore.for_working_directory(tmp_path, tmp_path / "a")
        b = CheckpointStore.for_working_directory(tmp_path, tmp_path / "b")

        assert a.save(release_parameters()) == Ok(None)

        assert a.has_pending_run()
        assert not b.has_pending_run()


class TestSnapshot:
    def test_no_pending_run_initially(self, tmp_path: Path) -> None:
        assert not checkpoint_store(tmp_path).has_pending_run()

    def test_save_then_load(self, tmp_path: Path) -> None:
        store = checkpoint_store(tmp_path)

        assert store.save(release_parameters()) == Ok(None)

        assert store.has_pending_run()
        assert store.load() == Ok(release_parameters())

    def test_snapshot_format(self, tmp_path: Path) -> None:
        store = checkpoint_store(tmp_path)
        store.save(release_parameters())

        data = json.loads(store.paths.snapshot.read_text(encoding="utf-8"))

        assert data == {
            "schema": 1,
            "remote": "origin",
            "source_branch": "develop",
            "target_branch": "master",
            "development_branch": "develop",
            "release_version": "1.4.6",
            "next_version": "1.5.0",
            "release_tag": "v1.4.6",
        }

    def test_load_invalid_json(self, tmp_path: Path) -> None:
        store = checkpoint_store(tmp_path)
        store.paths.snapshot.parent.mkdir(parents=True)
        store.paths.snapshot.write_text("{not json", encoding="utf-8")

        result = store.load()

        assert isinstance(result, Err)
        assert isinstance(result.error, CorruptCheckpoint)

    def test_load_missing_field(self, tmp_path: Path) -> None:
        store = checkpoint_store(tmp_path)
        store.save(release_parameters())
        data = json.loads(store.paths.snapshot.read_text(encoding="utf-8"))
        del data["release_tag"]
        store.paths.snapshot.write_text(json.dumps(data), encoding="utf-8")

        result = store.load()

        assert isinstance(result, Err)
        assert "release_tag" in result.error.detail

    def test_load_wrong_schema(self, tmp_path: Path) -> None:
        store = checkpoint_store(tmp_path)
        store.paths.snapshot.parent.mkdir(parents=True)
        store.paths.snapshot.write_text('{"schema": 99}', encoding="utf-8")

        result = store.load()

        assert isinstance(result, Err)
        assert "schema" in result.error.detail

    def test_save_failure(self, tmp_path: Path) -> None:
        blocker = tmp_path / "state"
        blocker.write_text("not a directory", encoding="utf-8")
        store = checkpoint_store(tmp_path)

        result = store.save(release_parameters())

        assert isinstance(result, Err)
        assert isinstance(result.error, CheckpointWriteFailed)


class TestMarkers:
    def test_mark_and_clear(self, tmp_path: Path) -> None:
        store = checkpoint_store(tmp_path)

        assert store.mark_stage(Stage.TAGGING) == Ok(None)
        assert store.stage_is_marked(Stage.TAGGING)

        assert store.clear_stage(Stage.TAGGING) is True
        assert not store.stage_is_marked(Stage.TAGGING)

    def test_clear_absent_marker(self, tmp_path: Path) -> None:
        assert checkpoint_store(tmp_path).clear_stage(Stage.SOURCE_MERGE) is False

    def test_marked_stages_in_workflow_order(self, tmp_path: Path) -> None:
        store = checkpoint_store(tmp_path)
        store.mark_stage(Stage.DEVELOPMENT_MERGE)
        store.mark_stage(Stage.SOURCE_MERGE)

        assert store.marked_stages() == [Stage.SOURCE_MERGE, Stage.DEVELOPMENT_MERGE]

    def test_marker_without_snapshot_is_not_a_pending_run(self, tmp_path: Path) -> None:
        store = checkpoint_store(tmp_path)
        store.mark_stage(Stage.TAGGING)
        assert not store.has_pending_run()


class TestReset:
    def test_removes_everything(self, tmp_path: Path) -> None:
        store = checkpoint_store(tmp_path)
        store.save(release_parameters())
        for stage in Stage:
            store.mark_stage(stage)

        store.reset()

        assert not store.has_pending_run()
        assert store.marked_stages() == []
        assert not any(p.exists() for p in store.paths.all_files())

    def test_reset_when_empty(self, tmp_path: Path) -> None:
        checkpoint_store(tmp_path).reset()
