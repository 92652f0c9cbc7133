from __future__ import annotations

from pathlib import Path

import pytest
import typer
from typer.testing import CliRunner

from banda import __version__
from banda.cli.app import app
from banda.cli.context import CLIContext, build_context, resolve_state_dir
from banda.core.config import Config, DefaultsConfig, NamingConfig
from banda.core.errors import ErrorCode
from banda.core.result import Err, Ok, Result
from banda.output.console import MockConsole
from banda.release.contracts import Finished
from banda.release.errors import (
    BranchCollision,
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
    RequestTagPermission,
    TagCollision,
    VersionWriteFailed,
    WorkingTreeDirty,
)
from banda.release.negotiation import NegotiationDefaults


def _ctx(tmp_path: Path, config: Config | None = None) -> CLIContext:
    return CLIContext(
        working_directory=tmp_path / "repo",
        config=config or Config(),
        state_dir=tmp_path / "state",
        console=MockConsole(),
    )


def _invoke(**overrides: object) -> None:
    import banda.cli.commands.deploy_cmd as deploy_cmd

    args: dict[str, object] = {
        "target": None,
        "source": None,
        "development": None,
        "release_version": None,
        "next_version": None,
        "remote": None,
        "config": None,
    }
    args.update(overrides)
    deploy_cmd.deploy(**args)  # type: ignore[arg-type]


def _patch_flow(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
    *,
    result: Result[Finished, ReleaseError],
    config: Config | None = None,
) -> dict[str, object]:
    import banda.cli.commands.deploy_cmd as deploy_cmd

    seen: dict[str, object] = {}

    def fake_run_deploy(**kwargs: object) -> Result[Finished, ReleaseError]:
        seen.update(kwargs)
        return result

    monkeypatch.setattr(deploy_cmd, "build_context", lambda _path=None: _ctx(tmp_path, config))
    monkeypatch.setattr(deploy_cmd, "run_deploy", fake_run_deploy)
    return seen


class TestDeployCommand:
    def test_success_does_not_exit(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        seen = _patch_flow(monkeypatch, tmp_path, result=Ok(Finished()))

        _invoke()

        assert seen["working_directory"] == tmp_path / "repo"
        assert seen["defaults"] == NegotiationDefaults()
        assert seen["naming"] == NamingConfig()

    def test_flags_pre_seed_negotiation(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        config = Config(defaults=DefaultsConfig(remote="upstream", development_branch="dev"))
        seen = _patch_flow(monkeypatch, tmp_path, result=Ok(Finished()), config=config)

        _invoke(target="main", source="next", release_version="2.0.0", next_version="2.1.0")

        assert seen["defaults"] == NegotiationDefaults(
            remote="upstream",
            source_branch="next",
            target_branch="main",
            development_branch="dev",
            release_version="2.0.0",
            next_version="2.1.0",
        )

    def test_halt_exits_action_required(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        _patch_flow(
            monkeypatch,
            tmp_path,
            result=Err(FixMergeConflicts(branch="release/v1.4.6", merging="develop")),
        )

        with pytest.raises(typer.Exit) as exc:
            _invoke()

        assert exc.value.exit_code == int(ErrorCode.ACTION_REQUIRED)


class TestExitCodeFor:
    @pytest.mark.parametrize(
        ("error", "code"),
        [
            (GitNotInstalled(), ErrorCode.ENV_ERROR),
            (NotARepository(path="/tmp"), ErrorCode.ENV_ERROR),
            (WorkingTreeDirty(), ErrorCode.USER_ERROR),
            (RemoteUnreachable(remote="origin"), ErrorCode.NETWORK_ERROR),
            (BranchCollision("develop", "source", "target"), ErrorCode.USER_ERROR),
            (TagCollision(tag="v1.4.6"), ErrorCode.USER_ERROR),
            (CorruptCheckpoint(path="x", detail="y"), ErrorCode.IO_ERROR),
            (VersionWriteFailed(path="x", detail="y"), ErrorCode.IO_ERROR),
            (FixMergeConflicts(branch="a", merging="b"), ErrorCode.ACTION_REQUIRED),
            (RequestManualMerge(branch="a", target="b"), ErrorCode.ACTION_REQUIRED),
            (RequestTagPermission(tag="v1.4.6"), ErrorCode.ACTION_REQUIRED),
            (FixPullConflicts(branch="develop"), ErrorCode.ACTION_REQUIRED),
            (FixFailedMerge(branch="a", merging="b", detail="c"), ErrorCode.ACTION_REQUIRED),
            (PullFailed(branch="develop"), ErrorCode.VCS_ERROR),
            (MergeFailed(branch="a", merging="b", detail="c"), ErrorCode.VCS_ERROR),
        ],
    )
    def test_mapping(self, error: ReleaseError, code: ErrorCode) -> None:
        from banda.cli.commands.deploy_cmd import exit_code_for

        assert exit_code_for(error) == code


class TestContext:
    def test_explicit_config_must_exist(self, tmp_path: Path) -> None:
        with pytest.raises(typer.Exit) as exc:
            build_context(tmp_path / "missing.toml")
        assert exc.value.exit_code == int(ErrorCode.USER_ERROR)

    def test_explicit_config_is_loaded(self, tmp_path: Path) -> None:
        path = tmp_path / "config.toml"
        path.write_text('[naming]\ntag_prefix = "rel-"\n', encoding="utf-8")

        ctx = build_context(path)

        assert ctx.config.naming.tag_prefix == "rel-"

    def test_state_dir_from_config(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("BANDA_STATE_DIR", raising=False)
        config = Config(state_dir=tmp_path / "state")
        assert resolve_state_dir(config) == tmp_path / "state"

    def test_env_overrides_config_state_dir(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        from banda.platform.paths import clear_caches

        monkeypatch.setenv("BANDA_STATE_DIR", str(tmp_path / "env"))
        clear_caches()
        try:
            assert resolve_state_dir(Config(state_dir=tmp_path / "cfg")) == tmp_path / "env"
        finally:
            clear_caches()


def test_version_flag() -> None:
    result = CliRunner().invoke(app, ["--version"])
    assert result.exit_code == 0
    assert result.output.strip() == __version__
