"""Tests for banda.release.model module."""

from __future__ import annotations

import dataclasses

import pytest

from banda.core.config import NamingConfig
from banda.release.model import (
    Stage,
    development_merge_branch_name,
    release_branch_name,
    release_tag,
)

from ._fakes import release_parameters


class TestStage:
    def test_order(self) -> None:
        assert list(Stage) == [
            Stage.SOURCE_MERGE,
            Stage.TARGET_MERGE,
            Stage.TAGGING,
            Stage.DEVELOPMENT_PULL,
            Stage.DEVELOPMENT_MERGE,
        ]
        assert [s.position for s in Stage] == [0, 1, 2, 3, 4]

    def test_values_are_marker_suffixes(self) -> None:
        assert Stage.DEVELOPMENT_PULL.value == "development-pull"


class TestDerivedNames:
    def test_release_tag(self) -> None:
        assert release_tag("1.4.6") == "v1.4.6"
        assert release_tag("1.4.6", prefix="") == "1.4.6"

    def test_release_branch(self) -> None:
        assert release_branch_name("v1.4.6") == "release/v1.4.6"

    def test_development_merge_branch(self) -> None:
        assert development_merge_branch_name("master", "develop") == "merge-banda/master-to-develop"

    def test_parameters_default_naming(self) -> None:
        params = release_parameters()
        assert params.release_branch() == "release/v1.4.6"
        assert params.development_merge_branch() == "merge-banda/master-to-develop"

    def test_parameters_custom_naming(self) -> None:
        naming = NamingConfig(release_branch_prefix="rel-", merge_branch_prefix="sync")
        params = release_parameters()
        assert params.release_branch(naming) == "rel-v1.4.6"
        assert params.development_merge_branch(naming) == "sync/master-to-develop"


def test_parameters_are_immutable() -> None:
    params = release_parameters()
    with pytest.raises(dataclasses.FrozenInstanceError):
        params.release_version = "2.0.0"  # type: ignore[misc]
