"""Typed configuration loading and access.

banda reads an optional TOML file:

    [defaults]
    remote = "origin"
    source_branch = "develop"
    target_branch = "master"
    development_branch = "develop"

    [naming]
    tag_prefix = "v"
    release_branch_prefix = "release/"
    merge_branch_prefix = "merge-banda"
    commit_message = "chore: update app version"

    [state]
    dir = "~/.local/state/banda"

Every key is optional; missing keys fall back to the defaults below.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_str, get_table

__all__ = [
    "Config",
    "ConfigError",
    "DefaultsConfig",
    "NamingConfig",
    "load_config",
    "load_config_or_default",
    "DEFAULT_REMOTE",
    "DEFAULT_SOURCE_BRANCH",
    "DEFAULT_TARGET_BRANCH",
    "DEFAULT_DEVELOPMENT_BRANCH",
]

DEFAULT_REMOTE = "origin"
DEFAULT_SOURCE_BRANCH = "develop"
DEFAULT_TARGET_BRANCH = "master"
DEFAULT_DEVELOPMENT_BRANCH = "develop"

DEFAULT_TAG_PREFIX = "v"
DEFAULT_RELEASE_BRANCH_PREFIX = "release/"
DEFAULT_MERGE_BRANCH_PREFIX = "merge-banda"
DEFAULT_COMMIT_MESSAGE = "chore: update app version"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class DefaultsConfig:
    """Conventional branch and remote names offered as prompt defaults."""

    remote: str = DEFAULT_REMOTE
    source_branch: str = DEFAULT_SOURCE_BRANCH
    target_branch: str = DEFAULT_TARGET_BRANCH
    development_branch: str = DEFAULT_DEVELOPMENT_BRANCH


@dataclass(frozen=True, slots=True)
class NamingConfig:
    """Naming rules for derived tags, branches and commits."""

    tag_prefix: str = DEFAULT_TAG_PREFIX
    release_branch_prefix: str = DEFAULT_RELEASE_BRANCH_PREFIX
    merge_branch_prefix: str = DEFAULT_MERGE_BRANCH_PREFIX
    commit_message: str = DEFAULT_COMMIT_MESSAGE


@dataclass(frozen=True, slots=True)
class Config:
    """Main configuration container."""

    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)
    naming: NamingConfig = field(default_factory=NamingConfig)
    state_dir: Path | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Config:
        """Create Config from a mapping (parsed TOML)."""
        defaults: StrDict = get_table(data, "defaults") or {}
        naming: StrDict = get_table(data, "naming") or {}
        state: StrDict = get_table(data, "state") or {}

        state_dir = get_str(state, "dir")

        # Prefixes may legitimately be empty, so only a missing key falls back.
        tag_prefix = naming.get("tag_prefix")

        return cls(
            defaults=DefaultsConfig(
                remote=get_str(defaults, "remote") or DEFAULT_REMOTE,
                source_branch=get_str(defaults, "source_branch") or DEFAULT_SOURCE_BRANCH,
                target_branch=get_str(defaults, "target_branch") or DEFAULT_TARGET_BRANCH,
                development_branch=get_str(defaults, "development_branch")
                or DEFAULT_DEVELOPMENT_BRANCH,
            ),
            naming=NamingConfig(
                tag_prefix=tag_prefix if isinstance(tag_prefix, str) else DEFAULT_TAG_PREFIX,
                release_branch_prefix=get_str(naming, "release_branch_prefix")
                or DEFAULT_RELEASE_BRANCH_PREFIX,
                merge_branch_prefix=get_str(naming, "merge_branch_prefix")
                or DEFAULT_MERGE_BRANCH_PREFIX,
                commit_message=get_str(naming, "commit_message") or DEFAULT_COMMIT_MESSAGE,
            ),
            state_dir=Path(state_dir).expanduser() if state_dir else None,
        )


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling read and parse errors."""
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load and parse configuration from a TOML file.

    Args:
        path: Path to the config file

    Returns:
        Ok(Config) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result
    return Ok(Config.from_dict(result.value))


def load_config_or_default(path: Path) -> Result[Config, ConfigError]:
    """Load config from path, or return the default config if it doesn't exist.

    A file that exists but cannot be parsed is still an error.
    """
    if not path.exists():
        return Ok(Config())
    return load_config(path)
