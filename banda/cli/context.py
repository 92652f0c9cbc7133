from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import typer

from banda.core.config import Config, load_config, load_config_or_default
from banda.core.errors import ErrorCode
from banda.core.result import Err
from banda.output.console import ConsoleProtocol, RichConsole
from banda.platform.paths import user_config_dir, user_state_dir

CONFIG_FILE = "config.toml"


@dataclass(frozen=True, slots=True)
class CLIContext:
    working_directory: Path
    config: Config
    state_dir: Path
    console: ConsoleProtocol


def build_context(config_path: Path | None = None) -> CLIContext:
    """Resolve config and state locations for a command.

    An explicit --config file must exist; the user-level config.toml is optional.
    """
    if config_path is not None:
        config_result = load_config(config_path.expanduser())
    else:
        config_result = load_config_or_default(user_config_dir() / CONFIG_FILE)

    if isinstance(config_result, Err):
        typer.echo(f"error: {config_result.error.message}", err=True)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    config = config_result.value
    return CLIContext(
        working_directory=Path.cwd(),
        config=config,
        state_dir=resolve_state_dir(config),
        console=RichConsole(),
    )


def resolve_state_dir(config: Config) -> Path:
    """BANDA_STATE_DIR, then [state] dir, then the user state directory."""
    if os.environ.get("BANDA_STATE_DIR") or config.state_dir is None:
        return user_state_dir()
    return config.state_dir.expanduser()
