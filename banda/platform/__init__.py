"""Platform helpers: subprocesses, files and user directories."""

from .files import atomic_write_text, delete_if_exists, touch
from .paths import user_config_dir, user_state_dir
from .process import ProcessError, run

__all__ = [
    "ProcessError",
    "atomic_write_text",
    "delete_if_exists",
    "run",
    "touch",
    "user_config_dir",
    "user_state_dir",
]
