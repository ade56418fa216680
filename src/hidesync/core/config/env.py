"""Environment loading helpers.

hide-sync reads a handful of HIDE_SYNC_* variables (see loader._ENV_OVERRIDES).
Besides the process environment they can come from .env files:
- user env file ($XDG_CONFIG_HOME/hide-sync/.env)
- project env files (./.env, ./.env.local)

Only keys starting with HIDE_SYNC_ are taken from those files, so a project
.env written for some other tool never leaks into the process. A .env file
never overrides a variable already exported in the shell.

Precedence implemented here:
  os.environ (pre-existing) > project .env > user .env
"""

from __future__ import annotations

import os
from collections.abc import Iterable
from pathlib import Path

from dotenv import dotenv_values

from .loader import get_xdg_config_home

ENV_PREFIX = "HIDE_SYNC_"


def read_env_file(path: Path, prefix: str = ENV_PREFIX) -> dict[str, str]:
    """
    Read the hide-sync variables defined in one .env file.

    Args:
        path: .env file (missing files yield nothing)
        prefix: Only keys starting with this prefix are returned

    Returns:
        Mapping of variable name to value
    """
    if not path.exists():
        return {}
    return {
        key: value
        for key, value in dotenv_values(path).items()
        if key and value is not None and key.startswith(prefix)
    }


def load_layered_env(
    *,
    project_dir: Path | None = None,
    user_env_paths: Iterable[Path] | None = None,
    project_env_paths: Iterable[Path] | None = None,
    prefix: str = ENV_PREFIX,
) -> dict[str, str]:
    """Load hide-sync variables from user + project .env files.

    Args:
        project_dir: base directory for project env paths (defaults to cwd)
        user_env_paths: explicit user env file paths
        project_env_paths: explicit project env file paths
        prefix: only keys starting with this prefix are loaded

    Returns:
        The variables that were set in os.environ, with their values

    Notes:
        Project files are read last, so they win over user files, but
        neither ever replaces a key that was already in os.environ.
    """
    if project_dir is None:
        project_dir = Path.cwd()
    if user_env_paths is None:
        user_env_paths = [get_xdg_config_home() / "hide-sync" / ".env"]
    if project_env_paths is None:
        project_env_paths = [project_dir / ".env", project_dir / ".env.local"]

    layered: dict[str, str] = {}
    for path in [*user_env_paths, *project_env_paths]:
        layered.update(read_env_file(Path(path), prefix))

    applied = {key: value for key, value in layered.items() if key not in os.environ}
    os.environ.update(applied)
    return applied
