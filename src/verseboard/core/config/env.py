"""Environment loading helpers.

verseboard reads VERSEBOARD_* settings from the process environment. To make
per-user and per-project settings convenient they can also live in .env files:
- OS environment (highest precedence)
- Project environment files (.env, .env.local)
- User environment file (~/.config/verseboard/.env)

A .env file never overrides a variable that is already present in the
process environment.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable

from dotenv import dotenv_values


def _read_env(path: Path) -> dict[str, str]:
    if not path.exists():
        return {}
    values = dotenv_values(path)
    out: dict[str, str] = {}
    for k, v in values.items():
        if k is None or v is None:
            continue
        out[str(k)] = str(v)
    return out


def load_layered_env(
    *,
    project_dir: Path | None = None,
    user_env_paths: Iterable[Path] | None = None,
    project_env_paths: Iterable[Path] | None = None,
) -> set[str]:
    """Load environment variables from user + project .env files.

    Args:
        project_dir: base directory for project env paths (defaults to cwd)
        user_env_paths: explicit user env file paths
        project_env_paths: explicit project env file paths

    Returns:
        Names of the variables that were set from .env files

    Notes:
        Keys set from the user env may be overridden by the project env;
        keys already present in the OS environment never are.
    """
    if project_dir is None:
        project_dir = Path.cwd()

    if user_env_paths is None:
        xdg_home = Path(os.environ.get("XDG_CONFIG_HOME", str(Path.home() / ".config")))
        user_env_paths = [xdg_home / "verseboard" / ".env"]

    if project_env_paths is None:
        project_env_paths = [project_dir / ".env", project_dir / ".env.local"]

    # User env (lowest priority)
    loaded: set[str] = set()
    for p in user_env_paths:
        for k, v in _read_env(Path(p)).items():
            if k not in os.environ:
                os.environ[k] = v
                loaded.add(k)

    # Project env (overrides user-set values, but never overrides OS env)
    for p in project_env_paths:
        for k, v in _read_env(Path(p)).items():
            if k not in os.environ or k in loaded:
                os.environ[k] = v
                loaded.add(k)

    return loaded
