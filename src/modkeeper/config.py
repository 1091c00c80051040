"""Helpers for resolving configured directories.

Only the CLI reads the environment; the engine receives explicit paths.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path

from modkeeper.core.constants import ENV_DATA_DIR, ENV_MODS_DIR
from modkeeper.fs.paths import current_platform, default_mods_paths

__all__ = ["resolve_data_dir", "resolve_mods_dir"]


def resolve_data_dir(
    data_dir: str | Path | None = None, env: Mapping[str, str] | None = None
) -> Path:
    """Resolve the directory holding the JSON record store.

    Args:
        data_dir: Optional explicit directory

    Returns:
        Explicit value, else $MODKEEPER_DATA_DIR, else ~/.modkeeper
    """
    env = os.environ if env is None else env
    chosen: str | Path | None = data_dir
    env_path = env.get(ENV_DATA_DIR)
    if chosen is None and env_path:
        chosen = env_path
    if chosen is None:
        chosen = Path.home() / ".modkeeper"

    return Path(chosen).expanduser()


def resolve_mods_dir(
    mods_dir: str | Path | None = None, env: Mapping[str, str] | None = None
) -> Path | None:
    """Resolve the active Mods directory for CLI commands.

    Args:
        mods_dir: Optional explicit directory

    Returns:
        Explicit value, else $MODKEEPER_MODS_DIR, else the first platform
        default that exists, else None
    """
    env = os.environ if env is None else env
    if mods_dir is not None:
        return Path(mods_dir).expanduser()

    env_path = env.get(ENV_MODS_DIR)
    if env_path:
        return Path(env_path).expanduser()

    for candidate in default_mods_paths(current_platform(), env):
        if candidate.is_dir():
            return candidate
    return None
