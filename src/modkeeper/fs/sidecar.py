"""Active/disabled sidecar directories.

Disabling a mod moves its file from ``Mods`` into the sibling
``Mods.disabled``; enabling moves it back. The sidecar is created lazily and
never removed.
"""

import os
from pathlib import Path

import structlog

from modkeeper.core.constants import DISABLED_SUFFIX
from modkeeper.fs.mover import move_file
from modkeeper.fs.paths import DirResult, coerce_path, ensure_directory, sidecar_path

logger = structlog.get_logger(__name__)

SidecarResult = DirResult


def ensure_sidecar(base_dir: str | os.PathLike[str], suffix: str) -> SidecarResult:
    """Ensure the sidecar of base_dir for suffix exists.

    Args:
        base_dir: Active directory the sidecar belongs to
        suffix: Sidecar suffix, e.g. ``.disabled``

    Returns:
        SidecarResult with the sidecar path and whether it was just created

    Raises:
        InvalidInputError: If base_dir or suffix is empty
        InvalidStateError: If the sidecar path exists but is not a directory
        FileIOError: If the directory cannot be created
    """
    base = coerce_path(base_dir, "Base directory")
    result = ensure_directory(sidecar_path(base, suffix), "Sidecar directory")
    if result.created:
        logger.info("sidecar.created", path=str(result.path))
    return result


def disabled_dir_for(active_dir: str | os.PathLike[str]) -> Path:
    """Return the disabled-mods directory paired with active_dir."""
    return sidecar_path(coerce_path(active_dir, "Mods directory"), DISABLED_SUFFIX)


def set_enabled(
    file_path: str | os.PathLike[str],
    active_dir: str | os.PathLike[str],
    enabled: bool,
) -> Path:
    """Move a mod file into the active or the disabled directory.

    The filename is kept unless the target directory already holds a file
    of that name, in which case a ``(n)`` suffix is added.

    Args:
        file_path: Current location of the mod file
        active_dir: The active Mods directory
        enabled: True to move into active_dir, False into its sidecar

    Returns:
        Final path of the file, to be persisted by the caller
    """
    source = coerce_path(file_path, "Mod file path")
    active = coerce_path(active_dir, "Mods directory")
    disabled = ensure_sidecar(active, DISABLED_SUFFIX).path

    target_dir = active if enabled else disabled
    final = move_file(source, target_dir / source.name)
    logger.info("sidecar.toggled", file=source.name, enabled=enabled, path=str(final))
    return final
