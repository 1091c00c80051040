"""Atomic single-file moves with collision avoidance.

A move is one rename on the same volume. Cross-volume moves are reported as
errors instead of falling back to copy+delete, so a move is never observed
half-done.
"""

import errno
import os
from pathlib import Path

import structlog

from modkeeper.core.errors import FileIOError, InvalidSourceError, NotFoundError
from modkeeper.fs.paths import coerce_path, ensure_parent_dir
from modkeeper.fs.unique import allocate_unique
from modkeeper.utils.debug import debug

logger = structlog.get_logger(__name__)


def rename_file(src: Path, dst: Path) -> None:
    """Rename src onto dst, replacing dst if it exists.

    Args:
        src: Existing file
        dst: Destination path on the same volume

    Raises:
        FileIOError: If the OS refuses the rename. Cross-device renames get
            a dedicated message since they are never retried as a copy.
    """
    try:
        os.replace(src, dst)
    except OSError as e:
        if e.errno == errno.EXDEV:
            raise FileIOError.from_os_error(
                "Cannot move across volumes", e, src, destination=dst
            ) from e
        raise FileIOError.from_os_error("Rename failed", e, src, destination=dst) from e
    debug(f"Renamed: {src} -> {dst}")


def move_file(from_path: str | os.PathLike[str], to_path: str | os.PathLike[str]) -> Path:
    """Move a file, picking a free name if the destination is taken.

    Missing parent directories of the destination are created. An existing
    destination is never overwritten; the file lands at ``name (n).ext``
    instead.

    Args:
        from_path: File to move
        to_path: Desired destination

    Returns:
        The path the file actually ended up at

    Raises:
        InvalidInputError: If either path is empty
        NotFoundError: If the source does not exist
        InvalidSourceError: If the source is a directory
        FileIOError: If directories cannot be created or the rename fails
    """
    src = coerce_path(from_path, "Source path")
    dst = coerce_path(to_path, "Destination path")

    if not src.exists():
        raise NotFoundError("Source file does not exist", path=src)
    if src.is_dir():
        raise InvalidSourceError("Source is a directory", path=src)

    ensure_parent_dir(dst)
    final = allocate_unique(dst)

    try:
        rename_file(src, final)
    except FileIOError as e:
        logger.warning("move.failed", src=str(src), dst=str(final), reason=e.message)
        raise

    logger.info(
        "move.applied",
        src=str(src),
        dst=str(final),
        renamed=final != dst,
    )
    return final
