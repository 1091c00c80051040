"""Collision-free name allocation.

Best-effort only: existence is checked here and acted on later by the
caller's rename, so a concurrent writer can still claim the same name.
"""

from pathlib import Path

from modkeeper.core.constants import MAX_UNIQUE_ATTEMPTS
from modkeeper.utils.debug import debug


def allocate_unique(target: Path, max_attempts: int = MAX_UNIQUE_ATTEMPTS) -> Path:
    """Return a path that does not exist yet, derived from target.

    ``mod.jar`` becomes ``mod (1).jar``, ``mod (2).jar`` and so on; names
    without an extension become ``mod (1)``. Only the last extension is split
    off, so ``mod.jar.bak`` becomes ``mod.jar (1).bak``.

    Args:
        target: Desired path
        max_attempts: Highest counter tried

    Returns:
        target itself if free, else the first free candidate. If every
        candidate is taken, target is returned unchanged and a later rename
        onto it will overwrite.
    """
    target = Path(target)
    if not _occupied(target):
        return target

    stem = target.stem or "file"
    suffix = target.suffix
    parent = target.parent

    for n in range(1, max_attempts + 1):
        candidate = parent / f"{stem} ({n}){suffix}"
        if not _occupied(candidate):
            debug(f"Allocated {candidate.name} for taken {target.name}")
            return candidate

    debug(f"Exhausted {max_attempts} candidates for {target}, reusing target")
    return target


def _occupied(path: Path) -> bool:
    # dangling symlinks count as taken
    return path.exists() or path.is_symlink()
