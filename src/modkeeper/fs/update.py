"""Backup-then-swap update protocol.

Replacing an installed mod with a freshly downloaded version takes two
renames:

1. the old file moves into the backup sidecar (``Mods.backup/<name>.bak``),
   collision-suffixed so earlier backups survive;
2. the new file moves into the destination directory under its new name,
   overwriting whatever already has that exact name.

Each rename is atomic, the pair is not. There is no automatic rollback: if
the second rename fails the old version is only in the backup directory and
the mod is missing from the active directory. The intent journal records
enough to detect that state after a restart and either finish the update
(:func:`resume_update`) or put the old file back (:func:`restore_backup`).
"""

import os
from enum import Enum
from pathlib import Path
from typing import Any

import structlog

from modkeeper.core.constants import BACKUP_FILE_SUFFIX, BACKUP_SUFFIX
from modkeeper.core.errors import (
    FileIOError,
    InvalidInputError,
    InvalidStateError,
    NotFoundError,
)
from modkeeper.fs.journal import UpdateIntent, UpdateJournal
from modkeeper.fs.mover import move_file, rename_file
from modkeeper.fs.paths import coerce_path, ensure_directory, get_file_stats, sidecar_path
from modkeeper.fs.unique import allocate_unique


class RecoveryState(str, Enum):
    """Where an interrupted update stopped, judged from the filesystem."""

    NOT_STARTED = "not_started"
    BACKED_UP = "backed_up"
    COMPLETED = "completed"
    INCONSISTENT = "inconsistent"


def backup_dir_for(dest_dir: Path) -> Path:
    """Return the backup sidecar paired with dest_dir."""
    return sidecar_path(dest_dir, BACKUP_SUFFIX)


def _validate_filename(new_filename: str) -> str:
    name = new_filename.strip()
    if not name:
        raise InvalidInputError("New filename is empty")
    if name in (".", "..") or "/" in name or "\\" in name:
        raise InvalidInputError(f"New filename is not a plain file name: {name!r}")
    return name


class BackupSwapUpdater:
    """Swaps an installed mod file for a new one, keeping a backup.

    Args:
        journal: Write intent markers around the swap (default True)
        logger: Optional structlog logger instance
    """

    def __init__(self, journal: bool = True, logger: Any = None) -> None:
        self.journal_enabled = journal
        self._logger = logger or structlog.get_logger(__name__)

    def apply(
        self,
        old_path: str | os.PathLike[str],
        new_temp_path: str | os.PathLike[str],
        dest_dir: str | os.PathLike[str],
        new_filename: str,
    ) -> str:
        """Replace old_path with new_temp_path, backing up the old file.

        Args:
            old_path: Currently installed file
            new_temp_path: Downloaded replacement
            dest_dir: Directory the replacement goes into
            new_filename: Name the replacement gets in dest_dir

        Returns:
            The (trimmed) new filename, for the caller to persist

        Raises:
            NotFoundError: If old_path or new_temp_path does not exist
            InvalidInputError: If new_filename is empty or not a plain name
            FileIOError: If a directory cannot be created or a rename fails.
                When the final rename fails the old file stays in the
                backup directory and its path is in ``detail["backup_path"]``.
        """
        return self.run(old_path, new_temp_path, dest_dir, new_filename).new_filename

    def run(
        self,
        old_path: str | os.PathLike[str],
        new_temp_path: str | os.PathLike[str],
        dest_dir: str | os.PathLike[str],
        new_filename: str,
    ) -> UpdateIntent:
        """Same as :meth:`apply` but returns the full record of what moved where."""
        old = coerce_path(old_path, "Existing mod path")
        new_temp = coerce_path(new_temp_path, "New file path")
        dest = coerce_path(dest_dir, "Destination directory")

        if not old.exists():
            raise NotFoundError("Existing mod file not found", path=old)
        if not new_temp.exists():
            raise NotFoundError("New downloaded file not found", path=new_temp)
        name = _validate_filename(new_filename)

        backup_dir = backup_dir_for(dest)
        ensure_directory(backup_dir, "Backup directory")
        backup_path = allocate_unique(backup_dir / f"{old.name}{BACKUP_FILE_SUFFIX}")

        intent = UpdateIntent(
            old_path=old,
            backup_path=backup_path,
            new_temp_path=new_temp,
            dest_path=dest / name,
            new_filename=name,
        )
        log = self._logger.bind(
            intent_id=intent.intent_id,
            old_path=str(old),
            dest_path=str(intent.dest_path),
        )
        journal = UpdateJournal(backup_dir) if self.journal_enabled else None
        if journal is not None:
            journal.record(intent)

        try:
            rename_file(old, backup_path)
        except FileIOError:
            # nothing moved, the intent is moot
            if journal is not None:
                journal.clear(intent)
            log.warning("update.backup_failed", backup_path=str(backup_path))
            raise

        log.info("update.backed_up", backup_path=str(backup_path), **get_file_stats(backup_path))
        if journal is not None:
            journal.mark_backed_up(intent)
        else:
            intent.stage = "backed_up"

        _swap_in(intent, log)

        if journal is not None:
            journal.clear(intent)
        return intent


def _swap_in(intent: UpdateIntent, log: Any) -> None:
    # Overwrites an existing file of the same name on purpose.
    try:
        rename_file(intent.new_temp_path, intent.dest_path)
    except FileIOError as e:
        e.detail["backup_path"] = str(intent.backup_path)
        e.detail["new_temp_path"] = str(intent.new_temp_path)
        log.error(
            "update.partial",
            backup_path=str(intent.backup_path),
            new_temp_path=str(intent.new_temp_path),
            reason=e.message,
        )
        raise

    log.info("update.applied", new_filename=intent.new_filename)


def apply_update(
    old_path: str | os.PathLike[str],
    new_temp_path: str | os.PathLike[str],
    dest_dir: str | os.PathLike[str],
    new_filename: str,
) -> str:
    """Run the backup-then-swap update with journaling enabled."""
    return BackupSwapUpdater().apply(old_path, new_temp_path, dest_dir, new_filename)


def pending_updates(dest_dir: str | os.PathLike[str]) -> list[UpdateIntent]:
    """List interrupted updates recorded for dest_dir."""
    dest = coerce_path(dest_dir, "Destination directory")
    return UpdateJournal(backup_dir_for(dest)).pending()


def _exists(path: Path) -> bool:
    return path.exists() or path.is_symlink()


def inspect_intent(intent: UpdateIntent) -> RecoveryState:
    """Classify an interrupted update from the current filesystem state."""
    old_present = _exists(intent.old_path)
    backup_present = _exists(intent.backup_path)
    temp_present = _exists(intent.new_temp_path)
    dest_present = _exists(intent.dest_path)
    same_name = intent.old_path == intent.dest_path

    if temp_present and old_present and not backup_present:
        return RecoveryState.NOT_STARTED
    if temp_present and backup_present and not old_present:
        return RecoveryState.BACKED_UP
    if not temp_present and dest_present and backup_present and (same_name or not old_present):
        return RecoveryState.COMPLETED
    return RecoveryState.INCONSISTENT


def _journal_for(intent: UpdateIntent) -> UpdateJournal:
    return UpdateJournal(intent.backup_path.parent)


def resume_update(intent: UpdateIntent, logger: Any = None) -> str:
    """Finish an interrupted update from wherever it stopped.

    Returns:
        The new filename

    Raises:
        InvalidStateError: If the filesystem matches no known intermediate state
        FileIOError: If a rename fails again (the intent is kept)
    """
    log = (logger or structlog.get_logger(__name__)).bind(intent_id=intent.intent_id)
    journal = _journal_for(intent)
    state = inspect_intent(intent)

    if state is RecoveryState.INCONSISTENT:
        raise InvalidStateError(
            "Interrupted update cannot be resumed automatically",
            path=intent.journal_path or journal.path_for(intent),
            detail=intent.to_dict(),
        )

    if state is RecoveryState.NOT_STARTED:
        rename_file(intent.old_path, intent.backup_path)
        journal.mark_backed_up(intent)
        log.info("update.backed_up", backup_path=str(intent.backup_path), resumed=True)
        state = RecoveryState.BACKED_UP

    if state is RecoveryState.BACKED_UP:
        _swap_in(intent, log)

    journal.clear(intent)
    log.info("update.resumed", new_filename=intent.new_filename)
    return intent.new_filename


def restore_backup(intent: UpdateIntent, logger: Any = None) -> Path:
    """Undo an interrupted update by moving the backup back into place.

    The backup is moved with :func:`move_file`, so if something now occupies
    the old path the backup lands next to it under a ``(n)`` name. The
    downloaded temp file is left untouched.

    Returns:
        Path the old file is now at
    """
    log = (logger or structlog.get_logger(__name__)).bind(intent_id=intent.intent_id)
    journal = _journal_for(intent)
    state = inspect_intent(intent)

    if state is RecoveryState.NOT_STARTED:
        journal.clear(intent)
        return intent.old_path

    if not _exists(intent.backup_path):
        raise NotFoundError("Backup file not found", path=intent.backup_path)

    final = move_file(intent.backup_path, intent.old_path)
    journal.clear(intent)
    log.info("update.restored", path=str(final))
    return final
