"""Filesystem operations for the mod file lifecycle.

This module provides collision-free naming, atomic moves, active/disabled
sidecar handling and the journaled backup-then-swap update protocol.
"""

from modkeeper.fs.journal import UpdateIntent, UpdateJournal
from modkeeper.fs.mover import move_file
from modkeeper.fs.paths import (
    DirResult,
    PathAccess,
    Platform,
    check_path_access,
    current_platform,
    default_mods_paths,
    ensure_dir,
    list_file_names,
    read_text_file,
    sidecar_path,
    write_text_file,
)
from modkeeper.fs.sidecar import SidecarResult, disabled_dir_for, ensure_sidecar, set_enabled
from modkeeper.fs.unique import allocate_unique
from modkeeper.fs.update import (
    BackupSwapUpdater,
    RecoveryState,
    apply_update,
    inspect_intent,
    pending_updates,
    restore_backup,
    resume_update,
)

__all__ = [
    "BackupSwapUpdater",
    "DirResult",
    "PathAccess",
    "Platform",
    "RecoveryState",
    "SidecarResult",
    "UpdateIntent",
    "UpdateJournal",
    "allocate_unique",
    "apply_update",
    "check_path_access",
    "current_platform",
    "default_mods_paths",
    "disabled_dir_for",
    "ensure_dir",
    "ensure_sidecar",
    "inspect_intent",
    "list_file_names",
    "move_file",
    "pending_updates",
    "read_text_file",
    "restore_backup",
    "resume_update",
    "set_enabled",
    "sidecar_path",
    "write_text_file",
]
