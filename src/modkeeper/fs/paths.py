"""Path utilities for filesystem operations.

This module provides input validation, sidecar naming, directory probes and
the platform default-path lookup used by the rest of the engine.
"""

import os
import sys
import tempfile
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path
from typing import Any

from modkeeper.core.constants import SIDECAR_SUFFIXES, WRITE_PROBE_FILENAME
from modkeeper.core.errors import (
    FileIOError,
    InvalidInputError,
    InvalidStateError,
    NotFoundError,
)
from modkeeper.utils.debug import debug


@dataclass(frozen=True)
class DirResult:
    """Outcome of an idempotent directory creation."""

    path: Path
    created: bool


@dataclass(frozen=True)
class PathAccess:
    """Result of probing a candidate Mods directory."""

    exists: bool
    is_dir: bool
    writable: bool


class Platform(str, Enum):
    """Platform tags accepted by default_mods_paths()."""

    WINDOWS = "windows"
    MACOS = "macos"
    LINUX = "linux"
    OTHER = "other"


def coerce_path(value: str | os.PathLike[str], label: str = "Path") -> Path:
    """Convert user input to a Path, rejecting empty values.

    Strings are stripped of surrounding whitespace. The path is otherwise
    left untouched (no resolution), so callers get back exactly what they
    asked for when nothing needs renaming.

    Args:
        value: Path-like input
        label: Name used in the error message

    Returns:
        Path built from the trimmed input

    Raises:
        InvalidInputError: If the input is empty after trimming
    """
    text = os.fspath(value)
    if isinstance(text, str):
        text = text.strip()
    if not text:
        raise InvalidInputError(f"{label} is empty")
    return Path(text)


def sidecar_path(base_dir: Path, suffix: str) -> Path:
    """Derive a sibling directory name from base_dir by suffix convention.

    A known sidecar suffix on the base name is replaced, anything else gets
    the suffix appended: ``Mods`` -> ``Mods.disabled``,
    ``Mods.disabled`` -> ``Mods.backup``.

    Args:
        base_dir: Directory the sidecar belongs to
        suffix: Suffix with or without the leading dot

    Returns:
        Path of the sidecar directory

    Raises:
        InvalidInputError: If the suffix is empty or base_dir is a filesystem root
    """
    suffix = suffix.strip()
    if not suffix.lstrip("."):
        raise InvalidInputError("Sidecar suffix is empty")
    if not suffix.startswith("."):
        suffix = "." + suffix

    if not base_dir.name or ".." in base_dir.parts:
        # "." and ".." have no usable name; work from the absolute directory
        base_dir = Path(os.path.abspath(base_dir))

    name = base_dir.name
    if not name:
        raise InvalidInputError("Directory has no name to derive a sidecar from", path=base_dir)

    for known in SIDECAR_SUFFIXES:
        if name.endswith(known) and len(name) > len(known):
            name = name[: -len(known)]
            break

    return base_dir.with_name(name + suffix)


def ensure_directory(path: Path, label: str = "Path") -> DirResult:
    """Create a directory (and parents) unless it already exists.

    Args:
        path: Directory to ensure
        label: Name used in error messages

    Returns:
        DirResult telling whether the directory was created

    Raises:
        InvalidStateError: If the path exists but is not a directory
        FileIOError: If the directory cannot be created
    """
    if path.exists():
        if not path.is_dir():
            raise InvalidStateError(f"{label} exists but is not a directory", path=path)
        return DirResult(path=path, created=False)

    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise FileIOError.from_os_error(f"Cannot create {label.lower()}", e, path) from e

    debug(f"Created directory: {path}")
    return DirResult(path=path, created=True)


def ensure_dir(path: str | os.PathLike[str]) -> DirResult:
    """Ensure a Mods directory exists; creating an existing one is a no-op."""
    return ensure_directory(coerce_path(path), "Path")


def ensure_parent_dir(path: Path) -> None:
    """Ensure parent directory exists for a path.

    Raises:
        FileIOError: If the parent directory cannot be created
    """
    parent = path.parent
    if parent.is_dir():
        return
    try:
        parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise FileIOError.from_os_error(
            "Cannot create destination directory", e, parent
        ) from e


def check_path_access(path: str | os.PathLike[str]) -> PathAccess:
    """Report whether a path exists, is a directory and is writable.

    Writability is probed by creating and removing a marker file, which is
    the only check that holds across platforms and mount options.
    """
    try:
        p = coerce_path(path)
    except InvalidInputError:
        return PathAccess(exists=False, is_dir=False, writable=False)

    exists = p.exists()
    is_dir = exists and p.is_dir()
    writable = is_dir and _probe_writable(p)
    return PathAccess(exists=exists, is_dir=is_dir, writable=writable)


def _probe_writable(directory: Path) -> bool:
    probe = directory / WRITE_PROBE_FILENAME
    try:
        probe.write_bytes(b"")
    except OSError:
        return False
    try:
        probe.unlink()
    except OSError as e:
        debug(f"Could not remove write probe {probe}: {e}")
    return True


def list_file_names(dir_path: str | os.PathLike[str]) -> list[str]:
    """List the names of regular files directly inside a directory, sorted.

    Raises:
        InvalidStateError: If the path is not a directory
        FileIOError: If the directory cannot be read
    """
    directory = coerce_path(dir_path)
    if not directory.is_dir():
        raise InvalidStateError("Path is not a directory", path=directory)

    try:
        names = [entry.name for entry in directory.iterdir() if entry.is_file()]
    except OSError as e:
        raise FileIOError.from_os_error("Cannot list directory", e, directory) from e

    return sorted(names)


def write_text_file(path: str | os.PathLike[str], content: str) -> Path:
    """Write UTF-8 text atomically, creating parent directories.

    Returns:
        The written path

    Raises:
        FileIOError: If the file cannot be written
    """
    target = coerce_path(path)
    ensure_parent_dir(target)

    fd, tmp_name = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.", suffix=".part")
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(content)
            handle.flush()
            os.fsync(handle.fileno())
        tmp_path.replace(target)
    except OSError as e:
        tmp_path.unlink(missing_ok=True)
        raise FileIOError.from_os_error("Cannot write file", e, target) from e

    return target


def read_text_file(path: str | os.PathLike[str]) -> str:
    """Read a UTF-8 text file.

    Raises:
        NotFoundError: If the path is missing or not a regular file
        FileIOError: If the file cannot be read
    """
    source = coerce_path(path)
    if not source.is_file():
        raise NotFoundError("File does not exist or is not a file", path=source)
    try:
        return source.read_text(encoding="utf-8")
    except OSError as e:
        raise FileIOError.from_os_error("Cannot read file", e, source) from e


def get_file_stats(path: Path) -> dict[str, Any]:
    """Get file statistics for journal recording.

    Returns:
        Dictionary with size and mtime, empty if the path is unreadable
    """
    try:
        stat = path.stat()
        return {
            "size": stat.st_size,
            "mtime": datetime.fromtimestamp(stat.st_mtime, tz=UTC).isoformat(),
        }
    except OSError:
        return {}


def current_platform() -> Platform:
    """Map the running interpreter's sys.platform to a Platform tag."""
    if sys.platform.startswith("win"):
        return Platform.WINDOWS
    if sys.platform == "darwin":
        return Platform.MACOS
    if sys.platform.startswith("linux"):
        return Platform.LINUX
    return Platform.OTHER


_GAME_SUBPATH = ("Hytale", "UserData", "Mods")
_FLATPAK_DATA = (".var", "app", "com.hypixel.HytaleLauncher", "data")


def default_mods_paths(platform: Platform, env: Mapping[str, str]) -> list[Path]:
    """Return candidate default Mods directories for a platform.

    Pure function: the platform tag and the environment are injected, so the
    result only depends on its arguments. Candidates whose environment
    variable is unset are skipped; duplicates are dropped keeping order.

    Args:
        platform: Platform tag
        env: Environment mapping (usually os.environ)

    Returns:
        Ordered list of candidate paths, possibly empty
    """
    candidates: list[Path] = []

    def add(base: str | None, *parts: str) -> None:
        if not base:
            return
        path = Path(base).joinpath(*parts, *_GAME_SUBPATH)
        if path not in candidates:
            candidates.append(path)

    if platform is Platform.WINDOWS:
        add(env.get("APPDATA"))
    elif platform is Platform.MACOS:
        add(env.get("HOME"), "Library", "Application Support")
    elif platform is Platform.LINUX:
        add(env.get("HOME"), *_FLATPAK_DATA)
        add(env.get("XDG_DATA_HOME"))
        add(env.get("HOME"), ".local", "share")

    return candidates
