"""Custom exceptions for modkeeper.

This module defines the closed set of error kinds raised by the file-lifecycle
engine. Every exception carries structured context (path, HTTP status) so
callers can branch on ``kind`` instead of parsing messages.
"""

from enum import Enum
from pathlib import Path
from typing import Any


class ErrorKind(str, Enum):
    """Classification of engine failures.

    Attributes:
        INVALID_INPUT: Empty or malformed path, URL or filename
        NOT_FOUND: A required source file does not exist
        INVALID_SOURCE: Source exists but is the wrong kind of entry
        INVALID_STATE: Existing filesystem entry conflicts with the operation
        IO_ERROR: Permission, cross-volume, disk-full and similar OS failures
        NETWORK_ERROR: Transport-level fetch failure
        REMOTE_ERROR: Server answered with a non-2xx status
    """

    INVALID_INPUT = "invalid_input"
    NOT_FOUND = "not_found"
    INVALID_SOURCE = "invalid_source"
    INVALID_STATE = "invalid_state"
    IO_ERROR = "io_error"
    NETWORK_ERROR = "network_error"
    REMOTE_ERROR = "remote_error"


class ModKeeperError(Exception):
    """Base exception for all modkeeper errors.

    Attributes:
        kind: Error classification
        message: Human-readable description
        path: Filesystem path the failure relates to, if any
        status: HTTP status code for remote failures
        detail: Extra structured context (errno, temp artifact path, ...)
    """

    kind: ErrorKind = ErrorKind.IO_ERROR

    def __init__(
        self,
        message: str,
        *,
        path: Path | str | None = None,
        status: int | None = None,
        detail: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.path = Path(path) if path is not None else None
        self.status = status
        self.detail = detail or {}

        text = message
        if self.path is not None:
            text += f": {self.path}"
        super().__init__(text)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for JSON output.

        Returns:
            Dictionary representation suitable for JSON responses
        """
        result: dict[str, Any] = {
            "error": self.kind.value,
            "message": self.message,
        }

        if self.path is not None:
            result["path"] = str(self.path)

        if self.status is not None:
            result["status"] = self.status

        if self.detail:
            result["detail"] = self.detail

        return result

    def __repr__(self) -> str:
        """Return repr string for debugging."""
        return (
            f"{type(self).__name__}(kind={self.kind.value!r}, "
            f"message={self.message!r}, path={self.path!r})"
        )


class InvalidInputError(ModKeeperError):
    """Raised for empty or malformed inputs (caller bug, not retryable)."""

    kind = ErrorKind.INVALID_INPUT


class NotFoundError(ModKeeperError):
    """Raised when a required source file is missing."""

    kind = ErrorKind.NOT_FOUND


class InvalidSourceError(ModKeeperError):
    """Raised when a move source is a directory rather than a file."""

    kind = ErrorKind.INVALID_SOURCE


class InvalidStateError(ModKeeperError):
    """Raised when an existing entry has the wrong type for the operation."""

    kind = ErrorKind.INVALID_STATE


class FileIOError(ModKeeperError):
    """Raised when an OS-level file operation fails.

    May be transient (disk full, locked file), so callers may retry.
    """

    kind = ErrorKind.IO_ERROR

    @classmethod
    def from_os_error(
        cls,
        message: str,
        exc: OSError,
        path: Path | str | None = None,
        **detail: Any,
    ) -> "FileIOError":
        """Build an error from an ``OSError`` keeping its errno and text."""
        info: dict[str, Any] = {"errno": exc.errno, "reason": exc.strerror or str(exc)}
        info.update({k: str(v) for k, v in detail.items() if v is not None})
        return cls(f"{message} ({info['reason']})", path=path, detail=info)


class NetworkError(ModKeeperError):
    """Raised for transport failures while fetching (DNS, reset, redirects)."""

    kind = ErrorKind.NETWORK_ERROR


class RemoteError(ModKeeperError):
    """Raised when the server answers with a non-2xx status."""

    kind = ErrorKind.REMOTE_ERROR

    def __init__(self, status: int, url: str, **kwargs: Any) -> None:
        self.url = url
        super().__init__(f"Download failed: HTTP {status} for {url}", status=status, **kwargs)
