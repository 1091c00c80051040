"""Intent journal for backup-then-swap updates.

An update renames two files in sequence. Before the first rename an intent
document is written next to the backups; it is rewritten after the first
rename and deleted after the second. An intent still on disk after a restart
means the update was interrupted, and the recorded paths are enough to
finish or undo it.

Each intent is one JSON file in ``<backup dir>/.journal/<intent_id>.json``.
"""

import json
import os
import tempfile
import uuid
from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Literal

from modkeeper.core.constants import JOURNAL_DIRNAME
from modkeeper.core.errors import FileIOError, InvalidStateError
from modkeeper.utils.debug import debug

SCHEMA_VERSION = "1.0"

Stage = Literal["pending", "backed_up"]


@dataclass
class UpdateIntent:
    """Paths and progress of one in-flight update."""

    old_path: Path
    backup_path: Path
    new_temp_path: Path
    dest_path: Path
    new_filename: str
    stage: Stage = "pending"
    intent_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    created_at: str = field(default_factory=lambda: datetime.now(UTC).isoformat())
    journal_path: Path | None = field(default=None, compare=False)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data.pop("journal_path")
        for key in ("old_path", "backup_path", "new_temp_path", "dest_path"):
            data[key] = str(data[key])
        data["type"] = "update_intent"
        data["schema_version"] = SCHEMA_VERSION
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any], journal_path: Path | None = None) -> "UpdateIntent":
        try:
            stage = data["stage"]
            if stage not in ("pending", "backed_up"):
                raise ValueError(f"unknown stage {stage!r}")
            return cls(
                old_path=Path(data["old_path"]),
                backup_path=Path(data["backup_path"]),
                new_temp_path=Path(data["new_temp_path"]),
                dest_path=Path(data["dest_path"]),
                new_filename=str(data["new_filename"]),
                stage=stage,
                intent_id=str(data["intent_id"]),
                created_at=str(data["created_at"]),
                journal_path=journal_path,
            )
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidStateError(
                f"Malformed update intent ({e})", path=journal_path
            ) from e


class UpdateJournal:
    """Reads and writes update intents for one backup directory."""

    def __init__(self, backup_dir: Path) -> None:
        """Initialize journal.

        Args:
            backup_dir: Backup sidecar directory the intents live in
        """
        self.backup_dir = Path(backup_dir)
        self.directory = self.backup_dir / JOURNAL_DIRNAME

    def _ensure_journal_directory(self) -> None:
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FileIOError.from_os_error(
                "Cannot create journal directory", e, self.directory
            ) from e

    def path_for(self, intent: UpdateIntent) -> Path:
        return self.directory / f"{intent.intent_id}.json"

    def record(self, intent: UpdateIntent) -> Path:
        """Persist an intent, replacing any previous version of it.

        The document is written to a temporary file, fsynced and renamed into
        place, so a crash never leaves a half-written intent.

        Returns:
            Path of the intent file
        """
        self._ensure_journal_directory()
        target = self.path_for(intent)
        payload = json.dumps(intent.to_dict(), ensure_ascii=False, indent=2)

        fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=".intent-", suffix=".part")
        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
                handle.flush()
                os.fsync(handle.fileno())
            tmp_path.replace(target)
        except OSError as e:
            tmp_path.unlink(missing_ok=True)
            raise FileIOError.from_os_error("Cannot write update intent", e, target) from e

        intent.journal_path = target
        debug(f"Recorded intent {intent.intent_id} ({intent.stage}) at {target}")
        return target

    def mark_backed_up(self, intent: UpdateIntent) -> None:
        """Record that the old file has been moved into the backup directory."""
        intent.stage = "backed_up"
        self.record(intent)

    def clear(self, intent: UpdateIntent) -> None:
        """Delete an intent once its update is complete or undone."""
        target = self.path_for(intent)
        try:
            target.unlink(missing_ok=True)
        except OSError as e:
            raise FileIOError.from_os_error("Cannot remove update intent", e, target) from e
        intent.journal_path = None
        debug(f"Cleared intent {intent.intent_id}")

    def pending(self) -> list[UpdateIntent]:
        """Load every intent left on disk, oldest first.

        Raises:
            InvalidStateError: If an intent file is not valid JSON or lacks fields
            FileIOError: If the journal cannot be read
        """
        if not self.directory.is_dir():
            return []

        intents: list[UpdateIntent] = []
        try:
            files = sorted(self.directory.glob("*.json"))
            for path in files:
                try:
                    data = json.loads(path.read_text(encoding="utf-8"))
                except json.JSONDecodeError as e:
                    raise InvalidStateError(
                        f"Update intent is not valid JSON ({e.msg})", path=path
                    ) from e
                if not isinstance(data, dict):
                    raise InvalidStateError("Update intent is not a JSON object", path=path)
                intents.append(UpdateIntent.from_dict(data, journal_path=path))
        except OSError as e:
            raise FileIOError.from_os_error("Cannot read journal", e, self.directory) from e

        return sorted(intents, key=lambda i: i.created_at)
