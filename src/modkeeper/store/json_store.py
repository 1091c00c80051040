"""Whole-document JSON persistence for mod and profile records.

Each document is read in full, changed by the caller and written back in
full. Writes go through an atomic temp-file replace.
"""

import json
from pathlib import Path
from typing import Any

import structlog
from pydantic import TypeAdapter, ValidationError

from modkeeper.core.constants import INSTALLED_MODS_FILENAME, PROFILES_FILENAME
from modkeeper.core.errors import InvalidStateError
from modkeeper.fs.paths import read_text_file, write_text_file
from modkeeper.store.schemas import InstalledMod, ProfilesData

logger = structlog.get_logger(__name__)

_MODS_ADAPTER = TypeAdapter(list[InstalledMod])


class ModStore:
    """Reads and writes the installed-mods and profiles documents.

    Args:
        data_dir: Directory holding the JSON documents
    """

    def __init__(self, data_dir: Path) -> None:
        self.data_dir = Path(data_dir)

    @property
    def installed_mods_path(self) -> Path:
        return self.data_dir / INSTALLED_MODS_FILENAME

    @property
    def profiles_path(self) -> Path:
        return self.data_dir / PROFILES_FILENAME

    def _load(self, path: Path) -> Any:
        text = read_text_file(path)
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise InvalidStateError(f"Corrupt JSON document ({e.msg})", path=path) from e

    def read_installed_mods(self) -> list[InstalledMod]:
        """Load all installed-mod records; a missing file means none."""
        path = self.installed_mods_path
        if not path.exists():
            return []
        try:
            return _MODS_ADAPTER.validate_python(self._load(path))
        except ValidationError as e:
            raise InvalidStateError(
                f"Installed mods document does not match schema ({e.error_count()} errors)",
                path=path,
            ) from e

    def write_installed_mods(self, mods: list[InstalledMod]) -> None:
        payload = _MODS_ADAPTER.dump_python(mods, by_alias=True, mode="json")
        write_text_file(self.installed_mods_path, json.dumps(payload, indent=2))

    def record_rename(
        self,
        old_filename: str,
        new_filename: str,
        enabled: bool | None = None,
        was_enabled: bool | None = None,
    ) -> InstalledMod | None:
        """Point the record of an installed file at its new name.

        Args:
            old_filename: Filename the record currently holds
            new_filename: Filename the file now has
            enabled: New enabled state, unchanged if None
            was_enabled: Only match records in this state (a disabled and an
                enabled mod may share a filename)

        Returns:
            The updated record, or None if no record matched (nothing is written)
        """
        mods = self.read_installed_mods()
        for mod in mods:
            if mod.installed_filename != old_filename:
                continue
            if was_enabled is not None and mod.enabled != was_enabled:
                continue
            mod.installed_filename = new_filename
            if enabled is not None:
                mod.enabled = enabled
            self.write_installed_mods(mods)
            logger.info(
                "store.renamed",
                mod_id=mod.id,
                old_filename=old_filename,
                new_filename=new_filename,
            )
            return mod
        return None

    def read_profiles(self) -> ProfilesData:
        """Load profile data; a missing file yields an empty set."""
        path = self.profiles_path
        if not path.exists():
            return ProfilesData()
        try:
            return ProfilesData.model_validate(self._load(path))
        except ValidationError as e:
            raise InvalidStateError(
                f"Profiles document does not match schema ({e.error_count()} errors)",
                path=path,
            ) from e

    def write_profiles(self, data: ProfilesData) -> None:
        payload = data.model_dump(by_alias=True, mode="json")
        write_text_file(self.profiles_path, json.dumps(payload, indent=2))
