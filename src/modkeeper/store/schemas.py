"""Pydantic schemas for persisted mod and profile records.

Records are stored as camelCase JSON so files written by earlier releases of
the desktop app load unchanged:
- InstalledMod: one installed (enabled or disabled) mod file
- Profile / ProfilesData: named sets of enabled mods
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class _Record(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class InstalledMod(_Record):
    """An installed mod file and where it came from.

    Attributes:
        id: Local record identifier
        provider: Source catalogue
        project_id: CurseForge project identifier
        resource_id: Orbis resource identifier
        installed_file_id: Provider file id (CurseForge int, Orbis "version:index")
        installed_filename: Current filename inside the Mods or Mods.disabled directory
        installed_at: ISO-8601 install timestamp
        enabled: Whether the file lives in the active directory
        pinned: Excluded from update checks
    """

    id: int | None = None
    provider: Literal["curseforge", "orbis"]
    project_id: int | None = None
    resource_id: str | None = None
    slug: str
    name: str
    installed_file_id: int | str | None = None
    installed_filename: str
    installed_at: str
    source_url: str | None = None
    enabled: bool
    pinned: bool = False

    @field_validator("installed_filename")
    @classmethod
    def validate_filename(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("installed_filename cannot be empty")
        return v


class Profile(_Record):
    """A named selection of enabled mods."""

    id: int
    name: str
    created_at: str
    enabled_mod_ids: list[int] = Field(default_factory=list)


class ProfilesData(_Record):
    """All profiles plus the id counter and active selection."""

    next_id: int = 1
    active_profile_id: int | None = None
    profiles: list[Profile] = Field(default_factory=list)
