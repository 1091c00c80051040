"""Persistence of installed-mod and profile records."""

from modkeeper.store.json_store import ModStore
from modkeeper.store.schemas import InstalledMod, Profile, ProfilesData

__all__ = ["InstalledMod", "ModStore", "Profile", "ProfilesData"]
