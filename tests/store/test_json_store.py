"""Tests for the installed-mods and profiles JSON documents."""

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from modkeeper.core.errors import InvalidStateError
from modkeeper.store import InstalledMod, ModStore, Profile, ProfilesData


def _mod(**overrides: object) -> InstalledMod:
    fields: dict[str, object] = {
        "id": 1,
        "provider": "curseforge",
        "project_id": 1234,
        "slug": "better-maps",
        "name": "Better Maps",
        "installed_file_id": 5678,
        "installed_filename": "better-maps-1.2.jar",
        "installed_at": "2026-01-01T00:00:00Z",
        "enabled": True,
    }
    fields.update(overrides)
    return InstalledMod(**fields)  # type: ignore[arg-type]


class TestInstalledMods:
    def test_missing_file_means_no_mods(self, tmp_path: Path) -> None:
        assert ModStore(tmp_path).read_installed_mods() == []

    def test_written_with_camel_case_keys(self, tmp_path: Path) -> None:
        store = ModStore(tmp_path / "data")

        store.write_installed_mods([_mod()])

        (record,) = json.loads(store.installed_mods_path.read_text())
        assert record["installedFilename"] == "better-maps-1.2.jar"
        assert record["projectId"] == 1234
        assert record["pinned"] is False
        assert "installed_filename" not in record

    def test_reads_back_what_was_written(self, tmp_path: Path) -> None:
        store = ModStore(tmp_path)
        mods = [
            _mod(),
            _mod(
                id=2,
                provider="orbis",
                project_id=None,
                resource_id="res-9",
                installed_file_id="3:0",
                installed_filename="orbis-mod.zip",
                enabled=False,
                pinned=True,
            ),
        ]

        store.write_installed_mods(mods)

        assert store.read_installed_mods() == mods

    def test_loads_documents_written_by_the_desktop_app(self, tmp_path: Path) -> None:
        (tmp_path / "installed_mods.json").write_text(
            json.dumps(
                [
                    {
                        "provider": "orbis",
                        "resourceId": "abc",
                        "slug": "abc",
                        "name": "Abc",
                        "installedFileId": "1:2",
                        "installedFilename": "abc.jar",
                        "installedAt": "2026-01-01T00:00:00Z",
                        "enabled": False,
                    }
                ]
            )
        )

        (mod,) = ModStore(tmp_path).read_installed_mods()

        assert mod.resource_id == "abc"
        assert mod.installed_file_id == "1:2"
        assert mod.pinned is False

    def test_corrupt_json(self, tmp_path: Path) -> None:
        (tmp_path / "installed_mods.json").write_text("[{")

        with pytest.raises(InvalidStateError):
            ModStore(tmp_path).read_installed_mods()

    def test_schema_mismatch(self, tmp_path: Path) -> None:
        (tmp_path / "installed_mods.json").write_text(json.dumps([{"provider": "steam"}]))

        with pytest.raises(InvalidStateError) as exc_info:
            ModStore(tmp_path).read_installed_mods()

        assert exc_info.value.path == tmp_path / "installed_mods.json"

    def test_empty_filename_rejected(self) -> None:
        with pytest.raises(ValidationError):
            _mod(installed_filename="  ")


class TestProfiles:
    def test_missing_file_gives_defaults(self, tmp_path: Path) -> None:
        data = ModStore(tmp_path).read_profiles()

        assert data.next_id == 1
        assert data.active_profile_id is None
        assert data.profiles == []

    def test_round_trip(self, tmp_path: Path) -> None:
        store = ModStore(tmp_path)
        data = ProfilesData(
            next_id=3,
            active_profile_id=2,
            profiles=[
                Profile(id=1, name="Vanilla+", created_at="2026-01-01T00:00:00Z"),
                Profile(
                    id=2,
                    name="Survival",
                    created_at="2026-01-02T00:00:00Z",
                    enabled_mod_ids=[1, 4],
                ),
            ],
        )

        store.write_profiles(data)

        raw = json.loads(store.profiles_path.read_text())
        assert raw["nextId"] == 3
        assert raw["activeProfileId"] == 2
        assert raw["profiles"][1]["enabledModIds"] == [1, 4]
        assert store.read_profiles() == data

    def test_corrupt_profiles(self, tmp_path: Path) -> None:
        (tmp_path / "profiles.json").write_text('{"profiles": "nope"}')

        with pytest.raises(InvalidStateError):
            ModStore(tmp_path).read_profiles()


class TestRecordRename:
    def test_updates_matching_record(self, tmp_path: Path) -> None:
        store = ModStore(tmp_path)
        store.write_installed_mods([_mod(), _mod(id=2, installed_filename="other.jar")])

        updated = store.record_rename("better-maps-1.2.jar", "better-maps-1.3.jar")

        assert updated is not None and updated.id == 1
        names = [m.installed_filename for m in store.read_installed_mods()]
        assert names == ["better-maps-1.3.jar", "other.jar"]

    def test_filters_on_enabled_state(self, tmp_path: Path) -> None:
        """An enabled and a disabled copy can share a filename."""
        store = ModStore(tmp_path)
        store.write_installed_mods([_mod(id=1), _mod(id=2, enabled=False)])

        updated = store.record_rename(
            "better-maps-1.2.jar", "better-maps-1.2 (1).jar", enabled=True, was_enabled=False
        )

        assert updated is not None and updated.id == 2
        mods = store.read_installed_mods()
        assert [(m.installed_filename, m.enabled) for m in mods] == [
            ("better-maps-1.2.jar", True),
            ("better-maps-1.2 (1).jar", True),
        ]

    def test_no_match_writes_nothing(self, tmp_path: Path) -> None:
        store = ModStore(tmp_path)

        assert store.record_rename("missing.jar", "x.jar") is None
        assert not store.installed_mods_path.exists()
