"""Pytest configuration and fixtures for modkeeper tests."""

import os
from pathlib import Path

import pytest


def _load_project_dotenv() -> None:
    """Load environment variables from the project .env file if present."""

    repo_root = Path(__file__).resolve().parents[1]
    env_path = repo_root / ".env"
    if not env_path.exists():
        return

    for raw_line in env_path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue

        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if "#" in value:
            value = value.split("#", 1)[0].strip()

        if key and value and key not in os.environ:
            os.environ[key] = value


_load_project_dotenv()


@pytest.fixture
def mods_dir(tmp_path: Path) -> Path:
    """An existing, empty active Mods directory."""
    path = tmp_path / "UserData" / "Mods"
    path.mkdir(parents=True)
    return path


@pytest.fixture(autouse=True)
def data_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep the record store inside the test's temporary directory."""
    path = tmp_path / "data"
    monkeypatch.setenv("MODKEEPER_DATA_DIR", str(path))
    return path
