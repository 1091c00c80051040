"""Tests for downloading into the mods directory."""

from __future__ import annotations

import errno
from collections.abc import Callable
from pathlib import Path
from unittest.mock import patch

import httpx
import pytest

from modkeeper.core.errors import (
    FileIOError,
    InvalidInputError,
    NetworkError,
    NotFoundError,
    RemoteError,
)
from modkeeper.net.fetcher import Fetcher, build_client, fetch_to_path, temp_path_for

Handler = Callable[[httpx.Request], httpx.Response]

_BODY = bytes(range(256)) * 64


def _fetcher(handler: Handler) -> Fetcher:
    return Fetcher(build_client(transport=httpx.MockTransport(handler)))


def _serve_body(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, content=_BODY)


class TestFetch:
    def test_downloads_exact_bytes(self, mods_dir: Path) -> None:
        """The file at the returned path holds exactly the response body."""
        with _fetcher(_serve_body) as fetcher:
            final = fetcher.fetch("https://cdn.example.com/foo.jar", mods_dir / "foo.jar")

        assert final == mods_dir / "foo.jar"
        assert final.read_bytes() == _BODY
        assert not (mods_dir / "foo.tmp").exists()

    def test_sends_user_agent(self, mods_dir: Path) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, content=b"x")

        with _fetcher(handler) as fetcher:
            fetcher.fetch("https://cdn.example.com/foo.jar", mods_dir / "foo.jar")

        assert seen[0].headers["User-Agent"].startswith("modkeeper/")

    def test_existing_file_gets_counter(self, mods_dir: Path) -> None:
        (mods_dir / "foo.jar").write_bytes(b"installed")

        with _fetcher(_serve_body) as fetcher:
            final = fetcher.fetch("https://cdn.example.com/foo.jar", mods_dir / "foo.jar")

        assert final == mods_dir / "foo (1).jar"
        assert (mods_dir / "foo.jar").read_bytes() == b"installed"

    def test_creates_destination_parents(self, tmp_path: Path) -> None:
        dest = tmp_path / "UserData" / "Mods" / "foo.jar"

        with _fetcher(_serve_body) as fetcher:
            final = fetcher.fetch("https://cdn.example.com/foo.jar", dest)

        assert final == dest
        assert dest.read_bytes() == _BODY

    def test_follows_redirects(self, mods_dir: Path) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/download/1":
                return httpx.Response(302, headers={"Location": "https://edge.example.com/f.jar"})
            return httpx.Response(200, content=b"redirected")

        with _fetcher(handler) as fetcher:
            final = fetcher.fetch("https://api.example.com/download/1", mods_dir / "foo.jar")

        assert final.read_bytes() == b"redirected"

    def test_http_error_status(self, mods_dir: Path) -> None:
        """A 404 is a remote error carrying the status; nothing is written."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404, content=b"missing")

        with _fetcher(handler) as fetcher:
            with pytest.raises(RemoteError) as exc_info:
                fetcher.fetch("https://cdn.example.com/gone.jar", mods_dir / "gone.jar")

        assert exc_info.value.status == 404
        assert "HTTP 404" in exc_info.value.message
        assert list(mods_dir.iterdir()) == []

    def test_too_many_redirects(self, mods_dir: Path) -> None:
        """Eleven hops in a row exceed the redirect limit."""

        def handler(request: httpx.Request) -> httpx.Response:
            hop = int(request.url.path.rsplit("/", 1)[-1])
            return httpx.Response(302, headers={"Location": f"https://cdn.example.com/r/{hop + 1}"})

        with _fetcher(handler) as fetcher:
            with pytest.raises(NetworkError):
                fetcher.fetch("https://cdn.example.com/r/0", mods_dir / "foo.jar")

        assert list(mods_dir.iterdir()) == []

    def test_connection_failure(self, mods_dir: Path) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with _fetcher(handler) as fetcher:
            with pytest.raises(NetworkError):
                fetcher.fetch("https://cdn.example.com/foo.jar", mods_dir / "foo.jar")

    @pytest.mark.parametrize("url", ["", "   "])
    def test_empty_url(self, mods_dir: Path, url: str) -> None:
        with _fetcher(_serve_body) as fetcher:
            with pytest.raises(InvalidInputError):
                fetcher.fetch(url, mods_dir / "foo.jar")

    def test_empty_destination(self) -> None:
        with _fetcher(_serve_body) as fetcher:
            with pytest.raises(InvalidInputError):
                fetcher.fetch("https://cdn.example.com/foo.jar", "  ")

    def test_fetch_to_path_with_injected_client(self, mods_dir: Path) -> None:
        client = build_client(transport=httpx.MockTransport(_serve_body))

        final = fetch_to_path("https://cdn.example.com/foo.jar", mods_dir / "foo.jar", client)

        assert final.read_bytes() == _BODY
        assert not client.is_closed


class TestPromote:
    def test_failed_promotion_keeps_temp_file(self, mods_dir: Path) -> None:
        """The downloaded bytes survive a failed rename and can be placed later."""
        dest = mods_dir / "foo.jar"
        failure = FileIOError.from_os_error(
            "Rename failed", OSError(errno.EIO, "I/O error"), temp_path_for(dest)
        )

        with _fetcher(_serve_body) as fetcher:
            with patch("modkeeper.fs.mover.rename_file", side_effect=failure):
                with pytest.raises(FileIOError) as exc_info:
                    fetcher.fetch("https://cdn.example.com/foo.jar", dest)

            temp = Path(exc_info.value.detail["temp_path"])
            assert temp == mods_dir / "foo.tmp"
            assert temp.read_bytes() == _BODY
            assert not dest.exists()

            final = fetcher.promote(temp, dest)

        assert final == dest
        assert dest.read_bytes() == _BODY
        assert not temp.exists()

    def test_promote_missing_temp(self, mods_dir: Path) -> None:
        with _fetcher(_serve_body) as fetcher:
            with pytest.raises(NotFoundError):
                fetcher.promote(mods_dir / "foo.tmp", mods_dir / "foo.jar")


def test_temp_path_for() -> None:
    assert temp_path_for(Path("/m/foo.jar")) == Path("/m/foo.tmp")
    assert temp_path_for(Path("/m/foo")) == Path("/m/foo.tmp")
    assert temp_path_for(Path("/m/pack.tmp")) == Path("/m/pack.tmp.tmp")


def test_tmp_destination_keeps_its_name(mods_dir: Path) -> None:
    """A free destination ending in .tmp is used as-is, not suffixed with (1)."""
    with _fetcher(_serve_body) as fetcher:
        final = fetcher.fetch("https://cdn.example.com/pack.tmp", mods_dir / "pack.tmp")

    assert final == mods_dir / "pack.tmp"
    assert final.read_bytes() == _BODY
    assert sorted(p.name for p in mods_dir.iterdir()) == ["pack.tmp"]
