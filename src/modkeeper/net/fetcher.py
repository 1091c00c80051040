"""Download a URL into the mods directory.

The body is written to a temporary artifact next to the destination
(``foo.jar`` -> ``foo.tmp``) and then promoted with :func:`move_file`, so
the final name is collision-resolved and never half-written. A failed
promotion leaves the temporary artifact on disk; :meth:`Fetcher.promote`
places it later without downloading again.

There is no request timeout and no retry. The only bound is the redirect
limit.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import httpx
import structlog

from modkeeper import __version__
from modkeeper.core.constants import MAX_REDIRECTS, TEMP_SUFFIX
from modkeeper.core.errors import (
    FileIOError,
    InvalidInputError,
    NetworkError,
    NotFoundError,
    RemoteError,
)
from modkeeper.fs.mover import move_file
from modkeeper.fs.paths import coerce_path, ensure_parent_dir

logger = structlog.get_logger(__name__)


def build_client(
    transport: httpx.BaseTransport | None = None,
    max_redirects: int = MAX_REDIRECTS,
) -> httpx.Client:
    """Create the HTTP client used for downloads.

    Args:
        transport: Optional transport override (tests pass httpx.MockTransport)
        max_redirects: Redirects followed before giving up

    Returns:
        Configured httpx.Client without a timeout
    """
    return httpx.Client(
        transport=transport,
        follow_redirects=True,
        max_redirects=max_redirects,
        timeout=httpx.Timeout(None),
        headers={"User-Agent": f"modkeeper/{__version__}"},
    )


def temp_path_for(dest: Path) -> Path:
    """Return the temporary artifact path used while downloading to dest.

    ``foo.jar`` downloads to ``foo.tmp``; a destination that already ends in
    ``.tmp`` gets the suffix appended (``pack.tmp`` -> ``pack.tmp.tmp``) so the
    artifact never occupies the destination name.
    """
    temp = dest.with_suffix(TEMP_SUFFIX)
    if temp == dest:
        temp = dest.with_name(dest.name + TEMP_SUFFIX)
    return temp


class Fetcher:
    """Fetches single files over HTTP into place.

    Args:
        client: Optional httpx client; one is created (and owned) if omitted
    """

    def __init__(self, client: httpx.Client | None = None) -> None:
        self._owns_client = client is None
        self._client: httpx.Client = client or build_client()

    def fetch(self, url: str, dest_hint: str | os.PathLike[str]) -> Path:
        """Download url and place it at dest_hint or a free variant of it.

        Args:
            url: Resource to download
            dest_hint: Desired final path

        Returns:
            Final path of the downloaded file

        Raises:
            InvalidInputError: If url or dest_hint is empty, or url is malformed
            RemoteError: If the server answers with a non-2xx status
            NetworkError: On transport failure or too many redirects
            FileIOError: If the file cannot be written or promoted. A failed
                promotion keeps the temp file; its path is in
                ``detail["temp_path"]``.
        """
        url = (url or "").strip()
        if not url:
            raise InvalidInputError("URL is empty")
        dest = coerce_path(dest_hint, "Destination path")
        if not dest.name:
            raise InvalidInputError("Destination path has no file name", path=dest)
        ensure_parent_dir(dest)

        body = self._download(url)

        temp = temp_path_for(dest)
        self._write_temp(temp, body)
        logger.info("fetch.downloaded", url=url, temp_path=str(temp), size=len(body))

        return self.promote(temp, dest)

    def promote(
        self, temp_path: str | os.PathLike[str], dest_hint: str | os.PathLike[str]
    ) -> Path:
        """Move a downloaded temp file to a free variant of dest_hint.

        Raises:
            NotFoundError: If the temp file is gone
            FileIOError: If the rename fails; the temp file stays in place
        """
        temp = coerce_path(temp_path, "Temporary file path")
        dest = coerce_path(dest_hint, "Destination path")
        try:
            final = move_file(temp, dest)
        except FileIOError as e:
            e.detail["temp_path"] = str(temp)
            logger.warning("fetch.orphaned_temp", temp_path=str(temp), dest=str(dest))
            raise
        except NotFoundError:
            logger.warning("fetch.temp_missing", temp_path=str(temp))
            raise

        logger.info("fetch.placed", path=str(final))
        return final

    def _download(self, url: str) -> bytes:
        try:
            response = self._client.get(url)
        except httpx.TooManyRedirects as e:
            logger.warning("fetch.failed", url=url, reason="too_many_redirects")
            raise NetworkError(f"Too many redirects fetching {url}") from e
        except httpx.InvalidURL as e:
            raise InvalidInputError(f"URL is malformed: {url}") from e
        except httpx.HTTPError as e:
            logger.warning("fetch.failed", url=url, reason=type(e).__name__)
            raise NetworkError(f"Request to {url} failed: {e}") from e

        if not response.is_success:
            logger.warning("fetch.failed", url=url, status=response.status_code)
            raise RemoteError(response.status_code, url)

        return response.content

    def _write_temp(self, temp: Path, body: bytes) -> None:
        try:
            with temp.open("wb") as handle:
                handle.write(body)
        except OSError as e:
            # partial body, never promote it
            temp.unlink(missing_ok=True)
            raise FileIOError.from_os_error("Cannot write download", e, temp) from e

    def close(self) -> None:
        """Close the HTTP client if this fetcher created it."""
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> Fetcher:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()


def fetch_to_path(
    url: str,
    dest_hint: str | os.PathLike[str],
    client: httpx.Client | None = None,
) -> Path:
    """Download url to dest_hint with a one-shot Fetcher."""
    with Fetcher(client) as fetcher:
        return fetcher.fetch(url, dest_hint)
