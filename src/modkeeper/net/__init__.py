"""Network fetch of mod files."""

from modkeeper.net.fetcher import Fetcher, build_client, fetch_to_path, temp_path_for

__all__ = ["Fetcher", "build_client", "fetch_to_path", "temp_path_for"]
