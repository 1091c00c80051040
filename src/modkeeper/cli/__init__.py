"""CLI entrypoints for modkeeper."""

from modkeeper.cli.files import app as files_app
from modkeeper.cli.main import app, run_cli
from modkeeper.cli.updates import app as updates_app

__all__ = ["app", "files_app", "run_cli", "updates_app"]
