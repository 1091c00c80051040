"""Top-level ``modkeeper`` command."""

from __future__ import annotations

import importlib
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:  # pragma: no cover - typing only
    import typer
    from typer import Typer as TyperType
else:  # pragma: no cover - runtime fallback for typing
    typer = importlib.import_module("typer")
    TyperType = Any

from modkeeper.cli.files import app as files_app
from modkeeper.cli.updates import app as updates_app
from modkeeper.utils.log import configure_logging

configure_logging()

app: TyperType = typer.Typer(help="Safe on-disk management of mod files.")
app.add_typer(files_app, name="files")
app.add_typer(updates_app, name="updates")


def run_cli(args: Sequence[str] | None = None) -> None:
    app(args=args)
