"""Shared options and output helpers for CLI commands."""

from __future__ import annotations

import importlib
import json
from pathlib import Path
from typing import TYPE_CHECKING, Annotated, Any, NoReturn

if TYPE_CHECKING:  # pragma: no cover - typing only
    import typer
else:  # pragma: no cover - runtime fallback for typing
    typer = importlib.import_module("typer")

from modkeeper.config import resolve_data_dir
from modkeeper.core.errors import ModKeeperError
from modkeeper.store.json_store import ModStore

JsonFlag = Annotated[
    bool,
    typer.Option("--json", help="Emit JSON instead of human-readable output."),
]

DataDirOption = Annotated[
    Path | None,
    typer.Option(
        "--data-dir",
        help="Record store directory (defaults to $MODKEEPER_DATA_DIR or ~/.modkeeper).",
    ),
]


def open_store(data_dir: Path | None) -> ModStore:
    """Open the record store the CLI keeps filenames in."""
    return ModStore(resolve_data_dir(data_dir))


def fail(exc: ModKeeperError, json_output: bool = False) -> NoReturn:
    """Report an engine error and exit with status 1."""
    if json_output:
        typer.echo(json.dumps(exc.to_dict(), sort_keys=True), err=True)
    else:
        typer.secho(f"{exc.kind.value}: {exc}", err=True, fg=typer.colors.RED)
    raise typer.Exit(code=1) from exc


def emit(payload: dict[str, Any], message: str, json_output: bool) -> None:
    """Print a command result as JSON or as a green one-liner."""
    if json_output:
        typer.echo(json.dumps(payload, sort_keys=True))
    else:
        typer.secho(message, fg=typer.colors.GREEN)
