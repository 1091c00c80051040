"""CLI commands for placing, moving and toggling mod files."""

from __future__ import annotations

import importlib
import os
from pathlib import Path
from typing import TYPE_CHECKING, Annotated, Any

if TYPE_CHECKING:  # pragma: no cover - typing only
    import typer
    from typer import Typer as TyperType
else:  # pragma: no cover - runtime fallback for typing
    typer = importlib.import_module("typer")
    TyperType = Any

from modkeeper.cli._common import DataDirOption, JsonFlag, emit, fail, open_store
from modkeeper.config import resolve_mods_dir
from modkeeper.core.errors import InvalidInputError, ModKeeperError
from modkeeper.fs.mover import move_file
from modkeeper.fs.paths import (
    Platform,
    check_path_access,
    current_platform,
    default_mods_paths,
    ensure_dir,
    list_file_names,
)
from modkeeper.fs.sidecar import ensure_sidecar, set_enabled
from modkeeper.fs.unique import allocate_unique

app: TyperType = typer.Typer(help="Place, move and toggle mod files.")

ModsDirOption = Annotated[
    Path | None,
    typer.Option(
        "--mods-dir",
        help="Active Mods directory (defaults to $MODKEEPER_MODS_DIR or the platform default).",
    ),
]


def _require_mods_dir(mods_dir: Path | None) -> Path:
    resolved = resolve_mods_dir(mods_dir)
    if resolved is None:
        raise InvalidInputError("No Mods directory given and no default found")
    return resolved


def allocate(
    target: Annotated[Path, typer.Argument(help="Desired path.")],
    json_output: JsonFlag = False,
) -> None:
    """Print a path that does not exist yet, derived from TARGET."""
    path = allocate_unique(target)
    emit({"path": str(path)}, str(path), json_output)


def move(
    source: Annotated[str, typer.Argument(help="File to move.")],
    destination: Annotated[str, typer.Argument(help="Desired destination.")],
    json_output: JsonFlag = False,
) -> None:
    """Move SOURCE to DESTINATION without overwriting existing files."""
    try:
        final = move_file(source, destination)
    except ModKeeperError as exc:
        fail(exc, json_output)
    emit({"path": str(final)}, f"Moved to {final}", json_output)


def sidecar(
    base_dir: Annotated[str, typer.Argument(help="Active directory.")],
    suffix: Annotated[str, typer.Option("--suffix", help="Sidecar suffix.")] = ".disabled",
    json_output: JsonFlag = False,
) -> None:
    """Ensure the sidecar directory of BASE_DIR exists."""
    try:
        result = ensure_sidecar(base_dir, suffix)
    except ModKeeperError as exc:
        fail(exc, json_output)
    verb = "Created" if result.created else "Exists"
    emit(
        {"path": str(result.path), "created": result.created},
        f"{verb}: {result.path}",
        json_output,
    )


def toggle(
    file_path: Annotated[str, typer.Argument(help="Mod file to enable or disable.")],
    enable: Annotated[
        bool, typer.Option("--enable/--disable", help="Target state of the mod.")
    ] = True,
    mods_dir: ModsDirOption = None,
    data_dir: DataDirOption = None,
    json_output: JsonFlag = False,
) -> None:
    """Move a mod file between the Mods directory and Mods.disabled.

    A matching installed-mod record is updated with the final filename.
    """
    try:
        final = set_enabled(file_path, _require_mods_dir(mods_dir), enable)
        record = open_store(data_dir).record_rename(
            Path(file_path.strip()).name, final.name, enabled=enable, was_enabled=not enable
        )
    except ModKeeperError as exc:
        fail(exc, json_output)
    state = "enabled" if enable else "disabled"
    emit(
        {
            "path": str(final),
            "enabled": enable,
            "record_id": record.id if record is not None else None,
        },
        f"{Path(file_path).name} {state}: {final}",
        json_output,
    )


def ensure(
    path: Annotated[str, typer.Argument(help="Directory to create.")],
    json_output: JsonFlag = False,
) -> None:
    """Create a Mods directory if it does not exist."""
    try:
        result = ensure_dir(path)
    except ModKeeperError as exc:
        fail(exc, json_output)
    verb = "Created" if result.created else "Exists"
    emit(
        {"path": str(result.path), "created": result.created},
        f"{verb}: {result.path}",
        json_output,
    )


def access(
    path: Annotated[str, typer.Argument(help="Directory to probe.")],
    json_output: JsonFlag = False,
) -> None:
    """Report whether PATH exists, is a directory and is writable."""
    info = check_path_access(path)
    payload = {"exists": info.exists, "is_dir": info.is_dir, "writable": info.writable}
    emit(payload, ", ".join(f"{k}={v}" for k, v in payload.items()), json_output)


def list_files(
    dir_path: Annotated[str, typer.Argument(help="Directory to list.")],
    json_output: JsonFlag = False,
) -> None:
    """List regular files inside DIR_PATH."""
    try:
        names = list_file_names(dir_path)
    except ModKeeperError as exc:
        fail(exc, json_output)
    if json_output:
        emit({"files": names}, "", json_output)
        return
    for name in names:
        typer.echo(name)


def defaults(
    platform: Annotated[
        Platform | None,
        typer.Option("--platform", help="Platform to list defaults for."),
    ] = None,
    json_output: JsonFlag = False,
) -> None:
    """List candidate default Mods directories."""
    paths = default_mods_paths(platform or current_platform(), os.environ)
    if json_output:
        emit({"paths": [str(p) for p in paths]}, "", json_output)
        return
    for path in paths:
        marker = "*" if path.is_dir() else " "
        typer.echo(f"{marker} {path}")


app.command("allocate")(allocate)
app.command("move")(move)
app.command("sidecar")(sidecar)
app.command("toggle")(toggle)
app.command("ensure")(ensure)
app.command("access")(access)
app.command("list")(list_files)
app.command("defaults")(defaults)
