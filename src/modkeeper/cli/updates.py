"""CLI commands for downloading and updating mod files."""

from __future__ import annotations

import importlib
import json
from pathlib import Path
from typing import TYPE_CHECKING, Annotated, Any

if TYPE_CHECKING:  # pragma: no cover - typing only
    import typer
    from typer import Typer as TyperType
else:  # pragma: no cover - runtime fallback for typing
    typer = importlib.import_module("typer")
    TyperType = Any

from rich.console import Console
from rich.table import Table

from modkeeper.cli._common import DataDirOption, JsonFlag, emit, fail, open_store
from modkeeper.core.errors import ModKeeperError
from modkeeper.fs.journal import UpdateIntent
from modkeeper.fs.update import (
    BackupSwapUpdater,
    RecoveryState,
    inspect_intent,
    pending_updates,
    restore_backup,
    resume_update,
)
from modkeeper.net.fetcher import Fetcher

app: TyperType = typer.Typer(help="Download mod files and apply updates.")


def fetch(
    url: Annotated[str, typer.Argument(help="URL to download.")],
    dest: Annotated[str, typer.Argument(help="Desired destination path.")],
    json_output: JsonFlag = False,
) -> None:
    """Download URL to DEST (or a free variant of it)."""
    try:
        with Fetcher() as fetcher:
            final = fetcher.fetch(url, dest)
    except ModKeeperError as exc:
        fail(exc, json_output)
    emit({"path": str(final)}, f"Downloaded to {final}", json_output)


def apply(
    old_path: Annotated[str, typer.Argument(help="Currently installed file.")],
    new_path: Annotated[str, typer.Argument(help="Downloaded replacement.")],
    dest_dir: Annotated[str, typer.Argument(help="Directory the replacement goes into.")],
    new_filename: Annotated[str, typer.Argument(help="Filename of the replacement.")],
    no_journal: Annotated[
        bool, typer.Option("--no-journal", help="Skip writing an update intent.")
    ] = False,
    data_dir: DataDirOption = None,
    json_output: JsonFlag = False,
) -> None:
    """Back up OLD_PATH and move NEW_PATH into DEST_DIR as NEW_FILENAME.

    A matching installed-mod record is updated with the new filename.
    """
    try:
        intent = BackupSwapUpdater(journal=not no_journal).run(
            old_path, new_path, dest_dir, new_filename
        )
        record = open_store(data_dir).record_rename(intent.old_path.name, intent.new_filename)
    except ModKeeperError as exc:
        fail(exc, json_output)
    emit(
        {
            "new_filename": intent.new_filename,
            "backup_path": str(intent.backup_path),
            "path": str(intent.dest_path),
            "record_id": record.id if record is not None else None,
        },
        f"Updated to {intent.new_filename} (backup: {intent.backup_path})",
        json_output,
    )


def _render(intents: list[tuple[UpdateIntent, RecoveryState]]) -> None:
    console = Console()
    if not intents:
        console.print("[green]No interrupted updates[/green]")
        return

    table = Table(title="Interrupted updates")
    table.add_column("Intent")
    table.add_column("State")
    table.add_column("Old file")
    table.add_column("New file")
    table.add_column("Backup")
    for intent, state in intents:
        style = "red" if state is RecoveryState.INCONSISTENT else "yellow"
        table.add_row(
            intent.intent_id[:8],
            f"[{style}]{state.value}[/{style}]",
            intent.old_path.name,
            intent.new_filename,
            str(intent.backup_path),
        )
    console.print(table)


def recover(
    dest_dir: Annotated[Path, typer.Argument(help="Destination directory of the updates.")],
    resume: Annotated[
        bool, typer.Option("--resume", help="Finish every resumable update.")
    ] = False,
    restore: Annotated[
        bool, typer.Option("--restore", help="Put every backup back in place.")
    ] = False,
    json_output: JsonFlag = False,
) -> None:
    """List, resume or undo updates that were interrupted."""
    if resume and restore:
        typer.secho("--resume and --restore are exclusive", err=True, fg=typer.colors.RED)
        raise typer.Exit(code=2)

    try:
        intents = pending_updates(dest_dir)
        results: list[dict[str, Any]] = []
        for intent in intents:
            state = inspect_intent(intent)
            entry: dict[str, Any] = {**intent.to_dict(), "state": state.value}
            if resume and state is not RecoveryState.INCONSISTENT:
                resume_update(intent)
                entry["action"] = "resumed"
            elif restore and state is not RecoveryState.INCONSISTENT:
                entry["restored_path"] = str(restore_backup(intent))
                entry["action"] = "restored"
            results.append(entry)
    except ModKeeperError as exc:
        fail(exc, json_output)

    if json_output:
        typer.echo(json.dumps({"intents": results}, sort_keys=True))
        return

    _render([(intent, RecoveryState(entry["state"])) for intent, entry in zip(intents, results)])
    for entry in results:
        if "action" in entry:
            typer.secho(f"{entry['action']}: {entry['new_filename']}", fg=typer.colors.GREEN)


app.command("fetch")(fetch)
app.command("apply")(apply)
app.command("recover")(recover)
