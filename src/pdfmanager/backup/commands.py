"""
Backup management CLI commands.

A backup of each data file is taken automatically before it is rewritten.
These commands list those backups and restore one by hand.
"""

from __future__ import annotations

from pathlib import Path

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from pdfmanager.core.backup import BackupInfo, list_backups, restore_backup
from pdfmanager.library.commands import open_store

console = Console()

ALL_FILES = ["books", "slides", "classnotes", "config"]


def _get_file_paths() -> dict[str, Path]:
    store = open_store()
    return {
        "books": store.books_path,
        "slides": store.slides_path,
        "classnotes": store.classnotes_path,
        "config": store.config_path,
    }


def _format_age(days: float) -> str:
    """Format age in human-readable form."""
    if days < 1:
        hours = days * 24
        if hours < 1:
            return f"{int(hours * 60)}m ago"
        return f"{int(hours)}h ago"
    elif days < 30:
        return f"{int(days)}d ago"
    return f"{int(days / 30)}mo ago"


def _describe(backup: BackupInfo) -> str:
    return f"{backup.timestamp:%Y-%m-%d %H:%M:%S}  ({_format_age(backup.age_days)}, {backup.size_bytes} B)"


@click.group()
def backup():
    """Manage data file backups.

    Backups are created automatically whenever a collection or the config
    file is rewritten.
    """
    pass


@backup.command(name="list")
@click.option(
    "-f", "--file", "name",
    type=click.Choice(ALL_FILES + ["all"]),
    default="all",
    help="Which file's backups to list",
)
@click.option("-n", "--limit", type=int, default=10, help="Maximum backups to show per file")
def list_cmd(name: str, limit: int):
    """List available backups, newest first."""
    files = _get_file_paths()
    backup_dir = open_store().paths.backups
    names = ALL_FILES if name == "all" else [name]

    for file_name in names:
        backups = list_backups(backup_dir, files[file_name].stem)
        if not backups:
            console.print(f"[dim]No backups found for {file_name}[/dim]")
            continue

        table = Table(
            title=f"[bold]{file_name}[/bold] ({len(backups)} backups)",
            show_header=True,
            header_style="bold cyan",
        )
        table.add_column("#", style="dim", width=4)
        table.add_column("Date", style="green")
        table.add_column("Age", style="yellow", justify="right")
        table.add_column("Size", style="blue", justify="right")

        for i, item in enumerate(backups[:limit]):
            table.add_row(
                str(i),
                item.timestamp.strftime("%Y-%m-%d %H:%M:%S"),
                _format_age(item.age_days),
                f"{item.size_bytes} B",
            )
        console.print(table)

        hidden = len(backups) - limit
        if hidden > 0:
            console.print(f"  [dim]... and {hidden} older backups[/dim]")


@backup.command(name="rollback")
@click.argument("name", type=click.Choice(ALL_FILES))
@click.option("-i", "--index", type=int, default=None, help="Backup to restore (0 = most recent)")
@click.option("--force", "-f", is_flag=True, help="Skip confirmation prompt")
@click.pass_obj
def rollback_cmd(ctx, name: str, index: int | None, force: bool):
    """Restore a data file from one of its backups.

    Without --index you pick the backup from a list.
    """
    from pdfmanager.core.prompts import select_from_list

    dry_run = ctx.dry_run if ctx else False
    file_path = _get_file_paths()[name]
    backup_dir = open_store().paths.backups
    backups = list_backups(backup_dir, file_path.stem)

    if not backups:
        console.print(f"[red]No backups found for {name}[/red]")
        raise click.Abort()

    if index is None:
        chosen = select_from_list(backups, message=f"Backups of {name}", display_func=_describe)
        if chosen is None:
            console.print("[yellow]Cancelled[/yellow]")
            return
        index = backups.index(chosen)
    elif not 0 <= index < len(backups):
        console.print(f"[red]Backup index {index} out of range (0-{len(backups) - 1})[/red]")
        raise click.Abort()

    target = backups[index]
    console.print(Panel(
        f"[bold]File:[/bold] {file_path}\n"
        f"[bold]Backup:[/bold] {target.path.name}\n"
        f"[bold]Taken:[/bold] {_describe(target)}",
        title="Rollback Preview",
    ))

    if dry_run:
        console.print("\n[yellow]DRY RUN - no changes made[/yellow]")
        return

    if not force and not click.confirm("Proceed with rollback?"):
        console.print("[yellow]Cancelled[/yellow]")
        return

    try:
        restore_backup(file_path, backup_dir, index)
    except OSError as e:
        console.print(f"[red]Rollback failed: {e}[/red]")
        raise click.Abort() from e

    console.print(f"[green]Restored {name} from {target.path.name}[/green]")
    console.print("[dim]A backup of the previous state was created.[/dim]")
