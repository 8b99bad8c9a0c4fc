"""
Configuration management CLI commands.

Settings live in .pdfmanager/config.json as a flat object of string values.
"""

from __future__ import annotations

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from pdfmanager.library.commands import open_store, store_errors

console = Console()

# Known settings with descriptions
CONFIG_KEYS: dict[str, str] = {
    "libraryPath": "Directory where document files are copied with 'add --copy'",
}


@click.group()
def config():
    """Manage pdfmanager configuration.

    Settings are stored in .pdfmanager/config.json.
    """
    pass


@config.command(name="show")
def show_cmd():
    """Show all configuration values."""
    store = open_store()
    with store_errors():
        data = store.read_object(store.config_path)

    table = Table(title="Configuration", show_header=True, header_style="bold cyan")
    table.add_column("Setting")
    table.add_column("Value", style="green")
    table.add_column("Description", style="dim")

    for key in sorted(set(CONFIG_KEYS) | set(data)):
        value = data.get(key)
        display = escape(str(value)) if value not in (None, "") else "[dim](not set)[/dim]"
        table.add_row(key, display, CONFIG_KEYS.get(key, ""))

    console.print(table)


@config.command(name="get")
@click.argument("key")
def get_cmd(key: str):
    """Get a configuration value."""
    store = open_store()
    with store_errors():
        value = store.read_field(store.config_path, key)

    if value is None:
        console.print(f"[dim]{escape(key)} is not set[/dim]")
    else:
        click.echo(value)


@config.command(name="set")
@click.argument("key")
@click.argument("value")
@click.pass_obj
def set_cmd(ctx, key: str, value: str):
    """Set a configuration value.

    \b
    Examples:
        pdfmanager config set libraryPath ~/Documents/library
    """
    dry_run = ctx.dry_run if ctx else False

    if key not in CONFIG_KEYS:
        console.print(f"[yellow]Warning: {escape(key)} is not a known setting[/yellow]")

    if dry_run:
        console.print(f"Would set {escape(key)} = {escape(value)}")
        console.print("[yellow]DRY RUN - no changes made[/yellow]")
        return

    store = open_store()
    with store_errors():
        store.write_field(store.config_path, key, value)
    console.print(f"[green]Set {escape(key)} = {escape(value)}[/green]")


@config.command(name="path")
def path_cmd():
    """Show the data file locations."""
    store = open_store()
    click.echo(f"config:     {store.config_path}")
    click.echo(f"books:      {store.books_path}")
    click.echo(f"slides:     {store.slides_path}")
    click.echo(f"classnotes: {store.classnotes_path}")
    click.echo(f"backups:    {store.paths.backups}")
