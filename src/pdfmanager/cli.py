"""
Main CLI dispatcher for pdfmanager.

Usage:
    pdfmanager init                          # Create .pdfmanager/ with empty collections
    pdfmanager add [book|slide|classnote]
    pdfmanager remove KIND TITLE
    pdfmanager edit KIND TITLE
    pdfmanager list KIND | search | show KIND TITLE
"""

import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from pdfmanager import __version__

console = Console()


class Context:
    """Shared context for all commands."""

    def __init__(self, verbose: bool = False, dry_run: bool = False):
        self.verbose = verbose
        self.dry_run = dry_run
        self.console = console


def setup_logging(verbose: bool) -> None:
    """Send library log records to stderr through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@click.group()
@click.version_option(version=__version__, prog_name="pdfmanager")
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
@click.option("-n", "--dry-run", is_flag=True, help="Preview without making changes")
@click.pass_context
def main(ctx: click.Context, verbose: bool, dry_run: bool) -> None:
    """Personal document library manager.

    Keep track of books, slides and class notes.
    """
    ctx.obj = Context(verbose=verbose, dry_run=dry_run)
    setup_logging(verbose)

    if dry_run:
        console.print("[yellow]DRY RUN MODE - No changes will be made[/yellow]")


@main.command()
@click.option("--force", "-f", is_flag=True, help="Overwrite existing data files with empty defaults")
@click.pass_obj
def init(ctx, force: bool) -> None:
    """Initialize the .pdfmanager/ directory in the current directory.

    Creates config.json and empty books, slides and classnotes collections.
    """
    from pathlib import Path

    from pdfmanager.core.config import DATA_DIR_NAME, get_paths, install_defaults
    from pdfmanager.core.prompts import confirm

    dry_run = ctx.dry_run if ctx else False
    paths = get_paths(Path.cwd())

    if paths.data_dir.exists() and not force:
        console.print(f"[yellow]{DATA_DIR_NAME}/ directory already exists at {paths.data_dir}[/yellow]")
        console.print("[dim]Use --force to reset it.[/dim]")
        return

    if force and paths.data_dir.exists() and not dry_run:
        if not confirm("This replaces your collections with empty ones. Continue?"):
            console.print("[yellow]Cancelled[/yellow]")
            return

    console.print(f"[cyan]Initializing {DATA_DIR_NAME}/ directory at {paths.root}[/cyan]")

    if dry_run:
        console.print("[yellow]DRY RUN - no changes made[/yellow]")
        return

    for path in install_defaults(paths, force=force):
        console.print(f"  [green]Created[/green] {path.relative_to(paths.root)}")

    console.print()
    console.print("[green]Done![/green] Set your library folder with 'pdfmanager config set libraryPath DIR'.")


# Import and register command groups (imports after main definition intentional)
from pdfmanager.backup.commands import backup  # noqa: E402
from pdfmanager.config.commands import config  # noqa: E402
from pdfmanager.library.commands import (  # noqa: E402
    add,
    edit,
    fields_cmd,
    list_cmd,
    remove,
    search,
    show,
)

main.add_command(add)
main.add_command(remove)
main.add_command(edit)
main.add_command(list_cmd)
main.add_command(search)
main.add_command(show)
main.add_command(fields_cmd)
main.add_command(config)
main.add_command(backup)


if __name__ == "__main__":
    main()
