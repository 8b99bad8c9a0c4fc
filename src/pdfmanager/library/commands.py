"""
CLI commands for library entries.

Add, remove, edit, list and search books, slides and class notes.
"""

from __future__ import annotations

import contextlib
import json
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from pdfmanager.core.records import Kind
from pdfmanager.core.reporter import ConsoleReporter
from pdfmanager.core.store import Store, StoreFormatError

console = Console()

CLI_KINDS = {kind.cli_name: kind for kind in Kind}
KIND_CHOICES = list(CLI_KINDS)


def open_store() -> Store:
    """Create a Store for the current library, aborting if there is none."""
    from pdfmanager.core.config import get_paths

    try:
        paths = get_paths()
    except FileNotFoundError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise click.Abort() from None
    return Store(paths, reporter=ConsoleReporter(console))


@contextlib.contextmanager
def store_errors() -> Iterator[None]:
    """Turn unreadable or malformed data files into a clean abort."""
    try:
        yield
    except json.JSONDecodeError as e:
        console.print(f"[red]ERROR: data file contains invalid JSON: {escape(str(e))}[/red]")
        console.print("[dim]Fix the file by hand or restore it with 'pdfmanager backup rollback'.[/dim]")
        raise click.Abort() from e
    except (OSError, StoreFormatError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise click.Abort() from e


def _kind(value: str) -> Kind:
    kind = CLI_KINDS.get(value)
    if kind is None:
        raise click.BadParameter(f"unknown kind {value!r}")
    return kind


def _is_dry_run(ctx: Any) -> bool:
    return bool(ctx.dry_run) if ctx else False


# -----------------------------------------------------------------------------
# add
# -----------------------------------------------------------------------------


def _common_options(func):
    func = click.option("--copy", "copy_file", is_flag=True, help="Copy the file into the library folder")(func)
    func = click.option("-a", "--author", "authors", multiple=True, help="Author (repeat for several)")(func)
    func = click.option("-p", "--path", "doc_path", required=True, help="Path to the document file")(func)
    func = click.option("-t", "--title", required=True, help="Document title")(func)
    return func


def _discard_copy(copied: Path | None) -> None:
    if copied is not None:
        copied.unlink(missing_ok=True)
        console.print(f"  [yellow]Removed[/yellow] {escape(str(copied))}")


def _add(ctx: Any, kind: Kind, buffer: dict[str, Any], copy_file: bool) -> None:
    buffer = {key: value for key, value in buffer.items() if value not in (None, ())}
    buffer["type"] = kind.value
    if "authors" in buffer:
        buffer["authors"] = list(buffer["authors"])

    if _is_dry_run(ctx):
        console.print(Panel(
            "\n".join(f"[bold]{key}:[/bold] {escape(str(value))}" for key, value in buffer.items()),
            title=f"Would add {kind.value}",
        ))
        console.print("[yellow]DRY RUN - no changes made[/yellow]")
        return

    store = open_store()
    copied = None
    with store_errors():
        if copy_file:
            # Fail on an unreadable collection before anything is copied
            store.read_collection(store.collection_path(kind))
            source = Path(buffer["path"]).expanduser()
            try:
                target = store.import_document(source, kind)
            except (FileNotFoundError, FileExistsError, ValueError) as e:
                console.print(f"[red]Error: {escape(str(e))}[/red]")
                raise click.Abort() from e
            if target.resolve() != source.resolve():
                copied = target
            buffer["path"] = str(target)
            console.print(f"  [green]Copied[/green] to {escape(buffer['path'])}")

        try:
            added = store.add_record(buffer)
        except Exception:
            _discard_copy(copied)
            raise
        if not added:
            _discard_copy(copied)
            raise click.Abort()

    console.print(f"[green]Added {kind.value} '{escape(buffer['title'])}'[/green]")


@click.group(name="add")
def add() -> None:
    """Add a document to the library."""
    pass


@add.command(name="book")
@_common_options
@click.option("-s", "--subtitle", help="Subtitle")
@click.option("-f", "--field", "field_of_knowledge", help="Field of knowledge")
@click.option("-y", "--year", help="Publish year")
@click.pass_obj
def add_book(ctx, title, doc_path, authors, copy_file, subtitle, field_of_knowledge, year) -> None:
    """Add a book.

    \b
    Examples:
        pdfmanager add book -t "SICP" -p ~/pdfs/sicp.pdf -a Abelson -a Sussman -y 1985
    """
    _add(ctx, Kind.BOOK, {
        "title": title,
        "path": doc_path,
        "authors": authors,
        "subTitle": subtitle,
        "fieldOfKnowledge": field_of_knowledge,
        "publishYear": year,
    }, copy_file)


@add.command(name="slide")
@_common_options
@click.option("-l", "--lecture", help="Lecture name")
@click.option("-i", "--institution", help="Institution name")
@click.pass_obj
def add_slide(ctx, title, doc_path, authors, copy_file, lecture, institution) -> None:
    """Add a slide deck."""
    _add(ctx, Kind.SLIDE, {
        "title": title,
        "path": doc_path,
        "authors": authors,
        "lectureName": lecture,
        "institutionName": institution,
    }, copy_file)


@add.command(name="classnote")
@_common_options
@click.option("-s", "--subtitle", help="Subtitle")
@click.option("-l", "--lecture", help="Lecture name")
@click.option("-i", "--institution", help="Institution name")
@click.pass_obj
def add_classnote(ctx, title, doc_path, authors, copy_file, subtitle, lecture, institution) -> None:
    """Add class notes."""
    _add(ctx, Kind.CLASS_NOTE, {
        "title": title,
        "path": doc_path,
        "authors": authors,
        "subTitle": subtitle,
        "lectureName": lecture,
        "institutionName": institution,
    }, copy_file)


# -----------------------------------------------------------------------------
# remove / edit
# -----------------------------------------------------------------------------


@click.command(name="remove")
@click.argument("kind", type=click.Choice(KIND_CHOICES))
@click.argument("title")
@click.option("--info", "info_field", default="path", show_default=True, help="Field to report from the removed entry")
@click.option("--delete-file", is_flag=True, help="Also delete the document file (needs --info path)")
@click.option("-y", "--yes", is_flag=True, help="Don't ask before deleting the file")
@click.pass_obj
def remove(ctx, kind: str, title: str, info_field: str, delete_file: bool, yes: bool) -> None:
    """Remove every entry with TITLE from a collection.

    \b
    Examples:
        pdfmanager remove book "SICP"
        pdfmanager remove slide "Week 3" --delete-file
    """
    from pdfmanager.core.prompts import confirm

    k = _kind(kind)
    store = open_store()
    path = store.collection_path(k)

    with store_errors():
        records = store.read_collection(path)
        count = sum(1 for r in records if isinstance(r, dict) and r.get("title") == title)

        if _is_dry_run(ctx):
            console.print(f"Would remove {count} {k.value} entr{'y' if count == 1 else 'ies'} titled '{escape(title)}'")
            console.print("[yellow]DRY RUN - no changes made[/yellow]")
            return

        value = store.remove_entry(path, title, info_field)

    if not count:
        raise click.Abort()

    console.print(f"[green]Removed {count} entr{'y' if count == 1 else 'ies'} titled '{escape(title)}'[/green]")
    if value is not None:
        console.print(f"  {info_field}: {escape(str(value))}")

    if delete_file:
        if info_field != "path" or not isinstance(value, str) or not value:
            console.print("[yellow]No document path recorded, nothing to delete.[/yellow]")
            return
        doc = Path(value).expanduser()
        if not doc.is_file():
            console.print(f"[yellow]{escape(str(doc))} does not exist, nothing to delete.[/yellow]")
            return
        if confirm(f"Delete {doc}?", auto_yes=yes):
            doc.unlink()
            console.print(f"  [green]Deleted[/green] {escape(str(doc))}")


@click.command(name="edit")
@click.argument("kind", type=click.Choice(KIND_CHOICES))
@click.argument("title")
@click.pass_obj
def edit(ctx, kind: str, title: str) -> None:
    """Interactively change one field of the entry with TITLE.

    Only the first entry with that title is changed.
    """
    k = _kind(kind)
    store = open_store()

    if _is_dry_run(ctx):
        console.print("[yellow]Editing is interactive; --dry-run is not supported here.[/yellow]")
        return

    with store_errors():
        if not store.edit_field_by_title(store.collection_path(k), title):
            raise click.Abort()


# -----------------------------------------------------------------------------
# list / search / show / fields
# -----------------------------------------------------------------------------


def _format_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, list):
        return ", ".join(str(v) for v in value)
    return str(value)


def _print_records(title: str, rows: list[tuple[Kind, dict[str, Any]]], show_kind: bool) -> None:
    table = Table(title=title)
    if show_kind:
        table.add_column("Kind", style="blue")
    table.add_column("Title", style="cyan")
    table.add_column("Authors")
    table.add_column("Details", style="dim")
    table.add_column("Path", style="green")

    for kind, record in rows:
        details = [
            _format_value(record.get(name))
            for name in kind.record_class.field_names()
            if name not in ("title", "authors", "path") and record.get(name) is not None
        ]
        cells = [
            escape(_format_value(record.get("title"))),
            escape(_format_value(record.get("authors"))),
            escape(" / ".join(details)),
            escape(_format_value(record.get("path"))),
        ]
        if show_kind:
            cells.insert(0, kind.value)
        table.add_row(*cells)

    console.print(table)


@click.command(name="list")
@click.argument("kind", type=click.Choice(KIND_CHOICES))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def list_cmd(kind: str, as_json: bool) -> None:
    """List every entry in a collection."""
    k = _kind(kind)
    store = open_store()
    with store_errors():
        records = store.read_collection(store.collection_path(k))

    if as_json:
        click.echo(json.dumps(records, indent=2, ensure_ascii=False))
        return

    if not records:
        console.print(f"[yellow]No {k.cli_name} entries yet[/yellow]")
        return

    _print_records(f"{k.value} entries ({len(records)})", [(k, r) for r in records if isinstance(r, dict)], False)


@click.command(name="search")
@click.option("-k", "--kind", type=click.Choice(KIND_CHOICES), help="Only search one collection")
@click.option("-q", "--query", help="Search in title/subtitle")
@click.option("-a", "--author", help="Search in authors")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def search(kind: str | None, query: str | None, author: str | None, as_json: bool) -> None:
    """Search entries across collections."""
    store = open_store()
    with store_errors():
        results = store.find_entries(_kind(kind) if kind else None, query=query, author=author)

    if as_json:
        output = [{"type": k.value, **record} for k, record in results]
        click.echo(json.dumps(output, indent=2, ensure_ascii=False))
        return

    if not results:
        console.print("[yellow]No entries found matching criteria[/yellow]")
        return

    _print_records(f"Results ({len(results)} found)", results, kind is None)


@click.command(name="show")
@click.argument("kind", type=click.Choice(KIND_CHOICES))
@click.argument("title")
def show(kind: str, title: str) -> None:
    """Show the first entry with TITLE."""
    k = _kind(kind)
    store = open_store()
    with store_errors():
        record = store.get_entry(store.collection_path(k), title)

    if record is None:
        console.print(f"[red]No {k.cli_name} entry titled '{escape(title)}'[/red]")
        raise click.Abort()

    lines = [f"[bold]{escape(key)}:[/bold] {escape(_format_value(value))}" for key, value in record.items()]
    console.print(Panel("\n".join(lines), title=f"{k.value}: {escape(title)}"))


@click.command(name="fields")
@click.argument("kind", type=click.Choice(KIND_CHOICES))
def fields_cmd(kind: str) -> None:
    """List the fields stored for a document kind."""
    k = _kind(kind)

    table = Table(title=f"{k.value} Fields")
    table.add_column("Field", style="cyan")
    table.add_column("Type", style="green")
    table.add_column("Description")

    for name, fdef in k.record_class.SCHEMA.items():
        table.add_row(name, fdef.field_type.value, fdef.description)

    console.print(table)
