"""Command line interface for media shelf."""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional, Tuple

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.prompt import Confirm
from rich.table import Table

from .application import CommandResult, Library, QueryResult
from .application.commands.catalog import (
    AddEntryCommand,
    DeleteEntryCommand,
    UpdateRatingCommand,
    UpdateStatusesCommand,
)
from .application.queries.catalog import GetAllowedStatusesQuery, GetEntryQuery, ListEntriesQuery
from .domain.catalog.entities import CatalogEntry
from .domain.catalog.value_objects import EntryKind
from .exceptions import MediaShelfError
from .infrastructure.vocabulary import SqliteStatusVocabulary
from .models.config import load_config

console = Console()

KIND_CHOICE = click.Choice([kind.value for kind in EntryKind], case_sensitive=False)


def _fail(message: str) -> None:
    console.print(f"\n[red]Error: {escape(message)}[/red]")
    sys.exit(1)


def _library(ctx: click.Context) -> Library:
    """Build the library on first use and close it when the command ends."""
    obj = ctx.ensure_object(dict)
    if "library" not in obj:
        try:
            config = load_config(obj.get("config_path"))
            if obj.get("backend"):
                config.storage.backend = obj["backend"]
            library = Library(config)
        except MediaShelfError as e:
            _fail(str(e))
        obj["library"] = library
        ctx.call_on_close(library.close)
    return obj["library"]


def _check(result) -> None:
    """Exit with an error message if a command or query failed."""
    if not result.success:
        _fail(result.message or "; ".join(result.errors) or "Operation failed")


def _format_timestamp(timestamp: int) -> str:
    return datetime.fromtimestamp(timestamp).strftime("%Y-%m-%d %H:%M")


def _format_rating(rating: Optional[float]) -> str:
    return f"{rating:g}" if rating is not None else "-"


def _entries_table(kind: str, entries: Iterable[CatalogEntry]) -> Table:
    table = Table(title=f"{kind.capitalize()}s")
    table.add_column("Key", style="cyan")
    table.add_column("Title", style="bold")
    table.add_column("Author")
    table.add_column("Rating", justify="right")
    table.add_column("Statuses", style="green")
    table.add_column("Added")

    for entry in entries:
        table.add_row(
            escape(entry.key),
            escape(entry.title),
            escape(entry.author or "-"),
            _format_rating(entry.rating),
            escape(", ".join(entry.user_statuses)),
            _format_timestamp(entry.added_timestamp),
        )
    return table


def _print_entry(entry: CatalogEntry) -> None:
    info_table = Table()
    info_table.add_column("Property", style="cyan")
    info_table.add_column("Value")

    info_table.add_row("Kind", entry.kind.value)
    info_table.add_row("Key", escape(entry.key))
    info_table.add_row("Title", escape(entry.title))
    if entry.author:
        info_table.add_row("Author", escape(entry.author))
    if entry.cover_url:
        info_table.add_row("Cover", escape(entry.cover_url))
    info_table.add_row("Rating", _format_rating(entry.rating))
    info_table.add_row("Statuses", escape(", ".join(entry.user_statuses)))
    info_table.add_row("Added", _format_timestamp(entry.added_timestamp))

    console.print(info_table)


@click.group()
@click.version_option(package_name="media-shelf")
@click.option(
    '--config',
    'config_path',
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Configuration file path'
)
@click.option(
    '--backend',
    type=click.Choice(["sqlite", "json"]),
    help='Storage backend (overrides configuration)'
)
@click.option(
    '--verbose',
    is_flag=True,
    help='Verbose output'
)
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[Path], backend: Optional[str], verbose: bool):
    """Catalog your books and movies with ratings and personal statuses."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["backend"] = backend

    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(name)s: %(message)s",
            handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        )
    else:
        logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")


@cli.command()
@click.pass_context
def init(ctx: click.Context):
    """Create the storage and seed the default status vocabulary."""
    library = _library(ctx)
    added = library.seed_vocabulary()

    console.print("\n[bold cyan]Media Shelf[/bold cyan]")
    console.print(f"Backend: {library.backend}")
    if library.database is not None:
        console.print(f"Database: {escape(library.database.path)}")
        console.print(f"Statuses added: {added}")
    else:
        console.print(f"Data directory: {escape(str(library.config.storage.data_dir))}")

    for repository in library.repositories:
        console.print(f"{repository.kind.value.capitalize()}s: {repository.count()}")

    console.print("[green]Ready[/green]")


@cli.command()
@click.argument('kind', type=KIND_CHOICE)
@click.argument('key')
@click.argument('title')
@click.option('--author', help='Author or director')
@click.option('--cover-url', help='Cover image URL')
@click.option('--rating', type=float, help='Rating from 0.5 to 5 in half steps')
@click.option(
    '--status',
    'statuses',
    multiple=True,
    required=True,
    help='User status (repeat for several)'
)
@click.pass_context
def add(
    ctx: click.Context,
    kind: str,
    key: str,
    title: str,
    author: Optional[str],
    cover_url: Optional[str],
    rating: Optional[float],
    statuses: Tuple[str, ...]
):
    """Add an entry identified by KEY (ISBN for books)."""
    library = _library(ctx)
    result: CommandResult = library.execute(AddEntryCommand(
        kind=kind,
        entry_data={
            "key": key,
            "title": title,
            "author": author,
            "coverUrl": cover_url,
            "rating": rating,
            "userStatuses": list(statuses),
        },
    ))
    _check(result)
    console.print(f"[green]{escape(result.message)}[/green]")


@cli.command(name="list")
@click.argument('kind', type=KIND_CHOICE)
@click.option('--status', help='Only show entries with this status')
@click.pass_context
def list_entries(ctx: click.Context, kind: str, status: Optional[str]):
    """List the catalog for KIND, newest first."""
    library = _library(ctx)
    filters = {"userStatus": status} if status else {}
    result: QueryResult = library.ask(ListEntriesQuery(kind=kind, filters=filters))
    _check(result)

    if not result.data:
        console.print("[yellow]No entries found[/yellow]")
        return

    console.print(_entries_table(kind, result.data))
    console.print(f"\n[green]{result.total_count} entries[/green]")


@cli.command()
@click.argument('kind', type=KIND_CHOICE)
@click.argument('key')
@click.pass_context
def show(ctx: click.Context, kind: str, key: str):
    """Show a single entry."""
    library = _library(ctx)
    result = library.ask(GetEntryQuery(kind=kind, key=key))
    _check(result)
    _print_entry(result.data)


@cli.command()
@click.argument('kind', type=KIND_CHOICE)
@click.argument('key')
@click.argument('rating')
@click.pass_context
def rate(ctx: click.Context, kind: str, key: str, rating: str):
    """Set the RATING of an entry, or clear it with "none"."""
    value: Optional[str] = None if rating.strip().lower() in ("none", "null", "-") else rating
    library = _library(ctx)
    result = library.execute(UpdateRatingCommand(kind=kind, key=key, rating=value))
    _check(result)
    console.print(f"[green]{escape(result.message)}[/green]")


@cli.command(name="set-statuses")
@click.argument('kind', type=KIND_CHOICE)
@click.argument('key')
@click.argument('statuses', nargs=-1, required=True)
@click.pass_context
def set_statuses(ctx: click.Context, kind: str, key: str, statuses: Tuple[str, ...]):
    """Replace the statuses of an entry."""
    library = _library(ctx)
    result = library.execute(UpdateStatusesCommand(kind=kind, key=key, user_statuses=list(statuses)))
    _check(result)
    console.print(f"[green]{escape(result.message)}[/green]")


@cli.command()
@click.argument('kind', type=KIND_CHOICE)
@click.argument('key')
@click.option('--yes', is_flag=True, help='Do not ask for confirmation')
@click.pass_context
def delete(ctx: click.Context, kind: str, key: str, yes: bool):
    """Delete an entry and its statuses."""
    if not yes and not Confirm.ask(f"Delete {kind} {escape(key)}?"):
        console.print("[yellow]Cancelled[/yellow]")
        return

    library = _library(ctx)
    result = library.execute(DeleteEntryCommand(kind=kind, key=key))
    _check(result)
    console.print(f"[green]{escape(result.message)}[/green]")


@cli.command()
@click.argument('kind', type=KIND_CHOICE)
@click.pass_context
def statuses(ctx: click.Context, kind: str):
    """List the allowed statuses for KIND."""
    library = _library(ctx)
    result = library.ask(GetAllowedStatusesQuery(kind=kind))
    _check(result)

    if not result.data:
        console.print(f"[yellow]No statuses defined for {kind}. Run init first.[/yellow]")
        return
    for name in result.data:
        console.print(f"  {escape(name)}")


@cli.command(name="add-status")
@click.argument('kind', type=KIND_CHOICE)
@click.argument('name')
@click.pass_context
def add_status(ctx: click.Context, kind: str, name: str):
    """Add NAME to the status vocabulary (sqlite backend only)."""
    library = _library(ctx)
    if not isinstance(library.vocabulary, SqliteStatusVocabulary):
        _fail("The json backend reads its statuses from the configuration file.")

    try:
        added = library.vocabulary.add_status(kind, name)
    except MediaShelfError as e:
        _fail(str(e))

    if added:
        console.print(f"[green]Added {kind} status: {escape(name)}[/green]")
    else:
        console.print(f"[yellow]Status already exists: {escape(name)}[/yellow]")


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == '__main__':
    main()
