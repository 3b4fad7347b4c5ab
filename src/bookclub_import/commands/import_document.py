"""Import command implementation."""

from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from bookclub_import.config import ImportOptions
from bookclub_import.core.importer import DocumentImporter
from bookclub_import.core.parser_factory import parse_document
from bookclub_import.models.publication import User
from bookclub_import.models.result import ImportResult
from bookclub_import.store.json_store import JsonStore


def display_result(result: ImportResult, store: JsonStore, console: Console) -> None:
    """Display what an import created, updated and skipped."""
    if result.publication is not None:
        config = store.get_publication_config(result.publication)
        slug = config.slug if config else "?"
        status = "[green]Imported[/]" if result.success else "[red]Nothing imported[/]"
        console.print(
            Panel(
                f"{status}\n\n"
                f"[dim]Publication:[/] {result.publication.name} "
                f"(id {result.publication.id}, slug {slug})\n"
                f"[dim]Created:[/] {len(result.chapters_created)}  "
                f"[dim]Updated:[/] {len(result.chapters_updated)}  "
                f"[dim]Errors:[/] {len(result.errors)}",
                title="Import Result",
                border_style="green" if result.success else "red",
            )
        )

    if result.chapters_created or result.chapters_updated:
        table = Table(title="Chapters", show_header=True, header_style="bold cyan")
        table.add_column("Title", style="white")
        table.add_column("Action", style="green")
        for title in result.chapters_created:
            table.add_row(title, "created")
        for title in result.chapters_updated:
            table.add_row(title, "updated")
        console.print(table)

    for error in result.errors:
        console.print(f"[red]{error}[/]")
    for warning in result.warnings:
        console.print(f"[yellow]{warning}[/]")


def execute_import(
    path: Path,
    store_dir: Path,
    user: User,
    options: ImportOptions,
    quiet: bool,
    console: Console,
) -> ImportResult:
    """Parse a document and import it into the store under ``store_dir``."""
    if quiet:
        document = parse_document(path=path)
    else:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True,
        ) as progress:
            progress.add_task(f"Parsing {path.name}...", total=None)
            document = parse_document(path=path)
        console.print(f"[dim]Parsed {len(document.sections)} section(s)[/]")

    store = JsonStore(store_dir)
    importer = DocumentImporter(collections=store, threads=store)
    result = importer.import_document(user, document, options)

    if not quiet or not result.success:
        display_result(result, store, console)
    return result
