"""Main CLI application."""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from bookclub_import.config import DEFAULT_ACCESS_LEVEL, ImportOptions
from bookclub_import.core.parser_factory import ParserFactory
from bookclub_import.exceptions import ImportFailure, ParseError, StoreError
from bookclub_import.models.publication import User
from bookclub_import.store.json_store import JsonStore

app = typer.Typer(
    name="bookclub-import",
    help="Import books and journals into Bookclub publications.",
    add_completion=False,
)

console = Console()

SUPPORTED_HINT = "Supported: .textbundle, .textpack, .zip, .md, .markdown, .txt, folders"


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


@app.callback()
def main(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logging"),
    ] = False,
) -> None:
    """Import books and journals into Bookclub publications."""
    configure_logging(verbose)


def _check_supported(path: Path) -> None:
    if not ParserFactory.is_supported(path):
        console.print(f"[red]Unsupported file format: {path.suffix or path.name}[/]")
        console.print(f"[dim]{SUPPORTED_HINT}[/]")
        raise typer.Exit(1)


@app.command()
def info(
    path: Annotated[
        Path,
        typer.Argument(
            help="Path to the document (file, .textbundle or folder)",
            exists=True,
            resolve_path=True,
        ),
    ],
) -> None:
    """Display document metadata and the sections it splits into."""
    _check_supported(path)

    try:
        from bookclub_import.commands.info import execute_info

        execute_info(path=path, console=console)
    except ParseError as e:
        console.print(f"[red]Error reading document: {e}[/]")
        raise typer.Exit(1)


@app.command("import")
def import_(
    path: Annotated[
        Path,
        typer.Argument(
            help="Path to the document (file, .textbundle or folder)",
            exists=True,
            resolve_path=True,
        ),
    ],
    store_dir: Annotated[
        Path,
        typer.Option(
            "--store-dir",
            "-d",
            help="Directory holding the store (default: current directory)",
        ),
    ] = Path("."),
    user_id: Annotated[
        int,
        typer.Option("--user-id", help="Id of the importing user"),
    ] = 1,
    username: Annotated[
        str,
        typer.Option("--username", help="Name of the importing user"),
    ] = "system",
    publication_id: Annotated[
        Optional[int],
        typer.Option(
            "--publication-id",
            "-p",
            help="Import into this existing publication instead of creating one",
        ),
    ] = None,
    slug: Annotated[
        Optional[str],
        typer.Option("--slug", help="Slug for a new publication (default: from title)"),
    ] = None,
    publish: Annotated[
        bool,
        typer.Option("--publish", help="Publish new chapters instead of leaving drafts"),
    ] = False,
    access_level: Annotated[
        str,
        typer.Option("--access-level", "-a", help="Access level for new chapters"),
    ] = DEFAULT_ACCESS_LEVEL,
    replace: Annotated[
        bool,
        typer.Option(
            "--replace",
            help="Update chapters that already exist instead of skipping them",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Suppress progress output"),
    ] = False,
) -> None:
    """Parse a document and import it as a publication with chapters."""
    _check_supported(path)

    try:
        from bookclub_import.commands.import_document import execute_import

        options = ImportOptions(
            publication_id=publication_id,
            slug=slug,
            publish=publish,
            access_level=access_level,
            replace_existing=replace,
        )

        result = execute_import(
            path=path,
            store_dir=store_dir.resolve(),
            user=User(id=user_id, username=username),
            options=options,
            quiet=quiet,
            console=console,
        )
    except ValidationError as e:
        for error in e.errors():
            field = ".".join(str(part) for part in error["loc"])
            console.print(f"[red]Invalid {field}: {error['msg']}[/]")
        raise typer.Exit(1)
    except (ParseError, ImportFailure, StoreError) as e:
        console.print(f"[red]Error: {e}[/]")
        raise typer.Exit(1)

    if not result.success:
        raise typer.Exit(1)


@app.command()
def publications(
    store_dir: Annotated[
        Path,
        typer.Option(
            "--store-dir",
            "-d",
            help="Directory holding the store (default: current directory)",
        ),
    ] = Path("."),
) -> None:
    """List publications in the store."""
    store = JsonStore(store_dir.resolve())
    entries = store.list_publications()

    if not entries:
        console.print("[dim]No publications[/]")
        return

    table = Table(title="Publications", show_header=True, header_style="bold cyan")
    table.add_column("Id", style="dim", justify="right")
    table.add_column("Name", style="white")
    table.add_column("Slug", style="cyan")
    table.add_column("Type", style="dim")
    table.add_column("Chapters", justify="right", style="green")

    for collection, config in entries:
        chapters = [
            child
            for child in store.list_children(collection)
            if store.get_chapter_config(child) is not None
        ]
        table.add_row(
            str(collection.id), collection.name, config.slug, config.type, str(len(chapters))
        )

    console.print(table)


if __name__ == "__main__":
    app()
