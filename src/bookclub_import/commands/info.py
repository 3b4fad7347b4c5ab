"""Info command implementation."""

from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from bookclub_import.core.parser_factory import ParserFactory, parse_document
from bookclub_import.models.document import ParsedDocument


def display_sections(document: ParsedDocument, console: Console) -> None:
    """Display the section list."""
    table = Table(title="Sections", show_header=True, header_style="bold cyan")
    table.add_column("#", style="dim", width=4)
    table.add_column("Title", style="white")
    table.add_column("Words", justify="right", style="green")

    for section in document.sections:
        table.add_row(str(section.number), section.title, f"{section.word_count:,}")

    console.print(table)


def execute_info(path: Path, console: Console) -> None:
    """Parse a document and show its metadata and sections."""
    document = parse_document(path=path)

    info_lines = [
        f"[bold]{document.title or 'Untitled'}[/]",
        "",
        f"[dim]Author:[/] {document.author or 'Unknown'}",
        f"[dim]Type:[/] {document.type}",
        f"[dim]Format:[/] {ParserFactory.detect_format(path)}",
        f"[dim]Sections:[/] {len(document.sections)}",
        f"[dim]Words:[/] {document.word_count:,}",
    ]
    if document.description:
        info_lines.append(f"[dim]Description:[/] {document.description}")
    if document.cover_image:
        info_lines.append(f"[dim]Cover:[/] {len(document.cover_image):,} bytes")
    if document.assets:
        info_lines.append(f"[dim]Assets:[/] {', '.join(sorted(document.assets))}")

    console.print()
    console.print(
        Panel("\n".join(info_lines), title="Document Information", border_style="green")
    )
    console.print()
    display_sections(document, console)
    console.print()
