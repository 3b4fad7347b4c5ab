"""Markdown parsing: front matter plus one section per top-level heading."""

import re
from pathlib import Path

from bookclub_import.core.markup import (
    document_metadata,
    extract_front_matter,
    normalize_newlines,
    number_sections,
    read_text,
    strip_front_matter,
)
from bookclub_import.core.parser_factory import DocumentParser
from bookclub_import.exceptions import ParseError
from bookclub_import.models.document import ParsedDocument

SECTION_HEADING_RE = re.compile(r"^#[ \t]+(?=\S)", re.MULTILINE)
# "Chapter 3", "Chapter 3: The Storm", "Chapter 3. The Storm"
CHAPTER_HEADING_RE = re.compile(r"^chapter\s+(\d+)[:.\s]*(.*)$", re.IGNORECASE)


def split_markdown_sections(body: str) -> list[tuple[str, str]]:
    """Split a Markdown body on ``# `` headings into ``(title, content)`` drafts.

    Text before the first heading is treated as preamble and dropped.
    """
    parts = SECTION_HEADING_RE.split(body)
    parts.pop(0)

    drafts = []
    for part in parts:
        if not part.strip():
            continue

        title_line, _, rest = part.partition("\n")
        title_line = title_line.strip()

        match = CHAPTER_HEADING_RE.match(title_line)
        if match:
            title = match.group(2).strip() or f"Chapter {match.group(1)}"
        else:
            title = title_line

        drafts.append((title, rest.strip()))

    return drafts


def parse_markdown_text(content: str) -> ParsedDocument:
    """Parse a Markdown string into a document.

    Raises:
        ParseError: If the body has no ``# `` headings
    """
    content = normalize_newlines(content)
    metadata = document_metadata(extract_front_matter(content))
    drafts = split_markdown_sections(strip_front_matter(content))

    if not drafts:
        raise ParseError(
            "No chapters found. Use '# Chapter Title' headers to separate chapters."
        )

    return ParsedDocument(
        title=metadata.get("title"),
        author=metadata.get("author"),
        description=metadata.get("description"),
        type=metadata.get("type", "book"),
        sections=number_sections(drafts),
    )


class MarkdownParser(DocumentParser):
    """Parse a single ``.md`` / ``.markdown`` file."""

    def __init__(self, path: Path):
        self.path = path

    def parse(self) -> ParsedDocument:
        return parse_markdown_text(read_text(self.path))


class MarkdownTextParser(DocumentParser):
    """Parse Markdown held in memory."""

    def __init__(self, content: str):
        self.content = content

    def parse(self) -> ParsedDocument:
        return parse_markdown_text(self.content)
