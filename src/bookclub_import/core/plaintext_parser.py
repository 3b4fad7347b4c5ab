"""Plain text parsing: KEY: value preamble plus CHAPTER markers."""

import re
from pathlib import Path

from bookclub_import.core.markup import normalize_newlines, number_sections, read_text
from bookclub_import.core.parser_factory import DocumentParser
from bookclub_import.exceptions import ParseError
from bookclub_import.models.document import ParsedDocument

METADATA_LINE_RE = re.compile(
    r"^(TITLE|AUTHOR|DESCRIPTION|TYPE):[ \t]*(.*)$", re.IGNORECASE
)
# CHAPTER 1, CHAPTER I, Chapter XIV.
CHAPTER_MARKER_RE = re.compile(
    r"^CHAPTER[ \t]+([IVXLCDM\d]+)\.?[ \t]*\n", re.IGNORECASE | re.MULTILINE
)

MAX_TITLE_LENGTH = 100


def split_plaintext_metadata(content: str) -> tuple[dict[str, str], str]:
    """Consume leading ``KEY: value`` lines.

    Blank lines may appear between metadata lines. The first other line
    ends the preamble.

    Returns:
        (metadata, remaining body)
    """
    lines = content.splitlines(keepends=True)
    metadata: dict[str, str] = {}
    start = 0

    for index, line in enumerate(lines):
        match = METADATA_LINE_RE.match(line.rstrip("\n"))
        if match:
            value = match.group(2).strip()
            if value:
                metadata[match.group(1).lower()] = value
            start = index + 1
        elif not line.strip():
            continue
        else:
            break

    if "type" in metadata:
        metadata["type"] = metadata["type"].lower()

    return metadata, "".join(lines[start:])


def split_plaintext_sections(body: str) -> list[tuple[str, str]]:
    """Split a body on CHAPTER markers into ``(title, content)`` drafts."""
    if not body.endswith("\n"):
        body += "\n"

    parts = CHAPTER_MARKER_RE.split(body)
    # [preamble, marker, text, marker, text, ...]
    segments = parts[2::2]

    drafts = []
    for index, segment in enumerate(segments, start=1):
        text = segment.strip()
        title_line, _, rest = text.partition("\n")
        title_line = title_line.strip()

        if title_line and len(title_line) < MAX_TITLE_LENGTH and "." not in title_line:
            drafts.append((title_line, rest.strip()))
        else:
            drafts.append((f"Chapter {index}", text))

    return drafts


def parse_plaintext_text(content: str) -> ParsedDocument:
    """Parse a plain text string into a document.

    Raises:
        ParseError: If there are no CHAPTER markers
    """
    metadata, body = split_plaintext_metadata(normalize_newlines(content))
    drafts = split_plaintext_sections(body)

    if not drafts:
        raise ParseError(
            "No chapters found. Use 'CHAPTER 1' or 'CHAPTER I' markers "
            "to separate chapters."
        )

    return ParsedDocument(
        title=metadata.get("title"),
        author=metadata.get("author"),
        description=metadata.get("description"),
        type=metadata.get("type", "book"),
        sections=number_sections(drafts),
    )


class PlainTextParser(DocumentParser):
    """Parse a ``.txt`` file."""

    def __init__(self, path: Path):
        self.path = path

    def parse(self) -> ParsedDocument:
        return parse_plaintext_text(read_text(self.path))


class PlainTextTextParser(DocumentParser):
    """Parse plain text held in memory."""

    def __init__(self, content: str):
        self.content = content

    def parse(self) -> ParsedDocument:
        return parse_plaintext_text(self.content)
