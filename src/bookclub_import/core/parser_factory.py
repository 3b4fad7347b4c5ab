"""Factory for creating document parsers based on file format."""

import logging
from abc import ABC, abstractmethod
from pathlib import Path

from bookclub_import.exceptions import ParseError
from bookclub_import.models.document import ParsedDocument

log = logging.getLogger(__name__)


class DocumentParser(ABC):
    """Abstract base class for document parsers."""

    @abstractmethod
    def parse(self) -> ParsedDocument:
        """Parse the source and return the complete document."""
        pass


class ParserFactory:
    """Factory for creating the appropriate parser for a path or content."""

    SUPPORTED_FORMATS = {
        ".textbundle": "textbundle",
        ".textpack": "archive",
        ".zip": "archive",
        ".md": "markdown",
        ".markdown": "markdown",
        ".txt": "plaintext",
    }

    @classmethod
    def create(cls, path: Path) -> DocumentParser:
        """Create the parser for a file or directory.

        Args:
            path: A file, a ``.textbundle`` directory or a folder of
                Markdown files

        Returns:
            DocumentParser instance for the detected format

        Raises:
            ParseError: If the path does not exist or its format is not
                supported
        """
        path = Path(path)
        if not path.exists():
            raise ParseError(f"File not found: {path}")

        file_format = cls.detect_format(path)
        log.debug(f"Detected format {file_format} for {path}")

        if file_format == "textbundle":
            from bookclub_import.core.textbundle_parser import TextBundleParser

            return TextBundleParser(path)
        elif file_format == "folder":
            from bookclub_import.core.folder_parser import FolderParser

            return FolderParser(path)
        elif file_format == "archive":
            from bookclub_import.core.textbundle_parser import ArchiveParser

            return ArchiveParser(path)
        elif file_format == "markdown":
            from bookclub_import.core.markdown_parser import MarkdownParser

            return MarkdownParser(path)
        elif file_format == "plaintext":
            from bookclub_import.core.plaintext_parser import PlainTextParser

            return PlainTextParser(path)

        raise ParseError(f"Unsupported file format: {path.suffix or path.name}")

    @classmethod
    def from_content(cls, content: str | bytes, filename: str) -> DocumentParser:
        """Create a parser for in-memory content.

        The filename only serves as a format hint. Content with an
        unrecognized extension is tried as Markdown first, then as plain
        text.
        """
        from bookclub_import.core.markdown_parser import MarkdownTextParser
        from bookclub_import.core.plaintext_parser import PlainTextTextParser

        if isinstance(content, bytes):
            content = content.decode("utf-8", errors="replace")

        suffix = Path(filename).suffix.lower()
        if cls.SUPPORTED_FORMATS.get(suffix) == "markdown":
            return MarkdownTextParser(content)
        elif cls.SUPPORTED_FORMATS.get(suffix) == "plaintext":
            return PlainTextTextParser(content)
        return FallbackTextParser(content)

    @classmethod
    def detect_format(cls, path: Path) -> str:
        """Detect the format of a path from its structure and extension.

        Returns:
            Format string ("textbundle", "folder", "archive", "markdown",
            "plaintext" or "unknown")
        """
        path = Path(path)
        suffix = path.suffix.lower()

        if path.is_dir():
            return "textbundle" if suffix == ".textbundle" else "folder"
        if suffix == ".textbundle":
            return "unknown"
        return cls.SUPPORTED_FORMATS.get(suffix, "unknown")

    @classmethod
    def is_supported(cls, path: Path) -> bool:
        """Check if a path can be parsed."""
        return cls.detect_format(path) != "unknown"


class FallbackTextParser(DocumentParser):
    """Parse content of unknown type as Markdown, falling back to plain text."""

    def __init__(self, content: str):
        self.content = content

    def parse(self) -> ParsedDocument:
        from bookclub_import.core.markdown_parser import parse_markdown_text
        from bookclub_import.core.plaintext_parser import parse_plaintext_text

        try:
            return parse_markdown_text(self.content)
        except ParseError:
            log.info("No Markdown headings found, trying plain text chapters")
            return parse_plaintext_text(self.content)


def parse_document(
    path: str | Path | None = None,
    content: str | bytes | None = None,
    filename: str | None = None,
) -> ParsedDocument:
    """Parse a document from a path, or from content with a filename hint.

    Raises:
        ParseError: If the input is missing, unsupported or has no sections
    """
    if path is not None:
        parser = ParserFactory.create(Path(path))
    elif content is not None and filename:
        parser = ParserFactory.from_content(content, filename)
    else:
        raise ParseError("Must provide either a path or content with a filename")

    document = parser.parse()
    log.info(
        f"Parsed {len(document.sections)} section(s), "
        f"{document.word_count:,} words, title: {document.title or 'untitled'}"
    )
    return document
