"""Parse books and journals into chapters and import them into a Bookclub publication."""

from bookclub_import.config import ImportOptions, PublicationStyle
from bookclub_import.core.importer import DocumentImporter
from bookclub_import.core.parser_factory import ParserFactory, parse_document
from bookclub_import.exceptions import ImportFailure, ParseError, StoreError
from bookclub_import.models import (
    ImportResult,
    ParsedDocument,
    ParsedSection,
    User,
)

__version__ = "0.1.0"

__all__ = [
    "parse_document",
    "ParserFactory",
    "DocumentImporter",
    "ImportOptions",
    "PublicationStyle",
    "ImportResult",
    "ParsedDocument",
    "ParsedSection",
    "User",
    "ParseError",
    "ImportFailure",
    "StoreError",
]
