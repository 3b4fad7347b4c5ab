"""Parsing and import pipeline."""

from bookclub_import.core.importer import DocumentImporter, generate_slug
from bookclub_import.core.parser_factory import (
    DocumentParser,
    ParserFactory,
    parse_document,
)

__all__ = [
    "DocumentParser",
    "ParserFactory",
    "parse_document",
    "DocumentImporter",
    "generate_slug",
]
