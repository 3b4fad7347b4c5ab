"""Data models."""

from bookclub_import.models.document import ParsedDocument, ParsedSection
from bookclub_import.models.publication import (
    ChapterConfig,
    Collection,
    Post,
    PublicationConfig,
    Thread,
    User,
)
from bookclub_import.models.result import ImportResult

__all__ = [
    # Document models
    "ParsedSection",
    "ParsedDocument",
    # Host entity models
    "User",
    "Collection",
    "PublicationConfig",
    "ChapterConfig",
    "Thread",
    "Post",
    # Import output
    "ImportResult",
]
