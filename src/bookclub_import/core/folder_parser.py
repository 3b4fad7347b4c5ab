"""Folder parsing: an index file with content blocks, or one file per section."""

import logging
import re
from pathlib import Path

from bookclub_import.core.markdown_parser import parse_markdown_text
from bookclub_import.core.markup import (
    FRONT_MATTER_RE,
    document_metadata,
    extract_first_heading,
    extract_front_matter,
    load_assets,
    number_sections,
    read_text,
    strip_front_matter,
    strip_leading_heading,
)
from bookclub_import.core.parser_factory import DocumentParser
from bookclub_import.exceptions import ParseError
from bookclub_import.models.document import ParsedDocument

log = logging.getLogger(__name__)

INDEX_FILES = ("book.md", "index.md", "README.md")
# iA Writer content blocks: /chapter-1.md, /part/two.md "Custom Title"
CONTENT_BLOCK_RE = re.compile(
    r"""^/(.+\.(?:md|markdown|txt))(?:\s+["'(](.+)["')])?$""", re.IGNORECASE
)
NUMERIC_PREFIX_RE = re.compile(r"^\d+[-_]?")


def title_from_filename(path: Path) -> str:
    """Turn ``03-the_long-night.md`` into ``The long night``."""
    stem = NUMERIC_PREFIX_RE.sub("", path.stem)
    return re.sub(r"[-_]", " ", stem).strip().capitalize()


def section_from_markup(
    content: str, fallback_title: str, title_override: str | None = None
) -> tuple[str, str]:
    """Build a ``(title, content)`` draft from one Markdown file.

    The title comes from the override, the front matter, the first heading
    or the fallback, in that order. When the title is the body's leading
    heading, that heading is removed from the content.
    """
    metadata = extract_front_matter(content)
    body = strip_front_matter(content)

    front_matter_title = document_metadata(metadata).get("title")
    heading = extract_first_heading(body)

    title = title_override or front_matter_title or heading or fallback_title
    if heading is not None and title == heading:
        body = strip_leading_heading(body)

    return title, body.strip()


class FolderParser(DocumentParser):
    """Parse a directory of Markdown files."""

    def __init__(self, path: Path):
        self.path = path

    def parse(self) -> ParsedDocument:
        index_file = self._find_index_file()
        if index_file is not None:
            log.info(f"Using index file {index_file.name}")
            return self._parse_with_index(index_file)
        return self._parse_by_files()

    def _find_index_file(self) -> Path | None:
        for name in INDEX_FILES:
            candidate = self.path / name
            if candidate.is_file():
                return candidate
        return None

    def _load_assets(self) -> dict[str, bytes] | None:
        return load_assets(self.path / "assets") or load_assets(self.path / "images")

    def _resolve_include(self, relative: str) -> Path | None:
        root = self.path.resolve()
        target = (root / relative).resolve()
        if not target.is_relative_to(root):
            log.warning(f"Skipping content block outside the folder: /{relative}")
            return None
        if not target.is_file():
            log.warning(f"Skipping missing content block: /{relative}")
            return None
        return target

    def _parse_with_index(self, index_file: Path) -> ParsedDocument:
        content = read_text(index_file)

        drafts = []
        for line in content.splitlines():
            match = CONTENT_BLOCK_RE.match(line.strip())
            if not match:
                continue

            include_path = self._resolve_include(match.group(1))
            if include_path is None:
                continue

            title, body = section_from_markup(
                read_text(include_path),
                fallback_title=f"Chapter {len(drafts) + 1}",
                title_override=match.group(2),
            )
            drafts.append((title, body))

        if not drafts:
            # No content blocks: the index is the whole document
            document = parse_markdown_text(content)
            return document.model_copy(update={"assets": self._load_assets()})

        metadata = document_metadata(extract_front_matter(content))
        return ParsedDocument(
            title=metadata.get("title", self.path.name),
            author=metadata.get("author"),
            description=metadata.get("description"),
            type=metadata.get("type", "book"),
            sections=number_sections(drafts),
            assets=self._load_assets(),
        )

    def _parse_by_files(self) -> ParsedDocument:
        files = sorted(
            path
            for path in self.path.iterdir()
            if path.is_file() and path.suffix.lower() in (".md", ".markdown")
        )
        if not files:
            raise ParseError("No markdown files found in folder")

        metadata: dict[str, str] = {}
        drafts = []

        for index, path in enumerate(files):
            content = read_text(path)

            if index == 0:
                metadata = document_metadata(extract_front_matter(content))
                metadata_only = not strip_front_matter(content).strip()
                if FRONT_MATTER_RE.match(content) and metadata_only:
                    log.info(f"Using {path.name} as document metadata")
                    continue

            title, body = section_from_markup(
                content,
                fallback_title=title_from_filename(path) or f"Chapter {len(drafts) + 1}",
            )
            drafts.append((title, body))

        if not drafts:
            raise ParseError(
                "No chapters found. Add Markdown files next to the metadata file."
            )

        return ParsedDocument(
            title=metadata.get("title", self.path.name),
            author=metadata.get("author"),
            description=metadata.get("description"),
            type=metadata.get("type", "book"),
            sections=number_sections(drafts),
            assets=self._load_assets(),
        )
