"""Shared helpers for Markdown-like sources: front matter, headings, numbering."""

import logging
import re
from datetime import date, datetime
from pathlib import Path

import yaml

from bookclub_import.models.document import ParsedSection

log = logging.getLogger(__name__)

FRONT_MATTER_RE = re.compile(r"\A---[ \t]*\n(.+?)\n---[ \t]*(?:\n|\Z)", re.DOTALL)
HEADING_RE = re.compile(r"^#[ \t]+(\S.*)$", re.MULTILINE)
LEADING_HEADING_RE = re.compile(r"\A\s*#[ \t]+\S.*(?:\n+|\Z)")

DOCUMENT_KEYS = ("title", "author", "description", "type")

# Values a front matter block may carry; lists and mappings are dropped
_SCALAR_TYPES = (str, int, float, bool, date, datetime)


def extract_front_matter(content: str) -> dict:
    """Read the leading ``---`` YAML block of a document.

    Broken or non-mapping YAML yields an empty dict instead of an error so
    that a bad metadata block never blocks the rest of the document.
    """
    match = FRONT_MATTER_RE.match(content)
    if not match:
        return {}

    try:
        data = yaml.safe_load(match.group(1))
    except yaml.YAMLError as e:
        log.warning(f"Ignoring malformed front matter: {e}")
        return {}

    if not isinstance(data, dict):
        return {}

    return {
        str(key): value
        for key, value in data.items()
        if value is None or isinstance(value, _SCALAR_TYPES)
    }


def strip_front_matter(content: str) -> str:
    """Return the content without its leading front matter block."""
    return FRONT_MATTER_RE.sub("", content, count=1)


def document_metadata(metadata: dict) -> dict[str, str]:
    """Keep the document-level keys, as strings."""
    result = {}
    for key in DOCUMENT_KEYS:
        value = metadata.get(key)
        if value is not None and str(value).strip():
            result[key] = str(value).strip()
    if "type" in result:
        result["type"] = result["type"].lower()
    return result


def extract_first_heading(content: str) -> str | None:
    """Return the text of the first ``# `` heading, if any."""
    match = HEADING_RE.search(content)
    return match.group(1).strip() if match else None


def strip_leading_heading(content: str) -> str:
    """Remove a ``# `` heading when it is the first non-blank line."""
    return LEADING_HEADING_RE.sub("", content, count=1)


def count_words(content: str) -> int:
    """Count whitespace-delimited tokens."""
    return len(content.split())


def number_sections(drafts: list[tuple[str, str]]) -> list[ParsedSection]:
    """Number ``(title, content)`` drafts 1..N in the order given.

    Numbers found in the source are only ever used to synthesize titles,
    never to order sections.
    """
    return [
        ParsedSection(
            number=number,
            title=title,
            content=content,
            word_count=count_words(content),
        )
        for number, (title, content) in enumerate(drafts, start=1)
    ]


def load_assets(directory: Path) -> dict[str, bytes] | None:
    """Read every regular file directly inside ``directory``."""
    if not directory.is_dir():
        return None

    assets = {
        path.name: path.read_bytes()
        for path in sorted(directory.iterdir())
        if path.is_file()
    }
    return assets or None


def normalize_newlines(content: str) -> str:
    return content.replace("\r\n", "\n").replace("\r", "\n")


def read_text(path: Path) -> str:
    """Read a text file as UTF-8, replacing undecodable bytes."""
    return normalize_newlines(path.read_text(encoding="utf-8", errors="replace"))
