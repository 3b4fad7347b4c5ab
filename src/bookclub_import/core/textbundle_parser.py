"""TextBundle parsing (``.textbundle`` directories, ``.textpack``/``.zip`` archives).

A TextBundle is a directory holding ``info.json``, a ``text.*`` body and an
optional ``assets/`` directory. A TextPack is the same directory zipped.
"""

import json
import logging
import tempfile
import zipfile
from pathlib import Path

from bookclub_import.core.folder_parser import FolderParser
from bookclub_import.core.markdown_parser import parse_markdown_text
from bookclub_import.core.markup import load_assets, read_text
from bookclub_import.core.parser_factory import DocumentParser
from bookclub_import.exceptions import ParseError
from bookclub_import.models.document import ParsedDocument

log = logging.getLogger(__name__)

INFO_FILE = "info.json"
INFO_METADATA_KEYS = ("title", "author", "description")


def read_info(info_path: Path) -> dict:
    """Read ``info.json``, degrading to an empty dict when it is unusable."""
    try:
        info = json.loads(read_text(info_path))
    except json.JSONDecodeError as e:
        log.warning(f"Ignoring malformed {INFO_FILE}: {e}")
        return {}
    return info if isinstance(info, dict) else {}


class TextBundleParser(DocumentParser):
    """Parse a ``.textbundle`` directory."""

    def __init__(self, path: Path):
        self.path = path

    def parse(self) -> ParsedDocument:
        info_path = self.path / INFO_FILE
        if not info_path.is_file():
            raise ParseError(f"Invalid TextBundle: missing {INFO_FILE}")

        info = read_info(info_path)

        text_files = sorted(p for p in self.path.glob("text.*") if p.is_file())
        if not text_files:
            raise ParseError("Invalid TextBundle: missing text file")

        document = parse_markdown_text(read_text(text_files[0]))

        # info.json only fills in what the front matter left out
        updates: dict = {
            key: str(info[key]).strip()
            for key in INFO_METADATA_KEYS
            if getattr(document, key) is None
            and isinstance(info.get(key), str)
            and info[key].strip()
        }

        assets_dir = self.path / "assets"
        assets = load_assets(assets_dir)
        if assets:
            updates["assets"] = assets
            covers = sorted(p for p in assets_dir.glob("cover.*") if p.is_file())
            if covers:
                log.info(f"Found cover image {covers[0].name}")
                updates["cover_image"] = covers[0].read_bytes()

        return document.model_copy(update=updates)


class ArchiveParser(DocumentParser):
    """Parse a ``.textpack`` or ``.zip`` archive.

    The archive is unpacked into a temporary directory that is removed
    when parsing finishes, whether or not it succeeds.
    """

    def __init__(self, path: Path):
        self.path = path

    def parse(self) -> ParsedDocument:
        with tempfile.TemporaryDirectory(prefix="bookclub-import-") as tmp:
            root = Path(tmp)
            self._extract(root)
            return self._parser_for(root).parse()

    def _extract(self, destination: Path) -> None:
        try:
            with zipfile.ZipFile(self.path) as archive:
                # extractall drops absolute paths and ".." components
                archive.extractall(destination)
        except zipfile.BadZipFile as e:
            raise ParseError(f"Invalid archive {self.path.name}: {e}") from e

    def _parser_for(self, root: Path) -> DocumentParser:
        bundles = sorted(p for p in root.glob("*.textbundle") if p.is_dir())
        if bundles:
            log.info(f"Archive contains TextBundle {bundles[0].name}")
            return TextBundleParser(bundles[0])

        if (root / INFO_FILE).is_file():
            log.info("Archive root is a TextBundle")
            return TextBundleParser(root)

        # Archives of a folder usually wrap it in one top-level directory
        entries = [p for p in root.iterdir() if p.name != "__MACOSX"]
        if len(entries) == 1 and entries[0].is_dir():
            if (entries[0] / INFO_FILE).is_file():
                log.info(f"Archive directory {entries[0].name} is a TextBundle")
                return TextBundleParser(entries[0])
            return FolderParser(entries[0])

        return FolderParser(root)
