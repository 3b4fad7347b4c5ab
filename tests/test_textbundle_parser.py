"""Tests for TextBundle directories and TextPack / zip archives."""

import json
import tempfile
import zipfile
from pathlib import Path

import pytest

from bookclub_import.core.textbundle_parser import ArchiveParser, TextBundleParser
from bookclub_import.exceptions import ParseError
from tests.conftest import write


def zip_dir(source: Path, archive: Path, prefix: str = "") -> Path:
    with zipfile.ZipFile(archive, "w") as zf:
        for path in sorted(source.rglob("*")):
            if path.is_file():
                zf.write(path, prefix + str(path.relative_to(source)))
    return archive


@pytest.fixture
def recorded_tempdirs(monkeypatch):
    """Record the scratch directories the archive parser creates."""
    created = []
    original = tempfile.TemporaryDirectory

    class Recording(original):
        def __init__(self, *args, **kwargs):
            super().__init__(*args, **kwargs)
            created.append(Path(self.name))

    monkeypatch.setattr(tempfile, "TemporaryDirectory", Recording)
    return created


class TestTextBundle:
    def test_sections_cover_and_assets(self, textbundle_dir: Path):
        document = TextBundleParser(textbundle_dir).parse()

        assert document.title == "The Lighthouse"
        assert [s.title for s in document.sections] == ["Arrival", "Chapter 2", "Epilogue"]
        assert document.cover_image == b"\xff\xd8cover"
        assert document.assets == {"cover.jpg": b"\xff\xd8cover", "map.png": b"\x89PNGmap"}

    def test_missing_info_json(self, textbundle_dir: Path):
        (textbundle_dir / "info.json").unlink()
        with pytest.raises(ParseError, match="missing info.json"):
            TextBundleParser(textbundle_dir).parse()

    def test_missing_text_file(self, textbundle_dir: Path):
        (textbundle_dir / "text.md").unlink()
        with pytest.raises(ParseError, match="missing text file"):
            TextBundleParser(textbundle_dir).parse()

    def test_malformed_info_json_is_ignored(self, textbundle_dir: Path):
        (textbundle_dir / "info.json").write_text("{not json", encoding="utf-8")
        document = TextBundleParser(textbundle_dir).parse()
        assert len(document.sections) == 3

    def test_info_json_fills_missing_metadata(self, tmp_path: Path):
        bundle = tmp_path / "notes.textbundle"
        write(bundle / "info.json", json.dumps({"title": "From Info", "author": "Info Author"}))
        write(bundle / "text.markdown", "---\nauthor: Front Matter Author\n---\n# One\nBody\n")

        document = TextBundleParser(bundle).parse()

        assert document.title == "From Info"
        assert document.author == "Front Matter Author"
        assert document.cover_image is None
        assert document.assets is None


class TestArchive:
    def test_textpack_with_bundle_directory(
        self, textbundle_dir: Path, tmp_path: Path, recorded_tempdirs
    ):
        archive = zip_dir(textbundle_dir, tmp_path / "lighthouse.textpack", "lighthouse.textbundle/")

        document = ArchiveParser(archive).parse()

        assert document.title == "The Lighthouse"
        assert document.cover_image == b"\xff\xd8cover"
        assert len(recorded_tempdirs) == 1
        assert not recorded_tempdirs[0].exists()

    def test_bundle_contents_at_archive_root(self, textbundle_dir: Path, tmp_path: Path):
        archive = zip_dir(textbundle_dir, tmp_path / "flat.textpack")
        document = ArchiveParser(archive).parse()
        assert len(document.sections) == 3

    def test_bundle_in_plain_wrapping_directory(self, textbundle_dir: Path, tmp_path: Path):
        archive = zip_dir(textbundle_dir, tmp_path / "book.zip", "Book/")

        document = ArchiveParser(archive).parse()

        assert document.cover_image == b"\xff\xd8cover"
        assert [s.title for s in document.sections] == ["Arrival", "Chapter 2", "Epilogue"]

    def test_zip_of_markdown_folder(self, tmp_path: Path):
        folder = tmp_path / "src"
        write(folder / "01-one.md", "# One\nFirst\n")
        write(folder / "02-two.md", "# Two\nSecond\n")
        archive = zip_dir(folder, tmp_path / "book.zip", "my-book/")

        document = ArchiveParser(archive).parse()

        assert document.title == "my-book"
        assert [s.title for s in document.sections] == ["One", "Two"]

    def test_scratch_directory_removed_on_failure(self, tmp_path: Path, recorded_tempdirs):
        folder = tmp_path / "src"
        write(folder / "readme.txt", "nothing to import")
        archive = zip_dir(folder, tmp_path / "empty.zip")

        with pytest.raises(ParseError):
            ArchiveParser(archive).parse()

        assert len(recorded_tempdirs) == 1
        assert not recorded_tempdirs[0].exists()

    def test_not_a_zip(self, tmp_path: Path):
        archive = write(tmp_path / "broken.zip", "definitely not a zip")
        with pytest.raises(ParseError, match="Invalid archive"):
            ArchiveParser(archive).parse()
