"""Tests for folder parsing (index file with content blocks, or one file per section)."""

from pathlib import Path

import pytest

from bookclub_import.core.folder_parser import FolderParser, title_from_filename
from bookclub_import.exceptions import ParseError
from tests.conftest import write


class TestIndexFile:
    def test_content_blocks_in_index_order(self, tmp_path: Path):
        write(
            tmp_path / "book.md",
            "---\ntitle: Collected Tales\nauthor: Ada\n---\n"
            "# Contents\n\n/chapters/second.md\n/first.md \"The Real First\"\n",
        )
        write(tmp_path / "first.md", "# Ignored Heading\nFirst body.\n")
        write(tmp_path / "chapters" / "second.md", "# Opening\nSecond body here.\n")

        document = FolderParser(tmp_path).parse()

        assert document.title == "Collected Tales"
        assert document.author == "Ada"
        assert [s.title for s in document.sections] == ["Opening", "The Real First"]
        assert [s.number for s in document.sections] == [1, 2]
        assert document.sections[0].content == "Second body here."
        # Override title: the body heading is content, not the title
        assert document.sections[1].content == "# Ignored Heading\nFirst body."

    def test_front_matter_title_of_included_file(self, tmp_path: Path):
        write(tmp_path / "index.md", "/one.md\n")
        write(tmp_path / "one.md", "---\ntitle: From Front Matter\n---\nBody.\n")

        document = FolderParser(tmp_path).parse()

        assert document.title == tmp_path.name
        assert document.sections[0].title == "From Front Matter"
        assert document.sections[0].content == "Body."

    def test_untitled_include_gets_chapter_number(self, tmp_path: Path):
        write(tmp_path / "index.md", "/a.md\n/b.md\n")
        write(tmp_path / "a.md", "# A\nText\n")
        write(tmp_path / "b.md", "No heading here.\n")

        document = FolderParser(tmp_path).parse()
        assert [s.title for s in document.sections] == ["A", "Chapter 2"]

    def test_missing_and_escaping_includes_are_skipped(self, tmp_path: Path):
        root = tmp_path / "book"
        write(tmp_path / "secret.md", "# Secret\nDo not import.\n")
        write(root / "index.md", "/missing.md\n/../secret.md\n/real.md\n")
        write(root / "real.md", "# Real\nText\n")

        document = FolderParser(root).parse()
        assert [s.title for s in document.sections] == ["Real"]

    def test_index_priority(self, tmp_path: Path):
        write(tmp_path / "README.md", "/readme-chapter.md\n")
        write(tmp_path / "book.md", "/book-chapter.md\n")
        write(tmp_path / "readme-chapter.md", "# From Readme\n")
        write(tmp_path / "book-chapter.md", "# From Book\n")

        document = FolderParser(tmp_path).parse()
        assert [s.title for s in document.sections] == ["From Book"]

    def test_index_without_blocks_is_parsed_as_markdown(self, tmp_path: Path):
        write(
            tmp_path / "index.md",
            "---\ntitle: Single File\n---\n# One\nFirst\n# Two\nSecond\n",
        )
        write(tmp_path / "other.md", "# Not used\n")

        document = FolderParser(tmp_path).parse()

        assert document.title == "Single File"
        assert [s.title for s in document.sections] == ["One", "Two"]

    def test_assets_folder(self, tmp_path: Path):
        write(tmp_path / "index.md", "/one.md\n")
        write(tmp_path / "one.md", "# One\n")
        (tmp_path / "images").mkdir()
        (tmp_path / "images" / "fig.png").write_bytes(b"png")

        document = FolderParser(tmp_path).parse()
        assert document.assets == {"fig.png": b"png"}


class TestFilesByName:
    def test_files_in_name_order(self, tmp_path: Path):
        write(tmp_path / "02-second.md", "# Second\nTwo two.\n")
        write(tmp_path / "01-first.md", "# First\nOne.\n")
        write(tmp_path / "notes.txt", "ignored")

        document = FolderParser(tmp_path).parse()

        assert [s.title for s in document.sections] == ["First", "Second"]
        assert [s.content for s in document.sections] == ["One.", "Two two."]
        assert [s.word_count for s in document.sections] == [1, 2]
        assert document.title == tmp_path.name

    def test_metadata_only_first_file(self, tmp_path: Path):
        write(tmp_path / "00-meta.md", "---\ntitle: My Journal\ntype: journal\n---\n")
        write(tmp_path / "01-day-one.md", "Dear diary.\n")

        document = FolderParser(tmp_path).parse()

        assert document.title == "My Journal"
        assert document.type == "journal"
        assert [s.number for s in document.sections] == [1]
        assert document.sections[0].title == "Day one"

    def test_metadata_only_first_file_with_unused_keys(self, tmp_path: Path):
        write(tmp_path / "00-meta.md", "---\nsubtitle: Volume one\n---\n")
        write(tmp_path / "01-one.md", "# One\nbody\n")

        document = FolderParser(tmp_path).parse()

        assert [s.title for s in document.sections] == ["One"]
        assert document.title == tmp_path.name

    def test_first_file_front_matter_supplies_document_keys(self, tmp_path: Path):
        write(tmp_path / "a.md", "---\nauthor: Ada\n---\n# Start\nBody\n")
        write(tmp_path / "b.md", "# End\nBody\n")

        document = FolderParser(tmp_path).parse()

        assert document.author == "Ada"
        assert len(document.sections) == 2

    def test_no_markdown_files(self, tmp_path: Path):
        write(tmp_path / "notes.txt", "text")
        with pytest.raises(ParseError, match="No markdown files"):
            FolderParser(tmp_path).parse()

    def test_only_metadata_file(self, tmp_path: Path):
        write(tmp_path / "meta.md", "---\ntitle: Empty\n---\n")
        with pytest.raises(ParseError):
            FolderParser(tmp_path).parse()


class TestTitleFromFilename:
    def test_strips_prefix_and_separators(self):
        assert title_from_filename(Path("03-the_long-night.md")) == "The long night"

    def test_only_digits(self):
        assert title_from_filename(Path("01.md")) == ""
