"""Tests for plain text parsing."""

from pathlib import Path

import pytest

from bookclub_import.core.plaintext_parser import (
    PlainTextParser,
    parse_plaintext_text,
    split_plaintext_metadata,
)
from bookclub_import.exceptions import ParseError
from bookclub_import.models.document import ParsedSection

SAMPLE = (
    "TITLE: Sample\n\nCHAPTER I.\nThe Start\nHello world.\n\n"
    "CHAPTER II.\nMiddle\nMore text here.\n"
)


class TestMetadata:
    def test_reads_known_keys(self):
        metadata, body = split_plaintext_metadata(
            "TITLE: Moby\nAuthor: Herman\nTYPE: Journal\n\nCHAPTER 1\nText\n"
        )
        assert metadata == {"title": "Moby", "author": "Herman", "type": "journal"}
        assert body == "\nCHAPTER 1\nText\n"

    def test_blank_lines_inside_preamble(self):
        metadata, body = split_plaintext_metadata("TITLE: A\n\nDESCRIPTION: B\n\nCHAPTER 1\n")
        assert metadata == {"title": "A", "description": "B"}
        assert body.strip() == "CHAPTER 1"

    def test_no_preamble(self):
        metadata, body = split_plaintext_metadata("CHAPTER 1\nText\n")
        assert metadata == {}
        assert body == "CHAPTER 1\nText\n"

    def test_keys_after_text_are_body(self):
        metadata, body = split_plaintext_metadata("Intro line\nTITLE: Late\n")
        assert metadata == {}
        assert "TITLE: Late" in body


class TestParsePlainText:
    def test_sample_document(self):
        document = parse_plaintext_text(SAMPLE)

        assert document.title == "Sample"
        assert document.type == "book"
        assert document.sections == [
            ParsedSection(number=1, title="The Start", content="Hello world.", word_count=2),
            ParsedSection(number=2, title="Middle", content="More text here.", word_count=3),
        ]

    def test_first_line_with_period_is_body(self):
        document = parse_plaintext_text("CHAPTER 1\nIt was a dark night.\nRain fell.\n")

        section = document.sections[0]
        assert section.title == "Chapter 1"
        assert section.content == "It was a dark night.\nRain fell."

    def test_long_first_line_is_body(self):
        long_line = "word " * 30
        document = parse_plaintext_text(f"CHAPTER 1\n{long_line}\n")
        assert document.sections[0].title == "Chapter 1"

    def test_synthesized_title_uses_position(self):
        content = "CHAPTER 10\nFirst sentence.\nCHAPTER 20\nSecond sentence.\n"
        document = parse_plaintext_text(content)
        assert [s.title for s in document.sections] == ["Chapter 1", "Chapter 2"]
        assert [s.number for s in document.sections] == [1, 2]

    def test_markers_are_case_insensitive(self):
        document = parse_plaintext_text("chapter iv\nOpening\nText\nChapter 5.\nClose\nEnd\n")
        assert [s.title for s in document.sections] == ["Opening", "Close"]

    def test_last_marker_without_trailing_newline(self):
        document = parse_plaintext_text("CHAPTER 1\nOne\nText\nCHAPTER 2")
        assert len(document.sections) == 2
        assert document.sections[1].content == ""

    def test_preamble_before_first_marker_is_dropped(self):
        document = parse_plaintext_text("Foreword text.\n\nCHAPTER 1\nOne\nBody\n")
        assert [s.content for s in document.sections] == ["Body"]

    def test_no_markers_is_an_error(self):
        with pytest.raises(ParseError, match="CHAPTER 1"):
            parse_plaintext_text("TITLE: Nothing\n\nJust some prose.\n")

    def test_file_parser(self, tmp_path: Path):
        path = tmp_path / "book.txt"
        path.write_text(SAMPLE, encoding="utf-8")
        assert PlainTextParser(path).parse().title == "Sample"
