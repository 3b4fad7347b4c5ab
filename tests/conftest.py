"""Shared fixtures: document trees on disk and an in-memory host."""

import json
from pathlib import Path

import pytest

from bookclub_import.core.importer import DocumentImporter
from bookclub_import.models.publication import User
from bookclub_import.store.memory import InMemoryStore

SAMPLE_MARKDOWN = """---
title: The Lighthouse
author: Ada Keeper
description: A short novel.
---

Some preamble that is not a chapter.

# Chapter 1: Arrival

The keeper arrived at dawn.

# Chapter 2

The storm came in the night and did not stop.

# Epilogue

Quiet again.
"""


def write(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture
def markdown_file(tmp_path: Path) -> Path:
    return write(tmp_path / "lighthouse.md", SAMPLE_MARKDOWN)


@pytest.fixture
def textbundle_dir(tmp_path: Path) -> Path:
    bundle = tmp_path / "lighthouse.textbundle"
    write(bundle / "info.json", json.dumps({"version": 2, "type": "net.daringfireball.markdown"}))
    write(bundle / "text.md", SAMPLE_MARKDOWN)
    (bundle / "assets").mkdir()
    (bundle / "assets" / "cover.jpg").write_bytes(b"\xff\xd8cover")
    (bundle / "assets" / "map.png").write_bytes(b"\x89PNGmap")
    return bundle


@pytest.fixture
def user() -> User:
    return User(id=7, username="ada")


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def importer(store: InMemoryStore) -> DocumentImporter:
    return DocumentImporter(collections=store, threads=store)
