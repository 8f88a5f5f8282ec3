"""Shared fixtures for textviewer tests."""

from datetime import datetime

import pytest

from textviewer.config import ViewerOptions
from textviewer.models import Document, EncodingLabel, FileMetadata
from textviewer.protocols import SourceFile


def make_document(lines: list[str], encoding: EncodingLabel = EncodingLabel.UTF_8) -> Document:
    """Join lines with \\n and index them."""
    return Document.from_text("\n".join(lines), encoding)


def numbered_lines(count: int) -> list[str]:
    return [f"line {i}" for i in range(count)]


@pytest.fixture
def hello_document():
    return make_document(["Hello", "world", "Hello", "again"])


@pytest.fixture
def long_document():
    """3,500 short lines: virtualized by line count, 117 pages of 30."""
    return make_document(numbered_lines(3500))


@pytest.fixture
def options():
    return ViewerOptions()


@pytest.fixture
def source_file():
    def build(text: str = "Hello\nworld\n", name: str = "notes.txt", encoding: str = "utf-8"):
        return SourceFile(
            name=name,
            data=text.encode(encoding),
            last_modified=datetime(2024, 5, 1, 12, 30),
        )

    return build


@pytest.fixture
def metadata():
    return FileMetadata(name="notes.txt", size_bytes=12, last_modified=datetime(2024, 5, 1, 12, 30))
