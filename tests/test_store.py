"""Tests for the SQLite document library."""

from datetime import datetime

import pytest

from textviewer.models import Document, EncodingLabel, FileMetadata
from textviewer.storage import LibraryStore


@pytest.fixture
def store(tmp_path):
    store = LibraryStore(tmp_path / "library.db")
    store.initialize()
    return store


def korean_document(name="letter.txt"):
    text = "안녕하세요\n반갑습니다"
    metadata = FileMetadata(
        name=name,
        size_bytes=len(text.encode("euc_kr")),
        last_modified=datetime(2023, 1, 2, 3, 4, 5),
    )
    return Document.from_text(text, EncodingLabel.EUC_KR, metadata.size_bytes, metadata)


class TestLibraryStore:
    def test_save_and_load(self, store):
        doc = korean_document()
        store.save(doc)
        loaded = store.load("letter.txt", doc.byte_size)
        assert loaded == doc
        assert loaded.line_count == 2

    def test_missing_entry(self, store):
        assert store.load("nope.txt", 1) is None

    def test_same_key_is_replaced(self, store):
        store.save(korean_document())
        store.save(Document.from_text("other", metadata=korean_document().metadata))
        assert len(store.list_recent()) == 1
        assert store.load("letter.txt", korean_document().byte_size).text == "other"

    def test_recent_order(self, store):
        store.save(korean_document("a.txt"), opened_at=datetime(2024, 1, 1))
        store.save(korean_document("b.txt"), opened_at=datetime(2024, 3, 1))
        store.save(korean_document("c.txt"), opened_at=datetime(2024, 2, 1))
        assert [e["name"] for e in store.list_recent()] == ["b.txt", "c.txt", "a.txt"]
        assert [e["name"] for e in store.list_recent(limit=1)] == ["b.txt"]

    def test_remove(self, store):
        doc = korean_document()
        store.save(doc)
        assert store.remove("letter.txt", doc.byte_size)
        assert not store.remove("letter.txt", doc.byte_size)
        assert store.list_recent() == []
