"""Document library storage."""

from textviewer.storage.store import LibraryStore

__all__ = ["LibraryStore"]
