"""Data models for textviewer."""

from textviewer.models.document import Document, EncodingLabel, FileMetadata
from textviewer.models.view import Chunk, Page, SearchMatch, ViewMode, ViewState

__all__ = [
    "Document",
    "EncodingLabel",
    "FileMetadata",
    "Chunk",
    "Page",
    "SearchMatch",
    "ViewMode",
    "ViewState",
]
