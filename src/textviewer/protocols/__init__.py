"""Protocol definitions for extensible components."""

from textviewer.protocols.file_source import FileSource, SourceFile

__all__ = ["FileSource", "SourceFile"]
