"""Host file sources (desktop dialog, mobile bridge, browser upload)."""

import sys
from pathlib import Path

from textviewer.protocols import FileSource
from textviewer.sources.bridge import BridgeFileSource
from textviewer.sources.desktop import DesktopFileSource
from textviewer.sources.upload import UploadFileSource


def source_for_path(path: "Path | str") -> FileSource:
    """Pick the file source for a command-line argument.

    Args:
        path: A filesystem path, or "-" for standard input

    Returns:
        A FileSource whose pick_file() yields that file
    """
    if str(path) == "-":
        return UploadFileSource(lambda: sys.stdin.buffer, default_name="<stdin>")
    return DesktopFileSource.for_path(path)


__all__ = [
    "source_for_path",
    "BridgeFileSource",
    "DesktopFileSource",
    "UploadFileSource",
]
