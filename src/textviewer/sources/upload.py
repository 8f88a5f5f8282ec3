"""File source for browser-style uploads (file-like objects)."""

from datetime import datetime
from typing import BinaryIO, Callable, Optional

from textviewer.errors import FileReadError
from textviewer.protocols import SourceFile

# Returns the uploaded stream, or None if nothing was selected
UploadPicker = Callable[[], Optional[BinaryIO]]


class UploadFileSource:
    """Reads an uploaded file object.

    The stream's ``name`` (or ``filename``) attribute becomes the document
    name; a ``last_modified`` datetime attribute is used when present.
    """

    source_type = "upload"

    def __init__(self, picker: UploadPicker, default_name: str = "upload.txt"):
        self.picker = picker
        self.default_name = default_name

    def pick_file(self) -> Optional[SourceFile]:
        stream = self.picker()
        if stream is None:
            return None

        name = getattr(stream, "filename", None) or getattr(stream, "name", None)
        if not isinstance(name, str):
            name = self.default_name

        try:
            data = stream.read()
        except OSError as e:
            raise FileReadError(name, str(e)) from e

        modified = getattr(stream, "last_modified", None)
        if not isinstance(modified, datetime):
            modified = None

        return SourceFile(name=name, data=bytes(data), last_modified=modified)
