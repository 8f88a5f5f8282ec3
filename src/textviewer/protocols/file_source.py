"""Protocol for host file acquisition."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Protocol, runtime_checkable

from textviewer.models import FileMetadata


@dataclass(frozen=True)
class SourceFile:
    """Bytes handed over by the host, with the metadata it knows about."""

    name: str
    data: bytes
    last_modified: Optional[datetime] = None

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def metadata(self) -> FileMetadata:
        return FileMetadata(
            name=self.name,
            size_bytes=self.size,
            last_modified=self.last_modified,
        )


@runtime_checkable
class FileSource(Protocol):
    """Protocol for the platform file pickers.

    Desktop shells, mobile bridges and browser uploads each hand over bytes
    differently; the session only ever sees a SourceFile.
    Uses structural subtyping - no inheritance required.
    """

    @property
    def source_type(self) -> str:
        """Return identifier for this source (e.g., 'desktop', 'upload')."""
        ...

    def pick_file(self) -> Optional[SourceFile]:
        """Ask the host for a file.

        Returns None when the user cancels.

        Raises:
            FileReadError: if the host cannot supply the bytes
        """
        ...
