"""File source for desktop shells with a native open dialog."""

from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from textviewer.errors import FileReadError
from textviewer.protocols import SourceFile

# Shows the shell's open dialog; returns the chosen path or None if cancelled
PathChooser = Callable[[], "str | Path | None"]


class DesktopFileSource:
    """Reads the file the desktop shell's dialog points at."""

    source_type = "desktop"

    def __init__(self, chooser: PathChooser):
        self.chooser = chooser

    @classmethod
    def for_path(cls, path: "str | Path") -> "DesktopFileSource":
        """A source that always picks the same path (CLI usage)."""
        return cls(lambda: path)

    def pick_file(self) -> Optional[SourceFile]:
        """Show the dialog and read the chosen file.

        Returns:
            SourceFile for the chosen path, or None if the dialog was cancelled
        """
        chosen = self.chooser()
        if chosen is None:
            return None

        path = Path(chosen)
        try:
            data = path.read_bytes()
            modified = datetime.fromtimestamp(path.stat().st_mtime)
        except (PermissionError, OSError) as e:
            raise FileReadError(str(path), e.strerror or str(e)) from e

        return SourceFile(name=path.name, data=data, last_modified=modified)
