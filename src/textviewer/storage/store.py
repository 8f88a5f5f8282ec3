"""SQLite-backed library of previously opened documents."""

import sqlite3
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Iterator, Optional

from textviewer.models import Document, EncodingLabel, FileMetadata
from textviewer.storage.schema import SCHEMA


class LibraryStore:
    """Stores decoded documents so they can be reopened without the file.

    Entries are keyed by (name, size_bytes), which is what every host file
    picker can report.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)

    @contextmanager
    def connection(self) -> Iterator[sqlite3.Connection]:
        """Context manager for database connections."""
        conn = sqlite3.connect(self.path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def initialize(self) -> None:
        """Create schema if not exists."""
        with self.connection() as conn:
            conn.executescript(SCHEMA)

    def save(self, doc: Document, opened_at: Optional[datetime] = None) -> None:
        """Store a document, replacing any entry with the same key."""
        opened_at = opened_at or datetime.now()
        metadata = doc.metadata or FileMetadata(name="untitled", size_bytes=doc.byte_size)
        modified = metadata.last_modified.isoformat() if metadata.last_modified else None
        with self.connection() as conn:
            conn.execute(
                """INSERT OR REPLACE INTO documents
                   (name, size_bytes, encoding, content, last_modified, opened_at)
                   VALUES (?, ?, ?, ?, ?, ?)""",
                (
                    metadata.name,
                    metadata.size_bytes,
                    doc.encoding.value,
                    doc.text,
                    modified,
                    opened_at.isoformat(),
                ),
            )

    def load(self, name: str, size_bytes: int) -> Optional[Document]:
        """Rebuild a stored document, or None if it is not in the library."""
        with self.connection() as conn:
            row = conn.execute(
                """SELECT name, size_bytes, encoding, content, last_modified
                   FROM documents WHERE name = ? AND size_bytes = ?""",
                (name, size_bytes),
            ).fetchone()
        if row is None:
            return None

        modified = row["last_modified"]
        metadata = FileMetadata(
            name=row["name"],
            size_bytes=row["size_bytes"],
            last_modified=datetime.fromisoformat(modified) if modified else None,
        )
        return Document.from_text(
            row["content"],
            EncodingLabel.parse(row["encoding"]),
            byte_size=row["size_bytes"],
            metadata=metadata,
        )

    def list_recent(self, limit: int = 20) -> list[dict]:
        """Most recently opened entries first (without content)."""
        with self.connection() as conn:
            cursor = conn.execute(
                """SELECT name, size_bytes, encoding, last_modified, opened_at
                   FROM documents ORDER BY opened_at DESC LIMIT ?""",
                (limit,),
            )
            return [dict(row) for row in cursor]

    def remove(self, name: str, size_bytes: int) -> bool:
        """Delete an entry; returns whether anything was removed."""
        with self.connection() as conn:
            cursor = conn.execute(
                "DELETE FROM documents WHERE name = ? AND size_bytes = ?",
                (name, size_bytes),
            )
            return cursor.rowcount > 0
