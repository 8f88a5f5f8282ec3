"""Core data models for decoded documents."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from functools import cached_property
from typing import Optional

import numpy as np


class EncodingLabel(str, Enum):
    """The closed set of encodings a document can be decoded with."""

    UTF_8 = "UTF-8"
    UTF_16LE = "UTF-16LE"
    UTF_16BE = "UTF-16BE"
    EUC_KR = "EUC-KR"
    CP949 = "CP949"
    ISO_8859_1 = "ISO-8859-1"

    @property
    def codec(self) -> str:
        """Python codec name for this label."""
        return _CODECS[self]

    @classmethod
    def parse(cls, name: "str | EncodingLabel") -> "EncodingLabel":
        """Resolve a label or common alias (case and punctuation insensitive).

        Raises:
            ValueError: if the name is not one of the supported encodings
        """
        if isinstance(name, EncodingLabel):
            return name
        key = name.strip().upper().replace("-", "").replace("_", "")
        try:
            return _ALIASES[key]
        except KeyError:
            raise ValueError(f"Unsupported encoding: {name}") from None

    def __str__(self) -> str:
        return self.value


_CODECS = {
    EncodingLabel.UTF_8: "utf-8",
    EncodingLabel.UTF_16LE: "utf-16-le",
    EncodingLabel.UTF_16BE: "utf-16-be",
    EncodingLabel.EUC_KR: "euc_kr",
    EncodingLabel.CP949: "cp949",
    EncodingLabel.ISO_8859_1: "latin-1",
}

_ALIASES = {
    "UTF8": EncodingLabel.UTF_8,
    "UTF16LE": EncodingLabel.UTF_16LE,
    "UTF16BE": EncodingLabel.UTF_16BE,
    "EUCKR": EncodingLabel.EUC_KR,
    "CP949": EncodingLabel.CP949,
    "UHC": EncodingLabel.CP949,
    "ISO88591": EncodingLabel.ISO_8859_1,
    "LATIN1": EncodingLabel.ISO_8859_1,
}


@dataclass(frozen=True)
class FileMetadata:
    """Metadata the host supplies alongside the file bytes."""

    name: str
    size_bytes: int
    last_modified: Optional[datetime] = None


@dataclass(frozen=True)
class Document:
    """Decoded text plus its line index.

    A Document is never mutated: changing the encoding produces a new one.
    """

    text: str
    encoding: EncodingLabel
    byte_size: int
    metadata: Optional[FileMetadata] = None

    @classmethod
    def from_text(
        cls,
        text: str,
        encoding: EncodingLabel = EncodingLabel.UTF_8,
        byte_size: Optional[int] = None,
        metadata: Optional[FileMetadata] = None,
    ) -> "Document":
        """Build an indexed Document from already-decoded text."""
        if byte_size is None:
            byte_size = len(text.encode(encoding.codec, errors="replace"))
        doc = cls(text=text, encoding=encoding, byte_size=byte_size, metadata=metadata)
        doc.line_offsets  # build the index before anyone sees the document
        return doc

    @cached_property
    def line_offsets(self) -> np.ndarray:
        """Character offset of every line start, plus a len(text) sentinel."""
        codepoints = np.frombuffer(
            self.text.encode("utf-32-le", errors="surrogatepass"), dtype="<u4"
        )
        breaks = np.flatnonzero(codepoints == 0x0A) + 1
        return np.concatenate(([0], breaks, [len(self.text)])).astype(np.int64)

    @property
    def line_count(self) -> int:
        return len(self.line_offsets) - 1

    @property
    def char_count(self) -> int:
        return len(self.text)

    def line(self, index: int) -> str:
        """Return one line without its terminator."""
        start = int(self.line_offsets[index])
        end = int(self.line_offsets[index + 1])
        return _strip_terminator(self.text[start:end])

    def lines(self, start: int = 0, end: Optional[int] = None) -> list[str]:
        """Return lines in [start, end), clamped to the document."""
        start, end = self._clamp(start, end)
        return [self.line(i) for i in range(start, end)]

    def slice_lines(self, start: int, end: Optional[int] = None) -> str:
        """Return the raw text of lines in [start, end), terminators included."""
        start, end = self._clamp(start, end)
        return self.text[int(self.line_offsets[start]) : int(self.line_offsets[end])]

    def line_at(self, offset: int) -> int:
        """Return the line containing a character offset."""
        line = int(np.searchsorted(self.line_offsets, offset, side="right")) - 1
        return min(max(line, 0), self.line_count - 1)

    def _clamp(self, start: int, end: Optional[int]) -> tuple[int, int]:
        count = self.line_count
        if end is None or end > count:
            end = count
        start = min(max(start, 0), end)
        return start, end


def _strip_terminator(raw: str) -> str:
    if raw.endswith("\n"):
        raw = raw[:-1]
    if raw.endswith("\r"):
        raw = raw[:-1]
    return raw
