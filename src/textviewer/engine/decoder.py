"""Byte decoding and line indexing."""

import asyncio
import codecs
import logging
from typing import Iterator, Optional

from textviewer.config import MB, ViewerOptions
from textviewer.engine.encoding import SAMPLE_SIZE, detect_encoding
from textviewer.errors import DecodeError
from textviewer.models import Document, EncodingLabel, FileMetadata

logger = logging.getLogger(__name__)


class DocumentModel:
    """Decodes raw bytes into indexed Documents.

    Small inputs are decoded in one call. Inputs above
    ``options.large_file_threshold_bytes`` are always decoded as UTF-8 in
    SLICE_SIZE slices; the async variant yields to the event loop every
    YIELD_EVERY slices so a UI loop stays responsive.
    """

    SLICE_SIZE = 1 * MB
    YIELD_EVERY = 10

    def __init__(self, options: Optional[ViewerOptions] = None):
        self.options = options or ViewerOptions()

    def decode(
        self,
        data: bytes,
        encoding: "EncodingLabel | str | None" = None,
        metadata: Optional[FileMetadata] = None,
    ) -> Document:
        """Decode bytes into a fully indexed Document.

        Args:
            data: Raw file content
            encoding: Explicit encoding override; detected when None
            metadata: Host-supplied file metadata

        Returns:
            Document with its line index already built

        Raises:
            DecodeError: if the override names an unsupported encoding
        """
        label = self._resolve(data, encoding)
        if self.is_large(data):
            label = self._force_utf8(label)
            text = "".join(self._iter_slices(data))
        else:
            text = self._decode_whole(data, label)
        return self._build(text, label, data, metadata)

    async def decode_async(
        self,
        data: bytes,
        encoding: "EncodingLabel | str | None" = None,
        metadata: Optional[FileMetadata] = None,
    ) -> Document:
        """Like decode(), yielding periodically while slicing large inputs."""
        label = self._resolve(data, encoding)
        if not self.is_large(data):
            return self._build(self._decode_whole(data, label), label, data, metadata)

        label = self._force_utf8(label)
        parts = []
        for count, part in enumerate(self._iter_slices(data), start=1):
            parts.append(part)
            if count % self.YIELD_EVERY == 0:
                await asyncio.sleep(0)
        return self._build("".join(parts), label, data, metadata)

    def is_large(self, data: bytes) -> bool:
        return len(data) > self.options.large_file_threshold_bytes

    def _resolve(self, data: bytes, encoding: "EncodingLabel | str | None") -> EncodingLabel:
        if encoding is None:
            return detect_encoding(data[:SAMPLE_SIZE])
        try:
            label = EncodingLabel.parse(encoding)
            codecs.lookup(label.codec)
        except (ValueError, LookupError) as e:
            raise DecodeError(str(encoding), str(e)) from e
        return label

    def _force_utf8(self, label: EncodingLabel) -> EncodingLabel:
        if label is not EncodingLabel.UTF_8:
            logger.warning("Large file: decoding as UTF-8 instead of %s", label)
        return EncodingLabel.UTF_8

    def _decode_whole(self, data: bytes, label: EncodingLabel) -> str:
        try:
            text = codecs.decode(data, label.codec, errors="replace")
        except LookupError as e:
            raise DecodeError(label.value, str(e)) from e
        return _drop_bom(text)

    def _iter_slices(self, data: bytes) -> Iterator[str]:
        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        view = memoryview(data)
        for start in range(0, len(data), self.SLICE_SIZE):
            part = decoder.decode(view[start : start + self.SLICE_SIZE])
            if start == 0:
                part = _drop_bom(part)
            yield part
        yield decoder.decode(b"", final=True)

    def _build(
        self,
        text: str,
        label: EncodingLabel,
        data: bytes,
        metadata: Optional[FileMetadata],
    ) -> Document:
        doc = Document.from_text(text, label, byte_size=len(data), metadata=metadata)
        logger.debug(
            "Decoded %d bytes as %s: %d lines, %d chars",
            doc.byte_size,
            label,
            doc.line_count,
            doc.char_count,
        )
        return doc


def _drop_bom(text: str) -> str:
    return text[1:] if text.startswith("\ufeff") else text
