"""Reading session: one document and everything derived from it.

A ReaderSession replaces the usual app-wide viewer state. It owns the
Document, the scroll window, the paginator, the search results and the
cross-mode ViewState, and it is the only thing that mutates them.
"""

import logging
from typing import Optional

from textviewer.config import ViewerOptions
from textviewer.engine import (
    DocumentModel,
    HighlightMarkup,
    Paginator,
    PositionTranslator,
    SearchEngine,
    SearchState,
    Windower,
    WindowState,
    apply_highlights,
)
from textviewer.engine.windower import ChunkRenderer, join_lines
from textviewer.errors import TextViewerError
from textviewer.models import Chunk, Document, EncodingLabel, Page, SearchMatch, ViewMode, ViewState
from textviewer.protocols import FileSource, SourceFile
from textviewer.utils import format_file_size, format_timestamp

logger = logging.getLogger(__name__)


class ReaderSession:
    """Coordinates decoding, presentation and search for one open file."""

    def __init__(
        self,
        options: Optional[ViewerOptions] = None,
        renderer: ChunkRenderer = join_lines,
    ):
        self.options = options or ViewerOptions()
        self.model = DocumentModel(self.options)
        self.windower = Windower(self.options, renderer)
        self.engine = SearchEngine()
        self.translator = PositionTranslator(
            lines_per_page=self.options.lines_per_page,
            line_height=self.options.estimated_line_height,
        )
        self.viewport_height = self.options.estimated_line_height * self.options.lines_per_page

        # Bumped by every open/close; stale decodes compare against it
        self.generation = 0

        self.source: Optional[SourceFile] = None
        self.document: Optional[Document] = None
        self.window: Optional[WindowState] = None
        self.paginator: Optional[Paginator] = None
        self.view_state = ViewState()
        self.search = SearchState()

    # Opening documents

    def open(self, file: SourceFile, encoding: "EncodingLabel | str | None" = None) -> Document:
        """Decode a file and make it the session's document.

        Raises:
            DecodeError: if the encoding override is unsupported; the
                previously open document stays in place
        """
        generation = self._begin()
        document = self.model.decode(file.data, encoding, file.metadata)
        self._install(generation, file, document)
        return document

    async def open_async(
        self, file: SourceFile, encoding: "EncodingLabel | str | None" = None
    ) -> Optional[Document]:
        """Decode a file without blocking the event loop.

        Returns:
            The new Document, or None if another open started meanwhile
        """
        generation = self._begin()
        document = await self.model.decode_async(file.data, encoding, file.metadata)
        if not self._install(generation, file, document):
            return None
        return document

    def open_from(
        self, source: FileSource, encoding: "EncodingLabel | str | None" = None
    ) -> Optional[Document]:
        """Ask a file source for a file and open it; None if cancelled."""
        file = source.pick_file()
        if file is None:
            logger.debug("File selection cancelled (%s)", source.source_type)
            return None
        return self.open(file, encoding)

    def open_document(self, document: Document) -> Document:
        """Show an already decoded Document, e.g. one restored from a library."""
        self._begin()
        self.source = None
        self._show(document, keep_position=False)
        return document

    def change_encoding(self, encoding: "EncodingLabel | str") -> Document:
        """Re-decode the current file's bytes with another encoding.

        The new Document replaces the old one; matches are recomputed and the
        reading position is kept where the new line count allows.

        Raises:
            DecodeError: for unsupported encodings (current document kept)
            TextViewerError: if the session has no raw bytes to re-decode
        """
        if self.source is None:
            raise TextViewerError("No file bytes available to re-decode")
        document = self.model.decode(self.source.data, encoding, self.source.metadata)
        self._begin()
        self._show(document, keep_position=True)
        logger.info("Re-decoded %s as %s", self.source.name, document.encoding)
        return document

    def close(self) -> None:
        """Forget the current document and everything derived from it."""
        self._begin()
        if self.window is not None:
            self.windower.evict_all(self.window)
        self.source = None
        self.document = None
        self.window = None
        self.paginator = None
        self.view_state = ViewState(mode=self.view_state.mode)
        self.search = SearchState()

    def _begin(self) -> int:
        self.generation += 1
        return self.generation

    def _install(self, generation: int, file: SourceFile, document: Document) -> bool:
        if generation != self.generation:
            logger.info("Discarding stale decode of %s", file.name)
            return False
        self.source = file
        self._show(document, keep_position=False)
        logger.info(
            "Opened %s (%s, %s, %d lines)",
            file.name,
            format_file_size(document.byte_size),
            document.encoding,
            document.line_count,
        )
        return True

    def _show(self, document: Document, keep_position: bool) -> None:
        if self.window is not None:
            self.windower.evict_all(self.window)

        self.document = document
        self.window = self.windower.build(document)
        self.paginator = Paginator(
            document, self.options.lines_per_page, self.options.include_cover_page
        )

        if keep_position:
            self.view_state.scroll_line = min(self.view_state.scroll_line, document.line_count - 1)
            self.view_state.current_page = self.paginator.clamp(self.view_state.current_page)
        else:
            self.view_state = ViewState(
                mode=self.view_state.mode, current_page=self.paginator.min_page
            )
        self.paginator.current_page = self.view_state.current_page

        if self.view_state.mode is ViewMode.SCROLL:
            self.scroll_to_line(self.view_state.scroll_line)
        else:
            self.windower.evict_all(self.window)

        # Matches pointed into the old text
        query = self.search.query
        self.search = SearchState()
        if query:
            self.find(query)

    # Presentation

    def set_mode(self, mode: ViewMode) -> None:
        """Switch presentation mode, carrying the reading position across."""
        mode = ViewMode(mode)
        if mode is self.view_state.mode:
            return
        self._require_document()

        if mode is ViewMode.PAGE:
            page = self.translator.line_to_page(self.view_state.scroll_line)
            self.windower.evict_all(self.window)
            self.view_state.mode = mode
            self.go_to_page(page)
        else:
            line = self.translator.page_to_first_line(self.view_state.current_page)
            self.view_state.mode = mode
            self.scroll_to_line(line)
        logger.debug("Switched to %s mode: %s", mode.value, self.view_state)

    def toggle_mode(self) -> ViewMode:
        other = ViewMode.PAGE if self.view_state.mode is ViewMode.SCROLL else ViewMode.SCROLL
        self.set_mode(other)
        return other

    def scroll_to(
        self,
        scroll_offset: float,
        viewport_height: Optional[float] = None,
        scroll_height: Optional[float] = None,
    ) -> tuple[int, int]:
        """Handle a scroll event.

        Args:
            scroll_offset: Distance from the top of the scroll container
            viewport_height: Visible height; the last known one when None
            scroll_height: Real content height if the host measured it

        Returns:
            The (start_chunk, end_chunk) range now materialized
        """
        document = self._require_document()
        if viewport_height is not None:
            self.viewport_height = viewport_height
        if scroll_height is None:
            scroll_height = self.window.total_height

        chunk_range = self.windower.on_scroll(self.window, scroll_offset, self.viewport_height)
        self.view_state.scroll_line = self.translator.visible_line(
            scroll_offset, scroll_height, document.line_count, self.window.active
        )
        return chunk_range

    def scroll_to_line(self, line: int) -> float:
        """Scroll so that a line is at the top; returns the scroll offset."""
        document = self._require_document()
        offset = self.translator.scroll_offset_for_line(
            line, self.window.total_height, document.line_count, self.window.active
        )
        self.scroll_to(offset)
        return offset

    def rendered_chunks(self) -> list[Chunk]:
        if self.window is None or self.view_state.mode is not ViewMode.SCROLL:
            return []
        return self.window.rendered

    def go_to_page(self, number: int) -> Page:
        self._require_document()
        page = self.paginator.go_to(number)
        self.view_state.current_page = page.number
        return page

    def next_page(self) -> Page:
        self._require_document()
        page = self.paginator.next_page()
        self.view_state.current_page = page.number
        return page

    def previous_page(self) -> Page:
        self._require_document()
        page = self.paginator.previous_page()
        self.view_state.current_page = page.number
        return page

    def current_page(self) -> Page:
        self._require_document()
        return self.paginator.page

    # Search

    def find(self, query: str) -> SearchState:
        """Search the document and move to the first match."""
        document = self._require_document()
        window = self.window if self.window is not None and self.window.active else None
        self.search = self.engine.run(document, query, window)
        logger.debug("Search %r: %d matches", query, len(self.search.matches))
        self._reveal(self.search.current)
        return self.search

    def next_match(self) -> Optional[SearchMatch]:
        self.search.cursor.next()
        self._reveal(self.search.current)
        return self.search.current

    def previous_match(self) -> Optional[SearchMatch]:
        self.search.cursor.previous()
        self._reveal(self.search.current)
        return self.search.current

    def clear_search(self) -> None:
        self.search = SearchState()

    def highlighted_text(self, markup: HighlightMarkup = HighlightMarkup()) -> str:
        """Document text with any matches marked up."""
        document = self._require_document()
        return apply_highlights(
            document.text, self.search.matches, self.search.cursor.index, markup
        )

    def _reveal(self, match: Optional[SearchMatch]) -> None:
        if match is None or self.document is None:
            return
        line = self.document.line_at(match.offset)
        if self.view_state.mode is ViewMode.SCROLL:
            self.scroll_to_line(line)
        else:
            self.go_to_page(self.translator.line_to_page(line))

    # Info

    def file_info(self) -> dict:
        """Summary of the open file for info panels and status bars."""
        document = self._require_document()
        metadata = document.metadata
        return {
            "name": metadata.name if metadata else "untitled",
            "size": format_file_size(document.byte_size),
            "lines": document.line_count,
            "characters": document.char_count,
            "modified": format_timestamp(metadata.last_modified if metadata else None),
            "encoding": document.encoding.value,
            "virtualized": bool(self.window and self.window.active),
            "pages": self.paginator.page_count,
        }

    def _require_document(self) -> Document:
        if self.document is None:
            raise TextViewerError("No document is open")
        return self.document
