"""Virtual scroll engine: materializes only the chunks near the viewport."""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from textviewer.config import ViewerOptions
from textviewer.models import Chunk, Document

logger = logging.getLogger(__name__)

# (chunk, lines) -> opaque view handle
ChunkRenderer = Callable[[Chunk, list[str]], Any]


def join_lines(chunk: Chunk, lines: list[str]) -> str:
    """Default renderer: the chunk's lines as one block of text."""
    return "\n".join(lines)


@dataclass
class WindowState:
    """Chunk layout and materialization state for one Document."""

    document: Document
    chunk_size: int
    line_height: float
    active: bool
    chunks: list[Chunk] = field(default_factory=list)

    @property
    def total_height(self) -> float:
        return self.document.line_count * self.line_height

    @property
    def rendered(self) -> list[Chunk]:
        return [chunk for chunk in self.chunks if chunk.rendered]

    def chunk_for_line(self, line: int) -> int:
        line = min(max(line, 0), self.document.line_count - 1)
        if not self.active:
            return 0
        return line // self.chunk_size

    def chunk_top(self, chunk: Chunk) -> float:
        return chunk.start_line * self.line_height

    def chunk_height(self, chunk: Chunk) -> float:
        return chunk.line_count * self.line_height

    def spacers(self) -> tuple[float, float]:
        """Heights above and below the materialized chunks."""
        rendered = self.rendered
        if not rendered:
            return self.total_height, 0.0
        top = self.chunk_top(rendered[0])
        bottom = self.total_height - rendered[-1].end_line * self.line_height
        return top, bottom


class Windower:
    """Partitions a Document into chunks and keeps a sliding window rendered.

    Virtualization is only worth its overhead for big documents: below the
    configured character and line thresholds the whole text is one chunk
    that is rendered immediately and never evicted.
    """

    def __init__(
        self,
        options: Optional[ViewerOptions] = None,
        renderer: ChunkRenderer = join_lines,
    ):
        self.options = options or ViewerOptions()
        self.renderer = renderer

    def should_virtualize(self, document: Document) -> bool:
        return (
            document.char_count > self.options.virtualization_threshold_chars
            or document.line_count > self.options.virtualization_threshold_lines
        )

    def build(self, document: Document) -> WindowState:
        """Lay out chunks for a document. Nothing is rendered when active."""
        active = self.should_virtualize(document)
        total = document.line_count
        size = self.options.chunk_size if active else total

        state = WindowState(
            document=document,
            chunk_size=size,
            line_height=self.options.estimated_line_height,
            active=active,
        )
        for index, start in enumerate(range(0, total, size)):
            state.chunks.append(
                Chunk(index=index, start_line=start, end_line=min(start + size, total))
            )

        if not active:
            self._materialize(state, state.chunks[0])
        logger.debug(
            "Window built: %d chunks of %d lines (virtualized=%s)",
            len(state.chunks),
            size,
            active,
        )
        return state

    def render_range(self, state: WindowState, start_line: int, end_line: int) -> list[Chunk]:
        """Materialize every chunk overlapping lines [start_line, end_line].

        Returns the chunks that were newly rendered.
        """
        first = state.chunk_for_line(start_line)
        last = state.chunk_for_line(end_line)
        rendered = []
        for chunk in state.chunks[first : last + 1]:
            if not chunk.rendered:
                self._materialize(state, chunk)
                rendered.append(chunk)
        return rendered

    def evict_outside(self, state: WindowState, start_chunk: int, end_chunk: int) -> list[Chunk]:
        """Discard rendered chunks outside [start_chunk, end_chunk].

        Returns the chunks that were evicted.
        """
        if not state.active:
            return []
        evicted = []
        for chunk in state.chunks:
            if chunk.rendered and not start_chunk <= chunk.index <= end_chunk:
                chunk.rendered = False
                chunk.view = None
                evicted.append(chunk)
        return evicted

    def evict_all(self, state: WindowState) -> None:
        """Drop every materialized view (used when leaving scroll mode)."""
        for chunk in state.chunks:
            chunk.rendered = False
            chunk.view = None

    def on_scroll(
        self, state: WindowState, scroll_offset: float, viewport_height: float
    ) -> tuple[int, int]:
        """Update the rendered window for a new scroll position.

        Args:
            state: Window to update
            scroll_offset: Distance scrolled from the top, in layout units
            viewport_height: Visible height, in layout units

        Returns:
            The (start_chunk, end_chunk) range now materialized
        """
        first_line, last_line = self.visible_lines(state, scroll_offset, viewport_height)
        start_chunk = state.chunk_for_line(first_line)
        end_chunk = state.chunk_for_line(last_line)

        # Widen to the configured window around the centre chunk
        centre = (start_chunk + end_chunk) // 2
        half = self.options.visible_chunk_radius // 2
        start_chunk = max(0, min(start_chunk, centre - half))
        end_chunk = min(len(state.chunks) - 1, max(end_chunk, centre + half))

        self.evict_outside(state, start_chunk, end_chunk)
        first = state.chunks[start_chunk]
        last = state.chunks[end_chunk]
        self.render_range(state, first.start_line, last.end_line - 1)
        return start_chunk, end_chunk

    def visible_lines(
        self, state: WindowState, scroll_offset: float, viewport_height: float
    ) -> tuple[int, int]:
        """Inclusive range of lines inside the viewport."""
        total = state.document.line_count
        first = int(max(scroll_offset, 0) // state.line_height)
        count = max(1, int(-(-viewport_height // state.line_height)))
        first = min(first, total - 1)
        last = min(first + count - 1, total - 1)
        return first, last

    def _materialize(self, state: WindowState, chunk: Chunk) -> None:
        lines = state.document.lines(chunk.start_line, chunk.end_line)
        chunk.view = self.renderer(chunk, lines)
        chunk.rendered = True
