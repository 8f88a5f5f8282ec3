"""Translation between scroll positions and page numbers.

Only used when the reader switches presentation mode. Line heights are an
estimate, so a round trip may drift by up to one page; that is accepted.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class PositionTranslator:
    lines_per_page: int = 30
    line_height: float = 20

    def line_to_page(self, line: int) -> int:
        # Content pages are numbered from 1 whether or not a cover page 0 exists
        return max(line, 0) // self.lines_per_page + 1

    def page_to_first_line(self, page: int) -> int:
        # The cover (page 0) maps to the first line
        return max(0, (page - 1) * self.lines_per_page)

    def visible_line(
        self,
        scroll_top: float,
        scroll_height: float,
        total_lines: int,
        virtualized: bool,
    ) -> int:
        """Estimate the first visible line from a scroll container's state."""
        if total_lines <= 0:
            return 0
        if virtualized:
            line = scroll_top / self.line_height
        elif scroll_height > 0:
            line = scroll_top * total_lines / scroll_height
        else:
            line = 0
        return min(max(int(line), 0), total_lines - 1)

    def scroll_offset_for_line(
        self,
        line: int,
        scroll_height: float,
        total_lines: int,
        virtualized: bool,
    ) -> float:
        """Inverse of visible_line: where to scroll to show a line at the top."""
        if total_lines <= 0:
            return 0.0
        line = min(max(line, 0), total_lines - 1)
        if virtualized:
            return line * self.line_height
        return line * scroll_height / total_lines
