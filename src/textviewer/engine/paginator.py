"""Fixed-size pagination of a Document's lines."""

import math

from textviewer.errors import PageOutOfRange
from textviewer.models import Document, Page


def paginate(document: Document, lines_per_page: int = 30, include_cover: bool = False) -> list[Page]:
    """Split a document into pages.

    Page k (1-based) covers lines [(k-1)*lines_per_page, k*lines_per_page),
    clamped to the line count. With include_cover, an empty page 0 comes
    first for double-page spreads where the cover sits on the left.
    """
    paginator = Paginator(document, lines_per_page, include_cover)
    return [paginator.get_page(n) for n in range(paginator.min_page, paginator.total_pages + 1)]


class Paginator:
    """Page cursor over a Document. Pages are built only when requested."""

    def __init__(self, document: Document, lines_per_page: int = 30, include_cover: bool = False):
        if lines_per_page <= 0:
            raise ValueError(f"lines_per_page must be positive, got {lines_per_page}")
        self.document = document
        self.lines_per_page = lines_per_page
        self.include_cover = include_cover
        self.current_page = self.min_page

    @property
    def content_pages(self) -> int:
        return max(1, math.ceil(self.document.line_count / self.lines_per_page))

    @property
    def total_pages(self) -> int:
        """Highest page number. The cover is page 0 and does not shift content pages."""
        return self.content_pages

    @property
    def page_count(self) -> int:
        """Number of pages, counting the cover when present."""
        return self.content_pages + (1 if self.include_cover else 0)

    @property
    def min_page(self) -> int:
        return 0 if self.include_cover else 1

    def clamp(self, number: object) -> int:
        """Clamp a page number into [min_page, total_pages].

        Raises:
            PageOutOfRange: for negative or non-integer input
        """
        if isinstance(number, bool) or not isinstance(number, int) or number < 0:
            raise PageOutOfRange(number)
        return min(max(number, self.min_page), self.total_pages)

    def get_page(self, number: int) -> Page:
        number = self.clamp(number)
        if self.include_cover and number == 0:
            return Page(number=0, start_line=0, end_line=0, is_cover=True)

        start = (number - 1) * self.lines_per_page
        end = min(start + self.lines_per_page, self.document.line_count)
        return Page(
            number=number,
            start_line=start,
            end_line=end,
            lines=tuple(self.document.lines(start, end)),
        )

    def go_to(self, number: int) -> Page:
        self.current_page = self.clamp(number)
        return self.get_page(self.current_page)

    def next_page(self) -> Page:
        if self.current_page < self.total_pages:
            self.current_page += 1
        return self.get_page(self.current_page)

    def previous_page(self) -> Page:
        if self.current_page > self.min_page:
            self.current_page -= 1
        return self.get_page(self.current_page)

    @property
    def page(self) -> Page:
        return self.get_page(self.current_page)
