"""Presentation-side models: chunks, pages, search matches and view state."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class ViewMode(str, Enum):
    SCROLL = "scroll"
    PAGE = "page"


@dataclass
class Chunk:
    """A run of lines materialized on demand for virtual scrolling."""

    index: int
    start_line: int
    end_line: int  # exclusive
    rendered: bool = False
    view: Optional[Any] = None  # renderer-specific handle, None when evicted

    @property
    def line_count(self) -> int:
        return self.end_line - self.start_line


@dataclass(frozen=True)
class Page:
    """A fixed-size run of lines; page 0 is the optional synthetic cover."""

    number: int
    start_line: int
    end_line: int  # exclusive
    lines: tuple[str, ...] = ()
    is_cover: bool = False


@dataclass(frozen=True)
class SearchMatch:
    """One literal occurrence of a query inside the document text."""

    offset: int
    length: int
    matched_text: str

    @property
    def end(self) -> int:
        return self.offset + self.length


@dataclass
class ViewState:
    """Cross-mode position record, updated on every mode switch."""

    mode: ViewMode = ViewMode.SCROLL
    scroll_line: int = 0
    current_page: int = 1
