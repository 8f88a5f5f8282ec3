"""Literal, case-insensitive search with a wraparound cursor."""

import html
import re
from dataclasses import dataclass, field
from typing import Optional

from textviewer.engine.windower import WindowState
from textviewer.models import Document, SearchMatch


@dataclass(frozen=True)
class HighlightMarkup:
    """Marker strings wrapped around matches by apply_highlights()."""

    open: str = '<mark class="highlight">'
    open_current: str = '<mark class="highlight current">'
    close: str = "</mark>"
    # Escape &, < and > in the text between markers (for HTML markers)
    escape_html: bool = True


@dataclass
class SearchCursor:
    """Position inside a match list; None when there is nothing to point at."""

    count: int = 0
    index: Optional[int] = None

    def __post_init__(self) -> None:
        if self.count and self.index is None:
            self.index = 0

    def next(self) -> Optional[int]:
        if self.count:
            self.index = (self.index + 1) % self.count
        return self.index

    def previous(self) -> Optional[int]:
        if self.count:
            self.index = self.count - 1 if self.index == 0 else self.index - 1
        return self.index

    @property
    def label(self) -> str:
        """Status text such as "3 / 12"; empty without matches."""
        if not self.count:
            return ""
        return f"{self.index + 1} / {self.count}"


@dataclass
class SearchState:
    """The active query, its matches and the cursor over them."""

    query: str = ""
    matches: list[SearchMatch] = field(default_factory=list)
    cursor: SearchCursor = field(default_factory=SearchCursor)

    @property
    def current(self) -> Optional[SearchMatch]:
        if self.cursor.index is None:
            return None
        return self.matches[self.cursor.index]


class SearchEngine:
    """Finds every occurrence of a query in a Document.

    The query is matched literally; regex metacharacters are escaped. When a
    virtualized WindowState is given, each chunk is searched on its own and
    the local positions shifted by the chunk's start offset, which yields the
    same sequence as a whole-text search.
    """

    def search(
        self,
        document: Document,
        query: str,
        window: Optional[WindowState] = None,
    ) -> list[SearchMatch]:
        if not query:
            return []
        pattern = re.compile(re.escape(query), re.IGNORECASE)

        # Chunks split on line breaks, so multi-line queries need the whole text
        if window is None or not window.active or "\n" in query:
            return _find(pattern, document.text, 0)

        matches = []
        for chunk in window.chunks:
            base = int(document.line_offsets[chunk.start_line])
            text = document.slice_lines(chunk.start_line, chunk.end_line)
            matches.extend(_find(pattern, text, base))
        return matches

    def run(
        self,
        document: Document,
        query: str,
        window: Optional[WindowState] = None,
    ) -> SearchState:
        """Search and wrap the result in a fresh SearchState."""
        matches = self.search(document, query, window)
        return SearchState(query=query, matches=matches, cursor=SearchCursor(len(matches)))


def _find(pattern: re.Pattern, text: str, base: int) -> list[SearchMatch]:
    return [
        SearchMatch(offset=base + m.start(), length=len(m.group()), matched_text=m.group())
        for m in pattern.finditer(text)
    ]


def apply_highlights(
    text: str,
    matches: list[SearchMatch],
    current: Optional[int] = None,
    markup: HighlightMarkup = HighlightMarkup(),
) -> str:
    """Wrap each match in marker strings.

    Matches are processed from the last offset to the first, so offsets always
    refer to the original text. With HTML markup the text itself is escaped;
    markers are inserted as given.
    """
    escape = _escape_text if markup.escape_html else str
    pieces = []
    end = len(text)
    for i in range(len(matches) - 1, -1, -1):
        match = matches[i]
        opener = markup.open_current if i == current else markup.open
        pieces += [
            escape(text[match.end : end]),
            markup.close,
            escape(text[match.offset : match.end]),
            opener,
        ]
        end = match.offset
    pieces.append(escape(text[:end]))
    return "".join(reversed(pieces))


def _escape_text(text: str) -> str:
    return html.escape(text, quote=False)
