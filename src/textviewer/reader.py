"""Reader - a terminal UI over a ReaderSession."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from rich.markup import escape
from rich.text import Text
from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Vertical, VerticalScroll
from textual.widgets import Footer, Header, Input, Label, Log, Static

from textviewer.config import ViewerOptions
from textviewer.errors import TextViewerError
from textviewer.models import Chunk, Document, EncodingLabel, SearchMatch, ViewMode
from textviewer.protocols import SourceFile
from textviewer.session import ReaderSession
from textviewer.storage import LibraryStore

ENCODING_CYCLE = list(EncodingLabel)


def keep_lines(chunk: Chunk, lines: list[str]) -> list[str]:
    """Chunk renderer for the terminal: keep the lines, styling happens later."""
    return lines


class InfoPanel(Static):
    """File information display."""

    def compose(self) -> ComposeResult:
        yield Static("[dim]No file open[/]", id="info-content")

    def update_info(self, info: Optional[dict]) -> None:
        self.query_one("#info-content", Static).update(info_markup(info))


def info_markup(info: Optional[dict]) -> str:
    """Rich markup for the info panel; file names are escaped."""
    if not info:
        return "[dim]No file open[/]"
    return f"""[b]FILE[/b]
  [cyan]{escape(info['name'])}[/]

[b]SIZE[/b]      {info['size']}
[b]LINES[/b]     {info['lines']:,}
[b]CHARS[/b]     {info['characters']:,}
[b]PAGES[/b]     {info['pages']:,}
[b]ENCODING[/b]  [yellow]{info['encoding']}[/]
[b]MODIFIED[/b]  {info['modified']}
[b]VIRTUAL[/b]   {'yes' if info['virtualized'] else 'no'}"""


class ReaderApp(App):
    """Scroll and page through a text file."""

    CSS = """
    #main-container {
        layout: horizontal;
        height: 1fr;
    }

    #left-panel {
        width: 32;
        background: $surface-darken-1;
        border-right: solid $primary-darken-2;
        padding: 1;
    }

    #center-panel {
        width: 1fr;
    }

    InfoPanel {
        height: auto;
        padding: 1;
        background: $surface-darken-2;
        border: round $primary;
        margin-bottom: 1;
    }

    #scroll-view {
        height: 1fr;
    }

    #page-view {
        height: 1fr;
        padding: 0 1;
        display: none;
    }

    #search-input {
        display: none;
    }

    #status {
        height: 1;
        background: $boost;
        padding: 0 1;
    }

    #log-panel {
        height: 1fr;
        border: round $primary-darken-2;
        background: $surface-darken-2;
    }

    .section-title {
        text-style: bold;
        margin-bottom: 1;
    }
    """

    BINDINGS = [
        Binding("slash", "search", "Search", show=True),
        Binding("n", "next_match", "Next", show=True),
        Binding("N", "previous_match", "Previous"),
        Binding("m", "toggle_mode", "Scroll/Page", show=True),
        Binding("right", "next_page", "Next page"),
        Binding("left", "previous_page", "Previous page"),
        Binding("e", "cycle_encoding", "Encoding", show=True),
        Binding("escape", "close_search", "Close search"),
        Binding("q", "quit", "Quit", show=True),
    ]

    TITLE = "Text Viewer"

    def __init__(
        self,
        file: Optional[SourceFile] = None,
        options: Optional[ViewerOptions] = None,
        encoding: Optional[str] = None,
        library: Optional[LibraryStore] = None,
        document: Optional[Document] = None,
    ):
        super().__init__()
        # One terminal row per line
        options = (options or ViewerOptions()).with_overrides(estimated_line_height=1)
        self.session = ReaderSession(options, renderer=keep_lines)
        self.initial_file = file
        self.initial_document = document
        self.initial_encoding = encoding
        self.library = library
        self._chunk_range: Optional[tuple[int, int]] = None

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Container(id="main-container"):
            with Vertical(id="left-panel"):
                yield Label("DOCUMENT", classes="section-title")
                yield InfoPanel()
                yield Label("LOG", classes="section-title")
                yield Log(id="log-panel", highlight=True, auto_scroll=True)
            with Vertical(id="center-panel"):
                yield Input(placeholder="Search...", id="search-input")
                with VerticalScroll(id="scroll-view"):
                    yield Static("", id="top-spacer")
                    yield Static("", id="chunks")
                    yield Static("", id="bottom-spacer")
                yield Static("", id="page-view")
                yield Static("", id="status")
        yield Footer()

    def on_mount(self) -> None:
        self.watch(self.scroll_view, "scroll_y", self._on_scroll_y, init=False)
        if self.initial_document is not None:
            self.session.open_document(self.initial_document)
            self._refresh_all()
            self._log(f"Reopened {self.session.file_info()['name']} from the library")
        elif self.initial_file is not None:
            self.load_file(self.initial_file, self.initial_encoding)
        else:
            self._log("No file given")

    @property
    def scroll_view(self) -> VerticalScroll:
        return self.query_one("#scroll-view", VerticalScroll)

    def _log(self, message: str) -> None:
        """Add a message to the log panel."""
        timestamp = datetime.now().strftime("%H:%M:%S")
        self.query_one("#log-panel", Log).write_line(f"[{timestamp}] {message}")

    @work(exclusive=True)
    async def load_file(self, file: SourceFile, encoding: Optional[str] = None) -> None:
        """Decode a file without freezing the interface."""
        self._log(f"Opening {file.name}")
        try:
            document = await self.session.open_async(file, encoding)
        except TextViewerError as e:
            self._log(f"ERROR: {e}")
            return
        if document is None:
            return

        if self.library is not None:
            self.library.save(document)
        self._log(f"Decoded as {document.encoding}, {document.line_count:,} lines")
        self.sub_title = file.name
        self._refresh_all()

    # Rendering

    def _refresh_all(self) -> None:
        self.query_one(InfoPanel).update_info(self.session.file_info())
        scroll_mode = self.session.view_state.mode is ViewMode.SCROLL
        self.scroll_view.display = scroll_mode
        self.query_one("#page-view", Static).display = not scroll_mode
        if scroll_mode:
            self._chunk_range = None
            self._render_chunks()
            self.scroll_view.scroll_to(y=self.session.view_state.scroll_line, animate=False)
        else:
            self._render_page()
        self._update_status()

    def _on_scroll_y(self, value: float) -> None:
        if self.session.document is None or self.session.view_state.mode is not ViewMode.SCROLL:
            return
        chunk_range = self.session.scroll_to(value, self.scroll_view.size.height)
        if chunk_range != self._chunk_range:
            self._render_chunks()
        self._update_status()

    def _render_chunks(self) -> None:
        window = self.session.window
        rendered = self.session.rendered_chunks()
        top, bottom = window.spacers()
        self.query_one("#top-spacer", Static).styles.height = int(top)
        self.query_one("#bottom-spacer", Static).styles.height = int(bottom)

        lines = [line for chunk in rendered for line in chunk.view]
        start = rendered[0].start_line if rendered else 0
        self.query_one("#chunks", Static).update(self._styled(start, lines))
        self._chunk_range = (rendered[0].index, rendered[-1].index) if rendered else None

    def _render_page(self) -> None:
        page = self.session.current_page()
        view = self.query_one("#page-view", Static)
        if page.is_cover:
            view.update(Text("\n\n(cover)", justify="center", style="dim"))
        else:
            view.update(self._styled(page.start_line, list(page.lines)))

    def _styled(self, start_line: int, lines: list[str]) -> Text:
        """Join lines and highlight the search matches that fall inside them."""
        text = Text(no_wrap=True, overflow="ellipsis")
        positions = []
        for line in lines:
            positions.append(len(text))
            text.append(line + "\n")

        document = self.session.document
        search = self.session.search
        end_line = start_line + len(lines)
        for i, match in enumerate(search.matches):
            line = document.line_at(match.offset)
            if not start_line <= line < end_line:
                continue
            column = match.offset - int(document.line_offsets[line])
            begin = positions[line - start_line] + column
            style = "black on yellow" if i == search.cursor.index else "reverse"
            text.stylize(style, begin, begin + _visible_length(match, document.line(line), column))
        return text

    def _update_status(self) -> None:
        state = self.session.view_state
        if state.mode is ViewMode.SCROLL:
            position = f"line {state.scroll_line + 1:,}"
        else:
            position = f"page {state.current_page} / {self.session.paginator.total_pages}"
        label = self.session.search.cursor.label
        search = ""
        if self.session.search.query:
            search = f"  |  {escape(repr(self.session.search.query))} {label or '0 / 0'}"
        self.query_one("#status", Static).update(f"{state.mode.value}  |  {position}{search}")

    # Actions

    def action_search(self) -> None:
        search_input = self.query_one("#search-input", Input)
        search_input.display = True
        search_input.focus()

    def action_close_search(self) -> None:
        search_input = self.query_one("#search-input", Input)
        search_input.value = ""
        search_input.display = False
        if self.session.document is not None:
            self.session.clear_search()
            self._refresh_all()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if self.session.document is None:
            return
        state = self.session.find(event.value)
        self._log(f"{len(state.matches)} matches for {event.value!r}")
        self.scroll_view.focus()
        self._refresh_all()

    def action_next_match(self) -> None:
        if self.session.next_match() is not None:
            self._refresh_all()

    def action_previous_match(self) -> None:
        if self.session.previous_match() is not None:
            self._refresh_all()

    def action_toggle_mode(self) -> None:
        if self.session.document is None:
            return
        mode = self.session.toggle_mode()
        self._log(f"Switched to {mode.value} mode")
        self._refresh_all()

    def action_next_page(self) -> None:
        if self.session.document is not None and self.session.view_state.mode is ViewMode.PAGE:
            self.session.next_page()
            self._refresh_all()

    def action_previous_page(self) -> None:
        if self.session.document is not None and self.session.view_state.mode is ViewMode.PAGE:
            self.session.previous_page()
            self._refresh_all()

    def action_cycle_encoding(self) -> None:
        if self.session.document is None:
            return
        current = ENCODING_CYCLE.index(self.session.document.encoding)
        label = ENCODING_CYCLE[(current + 1) % len(ENCODING_CYCLE)]
        try:
            document = self.session.change_encoding(label)
        except TextViewerError as e:
            self._log(f"ERROR: {e}")
            return
        self._log(f"Re-decoded as {document.encoding}")
        self._refresh_all()


def _visible_length(match: SearchMatch, line: str, column: int) -> int:
    # A match running past the end of its line is only marked up to the break
    return min(match.length, max(len(line) - column, 0))


def main(
    file: Optional[SourceFile] = None,
    options: Optional[ViewerOptions] = None,
    encoding: Optional[str] = None,
    library: Optional[LibraryStore] = None,
    document: Optional[Document] = None,
) -> None:
    """Run the reader TUI."""
    app = ReaderApp(file, options, encoding, library, document)
    app.run()
