"""CLI entry point for textviewer."""

import argparse
import logging
import sys
from pathlib import Path
from typing import Literal, Optional, cast

from textviewer.config import ViewerOptions
from textviewer.engine import HighlightMarkup, detect_encoding, score_sample
from textviewer.engine.encoding import SAMPLE_SIZE
from textviewer.errors import TextViewerError
from textviewer.models import EncodingLabel, ViewMode
from textviewer.protocols import SourceFile
from textviewer.session import ReaderSession
from textviewer.sources import source_for_path
from textviewer.storage import LibraryStore
from textviewer.utils import format_file_size

logger = logging.getLogger(__name__)

DEFAULT_LIBRARY = Path.home() / ".textviewer" / "library.db"

# Terminal-friendly match markers for printed search results
TERMINAL_MARKUP = HighlightMarkup(open="[", open_current="[", close="]", escape_html=False)


def read_source(path: str) -> SourceFile:
    """Read a file named on the command line (or stdin for "-")."""
    file = source_for_path(path).pick_file()
    if file is None:
        raise TextViewerError(f"Nothing to read from {path}")
    return file


def open_session(path: str, options: ViewerOptions, encoding: Optional[str]) -> ReaderSession:
    session = ReaderSession(options)
    session.open(read_source(path), encoding)
    return session


def open_library(path: Optional[str]) -> LibraryStore:
    library_path = Path(path) if path else DEFAULT_LIBRARY
    library_path.parent.mkdir(parents=True, exist_ok=True)
    store = LibraryStore(library_path)
    store.initialize()
    return store


def view(path: str, options: ViewerOptions, encoding: Optional[str], library: Optional[str]) -> None:
    """Open a file in the reader TUI.

    Args:
        path: File to open ("-" for stdin)
        options: Viewer options
        encoding: Explicit encoding, detected when None
        library: Library database to record the document in
    """
    # Import here to avoid loading Textual unless needed
    from textviewer.reader import main as reader_main

    reader_main(read_source(path), options, encoding, open_library(library))


def info(path: str, options: ViewerOptions, encoding: Optional[str]) -> None:
    """Print file information."""
    print_info(open_session(path, options, encoding))


def print_info(session: ReaderSession) -> None:
    for key, value in session.file_info().items():
        print(f"  {key + ':':<13} {value}")


def detect(path: str, verbose: bool = False) -> None:
    """Print the detected encoding of a file."""
    file = read_source(path)
    sample = file.data[:SAMPLE_SIZE]
    print(f"{file.name}: {detect_encoding(sample)}")
    if verbose:
        scores = score_sample(sample)
        print(f"  High-bit bytes:   {scores.high_bit_bytes}")
        print(f"  EUC-KR score:     {scores.euc_kr_score}")
        print(f"  UTF-8 score:      {scores.utf8_score}")
        print(f"  Valid UTF-8:      {scores.valid_utf8_sequences}")
        print(f"  Invalid UTF-8:    {scores.invalid_utf8_sequences}")


def page(path: str, number: int, options: ViewerOptions, encoding: Optional[str]) -> None:
    """Print one page of a file."""
    print_page(open_session(path, options, encoding), number)


def print_page(session: ReaderSession, number: int) -> None:
    session.set_mode(ViewMode.PAGE)
    result = session.go_to_page(number)
    total = session.paginator.total_pages
    if result.is_cover:
        print(f"-- cover (page 0 / {total}) --")
        return
    for line in result.lines:
        print(line)
    print(f"-- page {result.number} / {total} --")


def search(path: str, query: str, options: ViewerOptions, encoding: Optional[str]) -> None:
    """Print every line containing a literal, case-insensitive query."""
    session = open_session(path, options, encoding)
    state = session.find(query)
    if not state.matches:
        print(f"No matches for: {query}")
        return

    document = session.document
    marked = session.highlighted_text(TERMINAL_MARKUP)
    marked_lines = marked.split("\n")
    seen = set()
    for match in state.matches:
        line = document.line_at(match.offset)
        if line in seen:
            continue
        seen.add(line)
        # Markers never contain newlines, so line numbers are unchanged
        print(f"{line + 1:>6}: {marked_lines[line].rstrip()}")
    print(f"{len(state.matches)} matches, page of first match: "
          f"{session.translator.line_to_page(document.line_at(state.matches[0].offset))}")


def serve(path: str, options: ViewerOptions, encoding: Optional[str], transport: str = "stdio") -> None:
    """Start an MCP server for one file."""
    # Import here to avoid loading MCP unless needed
    from textviewer.server import create_mcp_server

    file = read_source(path)
    logger.info(f"Serving {file.name} via {transport}")
    mcp = create_mcp_server(file, options)
    mcp.run(transport=cast(Literal["stdio", "sse", "streamable-http"], transport))


def recent(library: Optional[str], limit: int = 20) -> None:
    """List documents recorded in the library."""
    store = open_library(library)
    entries = store.list_recent(limit)
    if not entries:
        print("Library is empty")
        return
    for entry in entries:
        size = format_file_size(entry["size_bytes"])
        # Exact byte count first: reopen takes it as the key
        print(
            f"{entry['name']:<40} {entry['size_bytes']:>10} {size:>10}  "
            f"{entry['encoding']:<10} {entry['opened_at'][:19]}"
        )


def reopen(
    name: str,
    size: int,
    options: ViewerOptions,
    library: Optional[str],
    page_number: Optional[int] = None,
    tui: bool = False,
) -> None:
    """Reopen a document stored in the library without its original file.

    Prints its information, or one page when page_number is given, or opens
    it in the reader TUI.
    """
    document = open_library(library).load(name, size)
    if document is None:
        raise TextViewerError(f"{name} ({size} bytes) is not in the library")

    if tui:
        from textviewer.reader import main as reader_main

        reader_main(options=options, document=document)
        return

    session = ReaderSession(options)
    session.open_document(document)
    if page_number is None:
        print_info(session)
    else:
        print_page(session, page_number)


def add_view_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("file", help="Text file path, or - for stdin")
    parser.add_argument(
        "-e",
        "--encoding",
        type=_encoding,
        help="Decode with this encoding instead of detecting it",
    )
    parser.add_argument("--lines-per-page", type=int, help="Lines per page (default: 30)")
    parser.add_argument("--chunk-size", type=int, help="Lines per scroll chunk (default: 1000)")
    parser.add_argument(
        "--cover",
        action="store_true",
        default=None,
        help="Add a cover page before page 1",
    )


def build_options(args: argparse.Namespace) -> ViewerOptions:
    return ViewerOptions().with_overrides(
        lines_per_page=getattr(args, "lines_per_page", None),
        chunk_size=getattr(args, "chunk_size", None),
        include_cover_page=getattr(args, "cover", None),
    )


def _encoding(value: str) -> str:
    try:
        return EncodingLabel.parse(value).value
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="textviewer",
        description="Text viewer with encoding detection, paging and search",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # view command
    view_parser = subparsers.add_parser("view", help="Open a file in the reader TUI")
    add_view_options(view_parser)
    view_parser.add_argument("--library", help=f"Library database (default: {DEFAULT_LIBRARY})")

    # info command
    info_parser = subparsers.add_parser("info", help="Show file information")
    add_view_options(info_parser)

    # detect command
    detect_parser = subparsers.add_parser("detect", help="Detect a file's encoding")
    detect_parser.add_argument("file", help="Text file path, or - for stdin")
    detect_parser.add_argument("--scores", action="store_true", help="Show heuristic scores")

    # page command
    page_parser = subparsers.add_parser("page", help="Print one page")
    add_view_options(page_parser)
    page_parser.add_argument("number", type=int, help="Page number (1-based, 0 = cover)")

    # search command
    search_parser = subparsers.add_parser("search", help="Search a file")
    add_view_options(search_parser)
    search_parser.add_argument("query", help="Literal text to find (case-insensitive)")

    # serve command
    serve_parser = subparsers.add_parser("serve", help="Start MCP server for a file")
    add_view_options(serve_parser)
    serve_parser.add_argument(
        "--transport",
        choices=["stdio", "sse"],
        default="stdio",
        help="Transport protocol (default: stdio)",
    )

    # recent command
    recent_parser = subparsers.add_parser("recent", help="List documents in the library")
    recent_parser.add_argument("--library", help=f"Library database (default: {DEFAULT_LIBRARY})")
    recent_parser.add_argument("-n", "--limit", type=int, default=20, help="Entries to show")

    # reopen command
    reopen_parser = subparsers.add_parser("reopen", help="Open a document stored in the library")
    reopen_parser.add_argument("name", help="File name as listed by recent")
    reopen_parser.add_argument("size", type=int, help="Size in bytes as stored in the library")
    reopen_parser.add_argument("--library", help=f"Library database (default: {DEFAULT_LIBRARY})")
    reopen_parser.add_argument("--page", type=int, help="Print this page instead of the file info")
    reopen_parser.add_argument("--lines-per-page", type=int, help="Lines per page (default: 30)")
    reopen_parser.add_argument("--tui", action="store_true", help="Open in the reader TUI")

    return parser


def main(argv: Optional[list[str]] = None) -> None:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s",
    )

    try:
        options = build_options(args)
        if args.command == "view":
            view(args.file, options, args.encoding, args.library)
        elif args.command == "info":
            info(args.file, options, args.encoding)
        elif args.command == "detect":
            detect(args.file, args.scores)
        elif args.command == "page":
            page(args.file, args.number, options, args.encoding)
        elif args.command == "search":
            search(args.file, args.query, options, args.encoding)
        elif args.command == "serve":
            serve(args.file, options, args.encoding, args.transport)
        elif args.command == "recent":
            recent(args.library, args.limit)
        elif args.command == "reopen":
            reopen(args.name, args.size, options, args.library, args.page, args.tui)
    except (TextViewerError, ValueError) as e:
        logger.error(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
