"""FastMCP server exposing a reading session."""

from mcp.server.fastmcp import FastMCP

from textviewer.config import ViewerOptions
from textviewer.errors import TextViewerError
from textviewer.protocols import SourceFile
from textviewer.session import ReaderSession


def create_mcp_server(file: SourceFile, options: ViewerOptions | None = None) -> FastMCP:
    """Create an MCP server for a single text file.

    Design: 1 process = 1 document. The session decodes the file once and
    every tool reads from it.

    Args:
        file: The file to serve
        options: Viewer options (page size, thresholds)

    Returns:
        Configured FastMCP server instance
    """
    mcp = FastMCP(
        name="textviewer",
    )

    session = ReaderSession(options)
    session.open(file)

    @mcp.tool()
    def info() -> str:
        """Describe the open file: size, encoding, lines and pages."""
        return "\n".join(f"{key}: {value}" for key, value in session.file_info().items())

    @mcp.tool()
    def page(number: int = 1) -> str:
        """Read one page of the file.

        Args:
            number: Page number, starting at 1 (0 is the cover when enabled)

        Returns:
            The page's lines with a header showing the position
        """
        try:
            result = session.go_to_page(number)
        except TextViewerError as e:
            return f"Error: {e}"

        header = f"[page {result.number} / {session.paginator.total_pages}]"
        if result.is_cover:
            return f"{header}\n(cover)"
        return header + "\n" + "\n".join(result.lines)

    @mcp.tool()
    def lines(start: int = 0, count: int = 50) -> str:
        """Read a range of lines.

        Args:
            start: First line, 0-based
            count: Number of lines to return (default: 50)

        Returns:
            The lines prefixed with their 1-based numbers
        """
        document = session.document
        selected = document.lines(start, start + max(count, 0))
        first = max(start, 0)
        return "\n".join(f"{first + i + 1:>6}  {line}" for i, line in enumerate(selected))

    @mcp.tool()
    def search(query: str, limit: int = 20) -> str:
        """Find literal, case-insensitive occurrences of a query.

        Args:
            query: Text to look for (no pattern syntax)
            limit: Maximum number of results to list (default: 20)

        Returns:
            Matches with their line numbers and the line text
        """
        state = session.find(query)
        if not state.matches:
            return f"No matches for: {query}"

        document = session.document
        results = [f"{len(state.matches)} matches for {query!r}"]
        for match in state.matches[:limit]:
            line = document.line_at(match.offset)
            text = document.line(line).strip()
            if len(text) > 200:
                text = text[:200] + "..."
            results.append(f"  line {line + 1}: {text}")
        if len(state.matches) > limit:
            results.append(f"  ... {len(state.matches) - limit} more")
        return "\n".join(results)

    @mcp.tool()
    def set_encoding(encoding: str) -> str:
        """Re-decode the file with another encoding.

        Args:
            encoding: One of UTF-8, UTF-16LE, UTF-16BE, EUC-KR, CP949, ISO-8859-1

        Returns:
            Confirmation with the new line count, or an error message
        """
        try:
            document = session.change_encoding(encoding)
        except TextViewerError as e:
            return f"Error: {e}"
        return f"Decoded as {document.encoding}: {document.line_count} lines"

    return mcp
