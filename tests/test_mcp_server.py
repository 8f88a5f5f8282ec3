"""Tests for the MCP server wiring."""

import asyncio

from textviewer.protocols import SourceFile
from textviewer.server import create_mcp_server


def test_registers_reader_tools():
    server = create_mcp_server(SourceFile(name="notes.txt", data=b"Hello\nworld\n"))
    tools = asyncio.run(server.list_tools())
    assert {tool.name for tool in tools} == {"info", "page", "lines", "search", "set_encoding"}
