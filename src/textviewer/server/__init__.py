"""MCP server for textviewer."""

from textviewer.server.mcp_server import create_mcp_server

__all__ = ["create_mcp_server"]
