"""Utility functions for textviewer."""

from textviewer.utils.format import format_file_size, format_timestamp

__all__ = ["format_file_size", "format_timestamp"]
