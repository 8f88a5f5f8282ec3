"""textviewer - encoding-aware text viewing with virtual scrolling, paging and search."""

__version__ = "0.1.0"
