"""Document rendering engine: detection, decoding, windowing, paging, search."""

from textviewer.engine.decoder import DocumentModel
from textviewer.engine.encoding import detect_encoding, score_sample
from textviewer.engine.paginator import Paginator, paginate
from textviewer.engine.positions import PositionTranslator
from textviewer.engine.search import (
    HighlightMarkup,
    SearchCursor,
    SearchEngine,
    SearchState,
    apply_highlights,
)
from textviewer.engine.windower import Windower, WindowState

__all__ = [
    "DocumentModel",
    "detect_encoding",
    "score_sample",
    "Paginator",
    "paginate",
    "PositionTranslator",
    "HighlightMarkup",
    "SearchCursor",
    "SearchEngine",
    "SearchState",
    "apply_highlights",
    "Windower",
    "WindowState",
]
