"""Error taxonomy for the viewer engine."""


class TextViewerError(Exception):
    """Base class for all textviewer errors."""


class DecodeError(TextViewerError):
    """The requested encoding is not supported by the codec layer."""

    def __init__(self, encoding: str, reason: str = "unsupported encoding"):
        self.encoding = encoding
        super().__init__(f"Cannot decode as {encoding}: {reason}")


class FileReadError(TextViewerError):
    """The host could not supply the file bytes."""

    def __init__(self, name: str, reason: str):
        self.name = name
        super().__init__(f"Cannot read {name}: {reason}")


class PageOutOfRange(TextViewerError):
    """A page request was not a non-negative integer."""

    def __init__(self, page: object):
        self.page = page
        super().__init__(f"Invalid page number: {page!r}")
