"""File source for mobile shells that hand files over a native bridge."""

import base64
import binascii
from datetime import datetime
from typing import Any, Callable, Optional

from textviewer.errors import FileReadError
from textviewer.protocols import SourceFile

# Calls into the native picker; returns None when the user cancels
BridgeCall = Callable[[], Optional[dict[str, Any]]]


class BridgeFileSource:
    """Reads files from a native bridge payload.

    Native filesystem plugins return file content base64-encoded, so the
    payload is expected to look like::

        {"name": "notes.txt", "data": "<base64>", "mtime": 1700000000000}

    ``mtime`` is in milliseconds since the epoch and optional.
    """

    source_type = "bridge"

    def __init__(self, bridge: BridgeCall):
        self.bridge = bridge

    def pick_file(self) -> Optional[SourceFile]:
        payload = self.bridge()
        if payload is None:
            return None

        name = payload.get("name") or "untitled"
        if "data" not in payload:
            raise FileReadError(name, "bridge payload has no data")
        try:
            data = base64.b64decode(payload["data"], validate=True)
        except (binascii.Error, ValueError, TypeError) as e:
            raise FileReadError(name, f"invalid base64 payload ({e})") from e

        modified = None
        if payload.get("mtime") is not None:
            modified = datetime.fromtimestamp(payload["mtime"] / 1000)

        return SourceFile(name=name, data=data, last_modified=modified)
