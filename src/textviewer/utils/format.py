"""Human-readable formatting helpers for status bars and info panels."""

import math
from datetime import datetime
from typing import Optional

SIZE_UNITS = ("Bytes", "KB", "MB", "GB", "TB")


def format_file_size(size: int) -> str:
    """Format a byte count, e.g. 1536 -> "1.5 KB".

    Args:
        size: Size in bytes

    Returns:
        Size in the largest unit below 1024, with at most two decimals
    """
    if size <= 0:
        return "0 Bytes"
    exponent = min(int(math.log(size, 1024)), len(SIZE_UNITS) - 1)
    # log() can land just below an exact power of 1024
    if exponent + 1 < len(SIZE_UNITS) and size >= 1024 ** (exponent + 1):
        exponent += 1
    value = f"{size / 1024 ** exponent:.2f}".rstrip("0").rstrip(".")
    return f"{value} {SIZE_UNITS[exponent]}"


def format_timestamp(value: Optional[datetime]) -> str:
    if value is None:
        return "-"
    return value.strftime("%Y-%m-%d %H:%M:%S")
