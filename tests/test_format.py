"""Tests for formatting helpers."""

from datetime import datetime

import pytest

from textviewer.utils import format_file_size, format_timestamp


@pytest.mark.parametrize(
    "size,expected",
    [
        (0, "0 Bytes"),
        (1, "1 Bytes"),
        (1023, "1023 Bytes"),
        (1024, "1 KB"),
        (1536, "1.5 KB"),
        (1024 * 1024, "1 MB"),
        (50 * 1024 * 1024 + 1, "50 MB"),
        (3 * 1024**3, "3 GB"),
    ],
)
def test_format_file_size(size, expected):
    assert format_file_size(size) == expected


def test_format_timestamp():
    assert format_timestamp(datetime(2024, 5, 1, 9, 5, 3)) == "2024-05-01 09:05:03"
    assert format_timestamp(None) == "-"
