"""Tests for the ReaderSession coordinator."""

import asyncio

import pytest

from conftest import numbered_lines
from textviewer.config import ViewerOptions
from textviewer.errors import DecodeError, TextViewerError
from textviewer.models import EncodingLabel, ViewMode
from textviewer.protocols import SourceFile
from textviewer.session import ReaderSession


@pytest.fixture
def session():
    return ReaderSession()


@pytest.fixture
def long_file():
    return SourceFile(name="long.txt", data="\n".join(numbered_lines(3500)).encode())


class TestOpen:
    def test_open_builds_all_views(self, session, source_file):
        doc = session.open(source_file())
        assert session.document is doc
        assert doc.lines() == ["Hello", "world", ""]
        assert session.window.chunks[0].rendered
        assert session.paginator.total_pages == 1
        assert session.view_state.mode is ViewMode.SCROLL

    def test_failed_decode_keeps_previous_document(self, session, source_file):
        first = session.open(source_file())
        with pytest.raises(DecodeError):
            session.open(source_file("other"), encoding="klingon")
        assert session.document is first
        assert session.source.name == "notes.txt"

    def test_open_from_cancelled_source(self, session):
        class Cancelled:
            source_type = "test"

            def pick_file(self):
                return None

        assert session.open_from(Cancelled()) is None
        assert session.document is None

    def test_operations_need_a_document(self, session):
        with pytest.raises(TextViewerError):
            session.go_to_page(1)
        with pytest.raises(TextViewerError):
            session.find("x")

    def test_close_resets(self, session, source_file):
        session.open(source_file())
        session.find("hello")
        session.close()
        assert session.document is None
        assert session.search.matches == []


class TestStaleDecodes:
    def test_newer_open_wins(self, long_file, source_file):
        session = ReaderSession(ViewerOptions(large_file_threshold_bytes=10))
        session.model.SLICE_SIZE = 64  # enough slices for the large decode to yield

        async def race():
            return await asyncio.gather(
                session.open_async(long_file),
                session.open_async(source_file("short")),
            )

        stale, fresh = asyncio.run(race())
        assert stale is None
        assert session.document is fresh
        assert session.document.text == "short"
        assert session.source.name == "notes.txt"

    def test_single_async_open(self, session, source_file):
        doc = asyncio.run(session.open_async(source_file()))
        assert session.document is doc


class TestModeSwitch:
    def test_scroll_line_450_maps_to_page_16_and_back(self, session, long_file):
        session.open(long_file)
        session.scroll_to_line(450)
        assert session.view_state.scroll_line == 450

        session.set_mode(ViewMode.PAGE)
        assert session.view_state.current_page == 16
        assert session.current_page().lines[0] == "line 450"

        session.set_mode(ViewMode.SCROLL)
        assert session.view_state.scroll_line == 450

    def test_page_mode_discards_scroll_chunks(self, session, long_file):
        session.open(long_file)
        session.scroll_to(450 * 20, 400)
        assert session.rendered_chunks()
        session.set_mode(ViewMode.PAGE)
        assert session.window.rendered == []
        assert session.rendered_chunks() == []

    def test_round_trip_drift_within_a_page(self, session, long_file):
        session.open(long_file)
        session.scroll_to(463 * 20)
        session.toggle_mode()
        session.toggle_mode()
        assert 450 <= session.view_state.scroll_line <= 463

    def test_setting_the_same_mode_is_noop(self, session, long_file):
        session.open(long_file)
        session.scroll_to_line(100)
        session.set_mode("scroll")
        assert session.view_state.scroll_line == 100

    def test_cover_page_keeps_content_numbering(self, long_file):
        session = ReaderSession(ViewerOptions(include_cover_page=True))
        session.open(long_file)
        assert session.view_state.current_page == 0
        session.scroll_to_line(450)
        session.set_mode(ViewMode.PAGE)
        assert session.view_state.current_page == 16
        assert session.current_page().lines[0] == "line 450"
        session.go_to_page(0)
        session.set_mode(ViewMode.SCROLL)
        assert session.view_state.scroll_line == 0

    def test_page_navigation(self, session, long_file):
        session.open(long_file)
        session.set_mode(ViewMode.PAGE)
        assert session.previous_page().number == 1
        assert session.next_page().number == 2
        assert session.go_to_page(500).number == 117
        assert session.view_state.current_page == 117


class TestSearch:
    def test_find_and_cycle(self, session, source_file):
        session.open(source_file("Hello\nworld\nHello\nagain"))
        state = session.find("hello")
        assert [m.offset for m in state.matches] == [0, 12]
        assert session.next_match().offset == 12
        assert session.next_match().offset == 0
        assert session.previous_match().offset == 12
        assert session.search.cursor.label == "2 / 2"

    def test_find_in_page_mode_turns_to_match(self, session, long_file):
        session.open(long_file)
        session.set_mode(ViewMode.PAGE)
        session.find("line 2000")
        assert session.view_state.current_page == 2000 // 30 + 1

    def test_find_in_scroll_mode_scrolls_to_match(self, session, long_file):
        session.open(long_file)
        session.find("line 1234")
        assert session.view_state.scroll_line == 1234
        assert any(c.start_line <= 1234 < c.end_line for c in session.rendered_chunks())

    def test_virtualized_search_matches_plain(self, session, long_file):
        session.open(long_file)
        assert session.window.active
        matches = session.find("line 34").matches
        assert len(matches) == 111  # 34, 340-349, 3400-3499

    def test_highlighted_text_and_clear(self, session, source_file):
        session.open(source_file("Hello\nworld"))
        session.find("world")
        assert '<mark class="highlight current">world</mark>' in session.highlighted_text()
        session.clear_search()
        assert session.highlighted_text() == "Hello\nworld"

    def test_no_matches(self, session, source_file):
        session.open(source_file())
        session.find("zzz")
        assert session.next_match() is None
        assert session.search.current is None

    def test_highlighted_text_escapes_html(self, session, source_file):
        session.open(source_file("<p>Tom & Jerry</p>"))
        assert session.highlighted_text() == "&lt;p&gt;Tom &amp; Jerry&lt;/p&gt;"
        session.find("tom")
        assert session.highlighted_text() == (
            '&lt;p&gt;<mark class="highlight current">Tom</mark> &amp; Jerry&lt;/p&gt;'
        )


class TestChangeEncoding:
    def test_redecode_replaces_document_and_reruns_search(self, session):
        data = "안녕하세요\n세상".encode("euc_kr")
        session.open(SourceFile(name="korean.txt", data=data))
        original = session.document
        assert original.encoding is EncodingLabel.EUC_KR
        session.find("세상")
        assert len(session.search.matches) == 1

        latin = session.change_encoding("ISO-8859-1")
        assert latin is not original
        assert session.document.encoding is EncodingLabel.ISO_8859_1
        assert session.search.query == "세상"
        assert session.search.matches == []

        session.change_encoding(EncodingLabel.CP949)
        assert session.document.text == "안녕하세요\n세상"
        assert len(session.search.matches) == 1

    def test_unsupported_encoding_keeps_document(self, session, source_file):
        doc = session.open(source_file())
        with pytest.raises(DecodeError):
            session.change_encoding("EBCDIC")
        assert session.document is doc

    def test_needs_source_bytes(self, session, hello_document):
        session.open_document(hello_document)
        with pytest.raises(TextViewerError):
            session.change_encoding("UTF-8")

    def test_position_is_kept(self, session, long_file):
        session.open(long_file)
        session.set_mode(ViewMode.PAGE)
        session.go_to_page(40)
        session.change_encoding("ISO-8859-1")
        assert session.view_state.current_page == 40
        assert session.current_page().number == 40


class TestFileInfo:
    def test_info_fields(self, session, source_file):
        session.open(source_file())
        info = session.file_info()
        assert info["name"] == "notes.txt"
        assert info["size"] == "12 Bytes"
        assert info["lines"] == 3
        assert info["characters"] == 12
        assert info["modified"] == "2024-05-01 12:30:00"
        assert info["encoding"] == "UTF-8"
        assert info["virtualized"] is False
        assert info["pages"] == 1
