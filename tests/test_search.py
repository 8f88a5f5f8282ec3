"""Tests for literal search, the match cursor and highlighting."""

import random

import pytest

from conftest import make_document
from textviewer.config import ViewerOptions
from textviewer.engine import (
    HighlightMarkup,
    SearchCursor,
    SearchEngine,
    Windower,
    apply_highlights,
)

WORDS = ["alpha", "Beta", "gamma", "ALPHA", "delta", "beta.", "(x)", "a+b", "Alphabet"]


@pytest.fixture
def engine():
    return SearchEngine()


@pytest.fixture
def word_document():
    rng = random.Random(7)
    lines = [" ".join(rng.choice(WORDS) for _ in range(rng.randint(0, 6))) for _ in range(2500)]
    return make_document(lines)


class TestSearch:
    def test_case_insensitive_hello(self, engine, hello_document):
        matches = engine.search(hello_document, "hello")
        assert [m.offset for m in matches] == [0, 12]
        assert [m.matched_text for m in matches] == ["Hello", "Hello"]
        assert all(m.length == 5 for m in matches)

    @pytest.mark.parametrize(
        "query,expected",
        [("a.b", []), ("(x)", ["(x)"]), ("a+b", ["a+b"]), ("[", [])],
    )
    def test_query_is_literal(self, engine, query, expected):
        doc = make_document(["axb (x) a+b aab"])
        assert [m.matched_text for m in engine.search(doc, query)] == expected

    def test_matches_are_ordered_and_disjoint(self, engine):
        doc = make_document(["aaaa aaa"])
        matches = engine.search(doc, "aa")
        assert [m.offset for m in matches] == [0, 2, 5]
        for prev, cur in zip(matches, matches[1:]):
            assert prev.end <= cur.offset

    def test_empty_query_finds_nothing(self, engine, hello_document):
        assert engine.search(hello_document, "") == []

    @pytest.mark.parametrize("query", ["alpha", "beta.", "a", "(x)", " ", "ALPHABET"])
    def test_chunked_search_equals_full_search(self, engine, word_document, query):
        window = Windower(ViewerOptions(chunk_size=97)).build(word_document)
        assert window.active
        assert engine.search(word_document, query, window) == engine.search(word_document, query)

    def test_multiline_query_spans_chunks(self, engine):
        doc = make_document(["end", "start"] * 600)
        window = Windower(ViewerOptions(chunk_size=3)).build(doc)
        matches = engine.search(doc, "end\nstart", window)
        assert len(matches) == 600

    def test_run_starts_cursor_on_first_match(self, engine, hello_document):
        state = engine.run(hello_document, "HELLO")
        assert state.cursor.index == 0
        assert state.current.offset == 0


class TestCursor:
    def test_next_wraps_around(self, engine, hello_document):
        state = engine.run(hello_document, "hello")
        assert state.cursor.next() == 1
        assert state.cursor.next() == 0

    def test_previous_wraps_to_last(self):
        cursor = SearchCursor(3)
        assert cursor.previous() == 2
        assert cursor.previous() == 1

    @pytest.mark.parametrize("count", [1, 2, 5, 13])
    def test_n_steps_return_to_start(self, count):
        for start in range(count):
            cursor = SearchCursor(count, start)
            for _ in range(count):
                cursor.next()
            assert cursor.index == start
            for _ in range(count):
                cursor.previous()
            assert cursor.index == start

    def test_empty_cursor_is_inert(self):
        cursor = SearchCursor()
        assert cursor.next() is None
        assert cursor.previous() is None
        assert cursor.label == ""

    def test_label(self):
        cursor = SearchCursor(12)
        cursor.next()
        cursor.next()
        assert cursor.label == "3 / 12"


class TestHighlights:
    def test_marks_every_match(self, engine, hello_document):
        matches = engine.search(hello_document, "hello")
        markup = HighlightMarkup(open="<", open_current="<<", close=">")
        marked = apply_highlights(hello_document.text, matches, current=1, markup=markup)
        assert marked == "<Hello>\nworld\n<<Hello>\nagain"

    def test_adjacent_matches_do_not_shift(self, engine):
        doc = make_document(["abab"])
        matches = engine.search(doc, "ab")
        marked = apply_highlights(doc.text, matches, markup=HighlightMarkup("[", "{", "]"))
        assert marked == "[ab][ab]"

    def test_no_matches_leaves_text(self, hello_document):
        assert apply_highlights(hello_document.text, []) == hello_document.text

    def test_default_markup(self, engine, hello_document):
        matches = engine.search(hello_document, "again")
        marked = apply_highlights(hello_document.text, matches, current=0)
        assert marked.endswith('<mark class="highlight current">again</mark>')

    def test_html_markup_escapes_document_text(self):
        doc = make_document(["a < b & c", "<b>bold</b>"])
        matches = SearchEngine().search(doc, "b")
        marked = apply_highlights(doc.text, matches, current=0)
        assert marked == (
            'a &lt; <mark class="highlight current">b</mark> &amp; c\n'
            '&lt;<mark class="highlight">b</mark>&gt;'
            '<mark class="highlight">b</mark>old&lt;/<mark class="highlight">b</mark>&gt;'
        )

    def test_plain_markup_leaves_text_alone(self):
        doc = make_document(["1 < 2 & x"])
        matches = SearchEngine().search(doc, "x")
        markup = HighlightMarkup("[", "[", "]", escape_html=False)
        assert apply_highlights(doc.text, matches, markup=markup) == "1 < 2 & [x]"

    def test_escaping_without_matches(self):
        assert apply_highlights("<tag>", []) == "&lt;tag&gt;"
