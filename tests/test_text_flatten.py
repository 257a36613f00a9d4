"""Tests for acorn2svg.text.flatten span generation."""

import pytest

from acorn2svg.model import Color, FontDescriptor, LineFragment, Point, Rect, RichText, Size, TextRun
from acorn2svg.text.flatten import flatten_text, line_bounds
from acorn2svg.text.layout import GlyphLayout, SimpleLayoutManager

FONT = FontDescriptor(name="Helvetica", family="Helvetica", size=10.0)
BOLD = FontDescriptor(name="Helvetica-Bold", family="Helvetica", size=10.0, weight=9)
RED = Color(1.0, 0.0, 0.0)


def laid_out(text: RichText, width: float = 0.0) -> GlyphLayout:
    return SimpleLayoutManager().layout(text, Size(width, 100.0))


def hand_layout(nominal_ranges: list[range]) -> GlyphLayout:
    """Three glyphs on one fragment offset by (5, 10)."""
    return GlyphLayout(
        fragments=[LineFragment(Rect(5, 10, 100, 20), range(0, 3))],
        char_glyphs=[0, 1, 2],
        glyph_chars=[0, 1, 2],
        locations=[Point(0, 15), Point(10, 15), Point(25, 15)],
        advances=[10, 10, 10],
        nominal_ranges=nominal_ranges,
    )


class TestLineBounds:
    """Tests for finding the line end of a character range."""

    def test_no_terminator(self) -> None:
        assert line_bounds("abc", range(0, 2)) == (3, 3)

    def test_newline(self) -> None:
        assert line_bounds("ab\ncd", range(0, 3)) == (3, 2)

    def test_crlf_counts_as_one(self) -> None:
        assert line_bounds("ab\r\ncd", range(0, 3)) == (4, 2)
        assert line_bounds("ab\r\ncd", range(0, 4)) == (4, 2)

    def test_unicode_separator(self) -> None:
        assert line_bounds("a\u2028b", range(0, 1)) == (2, 1)

    def test_range_at_end(self) -> None:
        assert line_bounds("abc", range(3, 3)) == (3, 3)


class TestFlattenText:
    """Tests for turning runs and line fragments into spans."""

    def test_single_run_single_line(self) -> None:
        """A nominally spaced run gets one anchor and a textLength."""
        text = RichText("Hi", (TextRun(0, 2, FONT, RED),))
        (span,) = flatten_text(text, laid_out(text))
        assert span.text == "Hi"
        assert span.font is FONT
        assert span.color == RED
        assert span.x == [pytest.approx(0.0)]
        assert span.y == [pytest.approx(8.0)]
        assert span.text_length == pytest.approx(12.0)
        assert span.anchored

    def test_font_change_starts_new_span(self) -> None:
        text = RichText("Hello", (TextRun(0, 2, FONT), TextRun(2, 3, BOLD)))
        spans = flatten_text(text, laid_out(text))
        assert [s.text for s in spans] == ["He", "llo"]
        assert spans[1].font is BOLD
        assert spans[1].x == [pytest.approx(12.0)]
        assert spans[1].text_length == pytest.approx(18.0)

    def test_each_line_gets_a_span(self) -> None:
        """A run over two lines yields one span per line fragment."""
        text = RichText("ab\ncd", (TextRun(0, 5, FONT),))
        first, second = flatten_text(text, laid_out(text))
        assert first.text == "ab\n"
        assert first.y == [pytest.approx(8.0)]
        assert second.text == "cd"
        assert second.x == [pytest.approx(0.0)]
        assert second.y == [pytest.approx(20.0)]

    def test_trimmed_line_end_has_no_text_length(self) -> None:
        """Spans ending in a line terminator get no textLength."""
        text = RichText("ab\ncd", (TextRun(0, 5, FONT),))
        first, second = flatten_text(text, laid_out(text))
        assert first.text_length is None
        assert second.text_length == pytest.approx(12.0)

    def test_wrapped_run(self) -> None:
        text = RichText("aa bb", (TextRun(0, 5, FONT),))
        spans = flatten_text(text, laid_out(text, width=20.0))
        assert [s.text for s in spans] == ["aa ", "bb"]
        assert spans[1].y == [pytest.approx(20.0)]

    def test_no_text_length_without_font(self) -> None:
        text = RichText("Hi", (TextRun(0, 2),))
        (span,) = flatten_text(text, laid_out(text))
        assert span.font is None
        assert span.text_length is None

    def test_no_text_length_for_single_character(self) -> None:
        text = RichText("H", (TextRun(0, 1, FONT),))
        (span,) = flatten_text(text, laid_out(text))
        assert span.text_length is None

    def test_text_length_can_be_disabled(self) -> None:
        text = RichText("Hi", (TextRun(0, 2, FONT),))
        (span,) = flatten_text(text, laid_out(text), text_length=False)
        assert span.text_length is None

    def test_irregular_spacing_positions_every_character(self) -> None:
        """Glyphs outside the nominal range need per-character positions."""
        text = RichText("abc", (TextRun(0, 3, FONT),))
        (span,) = flatten_text(text, hand_layout([range(0, 2), range(2, 3)]))
        assert span.x == [5, 15, 30]
        assert span.y == [25, 25, 25]
        assert span.text_length is None
        assert not span.anchored

    def test_no_nominal_range(self) -> None:
        text = RichText("abc", (TextRun(0, 3, FONT),))
        (span,) = flatten_text(text, hand_layout([]))
        assert len(span.x) == 3

    def test_fragment_origin_added(self) -> None:
        text = RichText("abc", (TextRun(0, 3, FONT),))
        (span,) = flatten_text(text, hand_layout([range(0, 3)]))
        assert (span.x, span.y) == ([5], [25])
        assert span.text_length == pytest.approx(35.0)

    def test_empty_text(self) -> None:
        assert flatten_text(RichText(""), laid_out(RichText(""))) == []
