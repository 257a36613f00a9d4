"""Tests for acorn2svg.decode property-list value decoding."""

import pytest

from acorn2svg.decode import ValueDecoder
from acorn2svg.exceptions import DecodeError
from acorn2svg.model import ClosePath, Color, CurveTo, FontClass, FontTraits, LineTo, MoveTo, Point


@pytest.fixture
def decoder() -> ValueDecoder:
    return ValueDecoder()


class TestColor:
    """Tests for color representations."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            ([1, 0, 0], Color(1.0, 0.0, 0.0, 1.0)),
            ([0, 0, 1, 0.5], Color(0.0, 0.0, 1.0, 0.5)),
            ({"red": 0, "green": 1, "blue": 0}, Color(0.0, 1.0, 0.0, 1.0)),
            ({"r": 0, "g": 0, "b": 0, "a": 0.25}, Color(0.0, 0.0, 0.0, 0.25)),
            ({"white": 1, "alpha": 0.5}, Color(1.0, 1.0, 1.0, 0.5)),
            ("#FF000080", Color(1.0, 0.0, 0.0, 128 / 255)),
            ("0 0.5 1", Color(0.0, 0.5, 1.0, 1.0)),
        ],
    )
    def test_representations(self, decoder, value, expected) -> None:
        assert decoder.color(value) == expected

    @pytest.mark.parametrize("value", [b"\x04\x0bstreamtyped", "#12345", [1, 2], [0, 0, 2], 7, "red"])
    def test_rejected(self, decoder, value) -> None:
        with pytest.raises(DecodeError):
            decoder.color(value)


class TestPath:
    """Tests for path element lists."""

    def test_all_operators(self, decoder) -> None:
        ops = decoder.path(
            [["moveto", 0, 0], ["L", [10, 0]], ["curveto", [1, 1], [2, 2], [3, 3]], ["closepath"]]
        )
        assert ops == [
            MoveTo(Point(0, 0)),
            LineTo(Point(10, 0)),
            CurveTo(Point(1, 1), Point(2, 2), Point(3, 3)),
            ClosePath(),
        ]

    def test_wrong_arity(self, decoder) -> None:
        with pytest.raises(DecodeError, match="takes 2 numbers"):
            decoder.path([["lineto", 1]])

    def test_unknown_operator(self, decoder) -> None:
        with pytest.raises(DecodeError, match="unknown operator"):
            decoder.path([["arcto", 1, 2]])

    def test_archived_data(self, decoder) -> None:
        with pytest.raises(DecodeError):
            decoder.path(b"bplist00")


class TestRichText:
    """Tests for attributed string decoding."""

    def test_plain_string(self, decoder) -> None:
        text = decoder.rich_text("hello")
        assert text.string == "hello"
        assert [(r.start, r.length) for r in text.runs] == [(0, 5)]

    def test_runs_follow_each_other(self, decoder) -> None:
        text = decoder.rich_text(
            {
                "string": "Hello",
                "runs": [{"length": 2, "font": {"name": "Helvetica"}}, {"length": 3, "color": [1, 0, 0]}],
            }
        )
        first, second = text.runs
        assert (first.start, first.stop) == (0, 2)
        assert first.font.name == "Helvetica"
        assert (second.start, second.stop) == (2, 5)
        assert second.color == Color(1.0, 0.0, 0.0)

    def test_run_outside_string(self, decoder) -> None:
        with pytest.raises(DecodeError, match="outside"):
            decoder.rich_text({"string": "ab", "runs": [{"start": 1, "length": 5}]})

    @pytest.mark.parametrize("run", [{"length": "two"}, {"start": None, "length": 1}, {"start": [0]}])
    def test_non_numeric_run_range(self, decoder, run) -> None:
        with pytest.raises(DecodeError, match="non-numeric range"):
            decoder.rich_text({"string": "Hi", "runs": [run]})

    def test_missing_string(self, decoder) -> None:
        with pytest.raises(DecodeError):
            decoder.rich_text({"runs": []})


class TestFont:
    """Tests for font descriptor decoding."""

    def test_full_description(self, decoder) -> None:
        font = decoder.font(
            {
                "name": "Menlo-BoldItalic",
                "family": "Menlo",
                "size": 11,
                "weight": 9,
                "traits": "bold, italic",
                "class": "Modern-Serifs",
                "fixed_pitch": True,
            }
        )
        assert font.family == "Menlo"
        assert font.size == 11.0
        assert font.weight == 9
        assert font.traits == FontTraits.BOLD | FontTraits.ITALIC
        assert font.family_class is FontClass.MODERN_SERIFS
        assert font.fixed_pitch
        assert font.metrics is None

    def test_defaults(self, decoder) -> None:
        font = decoder.font({"name": "Avenir-Heavy", "traits": ["glowing"], "class": "unheard-of"})
        assert font.family == "Avenir"
        assert font.size == 12.0
        assert font.weight == 5
        assert font.traits == FontTraits.NONE
        assert font.family_class is FontClass.UNKNOWN

    def test_name_required(self, decoder) -> None:
        with pytest.raises(DecodeError):
            decoder.font({"family": "Helvetica"})

    def test_non_numeric_font_number(self, decoder, tmp_path) -> None:
        with pytest.raises(DecodeError, match="font_number"):
            decoder.font({"name": "Helvetica", "file": str(tmp_path / "x.ttf"), "font_number": "first"})
