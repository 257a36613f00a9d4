"""Tests for acorn2svg.geometry coordinate flipping and value parsing."""

import pytest

from acorn2svg.exceptions import MalformedInputError
from acorn2svg.geometry import (
    Frame,
    bool_for_key,
    float_for_key,
    layer_frame,
    parse_bool,
    parse_rect,
    parse_size,
    top_y,
)
from acorn2svg.model import Point, Rect, Size


class TestFrame:
    """Tests for flipping source coordinates into a layer frame."""

    def test_translate_flips_y(self) -> None:
        """Y is measured down from the frame origin."""
        frame = Frame(5.0, 200.0)
        assert frame.translate(Point(10.0, 70.0)) == Point(15.0, 130.0)

    def test_layer_frame_top_edge(self) -> None:
        """The frame origin is the layer's top edge from the document top."""
        frame = layer_frame(200.0, Rect(10.0, 20.0, 30.0, 40.0))
        assert frame.origin_x == 10.0
        assert frame.origin_y == 140.0
        assert (frame.width, frame.height) == (30.0, 40.0)

    def test_zero_frame_uses_document_height(self) -> None:
        """A layer without a frame is placed against the document bottom."""
        assert top_y(200.0, Rect(0.0, 0.0, 0.0, 0.0)) == 200.0


class TestParseGeometry:
    """Tests for parsing stored geometry strings."""

    def test_parse_rect_string(self) -> None:
        """Nested brace notation parses into a Rect."""
        assert parse_rect("{{10, 20}, {100, 50.5}}") == Rect(10.0, 20.0, 100.0, 50.5)

    def test_parse_rect_sequence(self) -> None:
        """Four numbers parse into a Rect."""
        assert parse_rect([1, 2, 3, 4]) == Rect(1.0, 2.0, 3.0, 4.0)

    def test_parse_rect_mapping(self) -> None:
        """A mapping with x/y/width/height parses into a Rect."""
        assert parse_rect({"x": 1, "y": 2, "width": 3, "height": 4}) == Rect(1.0, 2.0, 3.0, 4.0)

    def test_parse_size(self) -> None:
        """Two-number values parse into sizes."""
        assert parse_size("{640, 480}") == Size(640.0, 480.0)

    def test_wrong_count_is_malformed(self) -> None:
        """A value with the wrong number of components is rejected."""
        with pytest.raises(MalformedInputError):
            parse_rect("{1, 2}")

    def test_unparseable_value_is_malformed(self) -> None:
        """Values of unexpected types are rejected."""
        with pytest.raises(MalformedInputError):
            parse_size(None)


class TestParseBool:
    """Tests for stored boolean interpretation."""

    @pytest.mark.parametrize("value", [True, 1, "1", "yes", "Y", b"YES"])
    def test_true_values(self, value) -> None:
        """Truthy spellings parse as True."""
        assert parse_bool(value) is True

    @pytest.mark.parametrize("value", [False, 0, 0.0, "0", "no", "N"])
    def test_false_values(self, value) -> None:
        """Falsy spellings parse as False."""
        assert parse_bool(value) is False

    def test_other_strings_are_malformed(self) -> None:
        """Anything else is rejected."""
        with pytest.raises(MalformedInputError):
            parse_bool("maybe")

    def test_bool_for_key_default(self) -> None:
        """A missing key yields the default."""
        assert bool_for_key({}, "DrawsFill") is False
        assert bool_for_key({}, "DrawsFill", default=True) is True


class TestFloatForKey:
    """Tests for reading required numbers."""

    def test_reads_number(self) -> None:
        """Numbers and numeric strings are accepted."""
        assert float_for_key({"a": 2}, "a") == 2.0
        assert float_for_key({"a": "2.5"}, "a") == 2.5

    def test_missing_key_is_malformed(self) -> None:
        """A missing required number is fatal."""
        with pytest.raises(MalformedInputError, match="StrokeLineWidth"):
            float_for_key({}, "StrokeLineWidth")

    def test_non_numeric_is_malformed(self) -> None:
        """A non-numeric value is fatal."""
        with pytest.raises(MalformedInputError):
            float_for_key({"a": "wide"}, "a")
