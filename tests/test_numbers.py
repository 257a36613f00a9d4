"""Tests for acorn2svg.svg.numbers number formatting."""

import pytest

from acorn2svg.svg.numbers import format_number, format_numbers, format_point


class TestFormatNumber:
    """Tests for compact fixed-point formatting."""

    def test_trailing_zeros_removed(self) -> None:
        """Trailing zeros after the decimal point are dropped."""
        assert format_number(1.2) == "1.2"

    def test_integer_has_no_decimal_point(self) -> None:
        """A whole number is written without a decimal point."""
        assert format_number(10.0) == "10"

    def test_negative_zero_collapses(self) -> None:
        """A value rounding to negative zero becomes plain zero."""
        assert format_number(-0.00001) == "0"
        assert format_number(-0.0) == "0"

    def test_precision_rounds(self) -> None:
        """Values are rounded to the requested number of places."""
        assert format_number(1 / 3) == "0.3333"
        assert format_number(1 / 3, precision=2) == "0.33"

    def test_suffix_appended(self) -> None:
        """A unit suffix follows the trimmed number."""
        assert format_number(200.0, "pt") == "200pt"

    def test_negative_values_keep_sign(self) -> None:
        """Non-zero negative values keep their sign."""
        assert format_number(-2.5) == "-2.5"


SPREAD = [
    0.0,
    1.0,
    -1.0,
    1.2,
    2.00004,
    0.00005,
    -0.00005,
    0.99995,
    -0.99995,
    0.12345,
    -0.12355,
    199.99996,
    1 / 3,
    -2 / 3,
    1e-9,
    123456.78901,
    -98765.43215,
]


class TestFormatNumberProperties:
    """Formatting is stable and stays within half a unit of the last place."""

    @pytest.mark.parametrize("value", SPREAD)
    def test_idempotent(self, value: float) -> None:
        text = format_number(value)
        assert format_number(float(text)) == text

    @pytest.mark.parametrize("value", SPREAD)
    def test_lossless_to_precision(self, value: float) -> None:
        assert abs(float(format_number(value)) - value) <= 5e-5 + 1e-9


class TestFormatHelpers:
    """Tests for point and list helpers."""

    def test_format_point(self) -> None:
        """A point is two numbers separated by a space."""
        assert format_point(1.0, -2.50) == "1 -2.5"

    def test_format_numbers(self) -> None:
        """A list is space separated."""
        assert format_numbers([0.0, 1.25, 3.0]) == "0 1.25 3"
