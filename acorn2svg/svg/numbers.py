"""Compact number formatting for SVG attribute values."""

from __future__ import annotations

DEFAULT_PRECISION = 4


def format_number(
    value: float,
    suffix: str | None = None,
    precision: int = DEFAULT_PRECISION,
) -> str:
    """Render a number with fixed precision, then drop redundant digits.

    Trailing zeros and a bare trailing decimal point are removed, and a
    negative zero collapses to ``0``.

    Args:
        value: Number to format.
        suffix: Optional unit appended to the result (e.g. ``"pt"``).
        precision: Number of decimal places rendered before trimming.

    Returns:
        The shortest fixed-point rendering, e.g. ``1.2`` for ``1.2000``.
    """
    text = f"{value:.{precision}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text == "-0":
        text = "0"
    if suffix:
        text += suffix
    return text


def format_point(x: float, y: float, precision: int = DEFAULT_PRECISION) -> str:
    return f"{format_number(x, precision=precision)} {format_number(y, precision=precision)}"


def format_numbers(values, precision: int = DEFAULT_PRECISION) -> str:
    """Space-separated list of formatted numbers."""
    return " ".join(format_number(v, precision=precision) for v in values)
