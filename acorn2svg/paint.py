"""Paint and stroke style translation."""

from __future__ import annotations

import math
from collections.abc import Callable
from typing import Any

from acorn2svg.exceptions import MalformedInputError
from acorn2svg.model import Color, Fill, Stroke
from acorn2svg.svg.numbers import format_number
from acorn2svg.svg.tree import Element

# Minimum stroke width that is still drawn
MIN_STROKE_WIDTH = 1e-8

LINE_JOINS = {0: "miter", 1: "round", 2: "bevel"}


def _channel(component: float) -> int:
    return min(255, int(math.floor(256 * component)))


def color_name(color: Color) -> str:
    """SVG paint for an sRGB color, ignoring alpha."""
    if color.red == 0 and color.green == 0 and color.blue == 0:
        return "black"
    if color.red == 1 and color.green == 1 and color.blue == 1:
        return "white"
    return "#{:02X}{:02X}{:02X}".format(_channel(color.red), _channel(color.green), _channel(color.blue))


def apply_paint(
    elem: Element,
    attr: str,
    opacity_attr: str,
    color: Color,
    fmt: Callable[[float], str] = format_number,
) -> None:
    """Set a paint attribute and its companion opacity attribute."""
    elem.set(attr, color_name(color))
    elem.set(opacity_attr, fmt(color.alpha))


def parse_line_join(value: Any) -> int | None:
    """Read a stored line-join style.

    Accepts an integer or a one-character string. ``None`` means the key is
    absent.

    Raises:
        MalformedInputError: Unknown join type.
    """
    if value is None:
        return None
    join: int | None = None
    if isinstance(value, bool):
        join = None
    elif isinstance(value, (int, float)):
        join = int(value)
    elif isinstance(value, str) and len(value) == 1 and value.isdigit():
        join = int(value)
    if join not in LINE_JOINS:
        raise MalformedInputError("Unknown line join type", {"value": value})
    return join


def apply_line_join(elem: Element, join: int | None, attr: str = "stroke-linejoin") -> None:
    if join is None:
        return
    try:
        elem.set(attr, LINE_JOINS[join])
    except KeyError as e:
        raise MalformedInputError("Unknown line join type", {"value": join}) from e


def apply_fill_stroke(
    elem: Element,
    fill: Fill | None,
    stroke: Stroke | None,
    fmt: Callable[[float], str] = format_number,
) -> None:
    """Write fill and stroke properties.

    A disabled fill or stroke becomes ``none``. An enabled paint whose color
    could not be decoded leaves the paint attribute unset.
    """
    if fill is not None:
        if fill.color is not None:
            apply_paint(elem, "fill", "fill-opacity", fill.color, fmt)
    else:
        elem.set("fill", "none")

    if stroke is not None and stroke.width > MIN_STROKE_WIDTH:
        elem.set("stroke-width", fmt(stroke.width))
        if stroke.color is not None:
            apply_paint(elem, "stroke", "stroke-opacity", stroke.color, fmt)
        apply_line_join(elem, stroke.line_join)
    else:
        elem.set("stroke", "none")
