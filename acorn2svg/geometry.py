"""Coordinate spaces and geometry value parsing.

Acorn measures Y upwards from the bottom edge of the document; SVG measures
it downwards from the top edge. A ``Frame`` holds the output-space origin of
the layer being rendered and maps source coordinates into it.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from acorn2svg.exceptions import MalformedInputError
from acorn2svg.model import Point, Rect, Size

_NUMBER_RE = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")


@dataclass(frozen=True)
class Frame:
    """Output-space frame of a layer.

    ``origin_y`` is the layer's top edge measured from the top of the
    document; source Y values are subtracted from it.
    """

    origin_x: float
    origin_y: float
    width: float = 0.0
    height: float = 0.0

    def translate_x(self, x: float) -> float:
        return self.origin_x + x

    def translate_y(self, y: float) -> float:
        return self.origin_y - y

    def translate(self, point: Point) -> Point:
        return Point(self.translate_x(point.x), self.translate_y(point.y))


def top_y(document_height: float, layer_frame: Rect) -> float:
    """Distance from the document's top edge to the layer's top edge."""
    return document_height - layer_frame.y - layer_frame.height


def layer_frame(document_height: float, frame: Rect) -> Frame:
    """Build the output frame for a layer whose source frame is ``frame``.

    Every layer is placed against the whole document; child layers do not
    compose with their parent's frame.
    """
    return Frame(frame.x, top_y(document_height, frame), frame.width, frame.height)


def _numbers(value: Any, count: int, what: str) -> list[float]:
    if isinstance(value, str):
        nums = [float(n) for n in _NUMBER_RE.findall(value)]
    elif isinstance(value, Sequence) and not isinstance(value, (bytes, bytearray)):
        try:
            nums = [float(v) for v in value]
        except (TypeError, ValueError) as e:
            raise MalformedInputError(f"Cannot parse {what}", {"value": value}) from e
    elif isinstance(value, dict) and what == "rect":
        try:
            nums = [float(value[k]) for k in ("x", "y", "width", "height")]
        except (KeyError, TypeError, ValueError) as e:
            raise MalformedInputError(f"Cannot parse {what}", {"value": value}) from e
    else:
        raise MalformedInputError(f"Cannot parse {what}", {"value": value})
    if len(nums) != count:
        raise MalformedInputError(
            f"Expected {count} numbers for {what}, found {len(nums)}", {"value": value}
        )
    return nums


def parse_rect(value: Any) -> Rect:
    """Parse ``{{x, y}, {w, h}}`` (or four numbers) into a ``Rect``."""
    return Rect(*_numbers(value, 4, "rect"))


def parse_size(value: Any) -> Size:
    """Parse ``{w, h}`` (or two numbers) into a ``Size``."""
    return Size(*_numbers(value, 2, "size"))


def parse_bool(value: Any) -> bool:
    """Interpret a stored boolean.

    Numbers use their truth value. Strings are ``"0"``/``"n..."`` for false
    and ``"1"``/``"y..."`` for true, case-insensitively.

    Raises:
        MalformedInputError: Anything else.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, bytes):
        value = value.decode("utf-8", "replace")
    if isinstance(value, str):
        s = value.strip().lower()
        if s == "0" or s.startswith("n"):
            return False
        if s == "1" or s.startswith("y"):
            return True
    raise MalformedInputError("Boolean value has unexpected form", {"value": value})


def bool_for_key(obj: dict[str, Any], key: str, default: bool = False) -> bool:
    value = obj.get(key)
    if value is None:
        return default
    return parse_bool(value)


def float_for_key(obj: dict[str, Any], key: str) -> float:
    """Read a required number.

    Raises:
        MalformedInputError: The key is missing or not numeric.
    """
    value = obj.get(key)
    if value is None:
        raise MalformedInputError(f"Missing key {key!r} (expected a number)")
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise MalformedInputError(f"Key {key!r} is not a number", {"value": value}) from e
