"""Decode shape-layer property-list values into model objects.

Acorn stores colors, bezier paths and rich text as archived Cocoa objects
inside the shape-layer property list. ``ValueDecoder`` accepts the plain
representations a property list can carry natively:

- colors: ``[r, g, b]``/``[r, g, b, a]``, ``{"red": .., "green": .., ...}``,
  ``{"white": w, "alpha": a}``, ``"#RRGGBB[AA]"`` or ``"r g b [a]"``
- paths: a list of ``["moveto", x, y]``, ``["lineto", x, y]``,
  ``["curveto", x1, y1, x2, y2, x, y]``, ``["closepath"]`` (``M``/``L``/``C``/
  ``Z`` are accepted too)
- rich text: ``{"string": "...", "runs": [{"length": n, "font": {...},
  "color": ...}, ...]}``
- fonts: ``{"name": "Helvetica-Bold", "family": "Helvetica", "size": 12,
  "weight": 9, "traits": ["bold"], "class": "sans-serif",
  "fixed_pitch": false, "file": "/path/to/font.ttf"}``

Archived object data (``bytes``) is reported with ``DecodeError``;
subclass ``ValueDecoder`` to plug in a decoder for it.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from acorn2svg.exceptions import DecodeError
from acorn2svg.fonts.metrics import load_metrics
from acorn2svg.model import (
    ClosePath,
    Color,
    CurveTo,
    FontClass,
    FontDescriptor,
    FontTraits,
    LineTo,
    MoveTo,
    PathOp,
    Point,
    RichText,
    TextRun,
)

logger = logging.getLogger(__name__)

_PATH_OPS = {
    "moveto": (MoveTo, 2),
    "m": (MoveTo, 2),
    "lineto": (LineTo, 2),
    "l": (LineTo, 2),
    "curveto": (CurveTo, 6),
    "c": (CurveTo, 6),
    "closepath": (ClosePath, 0),
    "z": (ClosePath, 0),
}

_TRAITS = {
    "italic": FontTraits.ITALIC,
    "bold": FontTraits.BOLD,
    "expanded": FontTraits.EXPANDED,
    "condensed": FontTraits.CONDENSED,
}


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


def _flatten(values):
    """Yield scalars from arbitrarily nested point lists."""
    for v in values:
        if _is_sequence(v):
            yield from _flatten(v)
        else:
            yield v


class ValueDecoder:
    """Turns property-list values into colors, paths, rich text and fonts."""

    def color(self, value: Any) -> Color:
        if isinstance(value, Color):
            return value
        if isinstance(value, (bytes, bytearray)):
            raise DecodeError("color", value, "archived color data is not supported")

        if isinstance(value, str):
            components = self._color_from_string(value)
        elif isinstance(value, Mapping):
            components = self._color_from_mapping(value)
        elif _is_sequence(value):
            components = list(value)
        else:
            raise DecodeError("color", value)

        try:
            comps = [float(c) for c in components]
        except (TypeError, ValueError) as e:
            raise DecodeError("color", value, "non-numeric component") from e
        if len(comps) == 3:
            comps.append(1.0)
        if len(comps) != 4:
            raise DecodeError("color", value, f"expected 3 or 4 components, got {len(comps)}")
        if any(c < 0.0 or c > 1.0 for c in comps):
            raise DecodeError("color", value, "component outside [0, 1]")
        return Color(*comps)

    def _color_from_string(self, value: str) -> list[float]:
        s = value.strip()
        if s.startswith("#"):
            hexdigits = s[1:]
            if len(hexdigits) not in (6, 8):
                raise DecodeError("color", value, "expected #RRGGBB or #RRGGBBAA")
            try:
                return [int(hexdigits[i : i + 2], 16) / 255.0 for i in range(0, len(hexdigits), 2)]
            except ValueError as e:
                raise DecodeError("color", value, "bad hex digits") from e
        return s.replace(",", " ").split()

    def _color_from_mapping(self, value: Mapping) -> list[Any]:
        if "white" in value:
            w = value["white"]
            return [w, w, w, value.get("alpha", 1.0)]
        keys = ("red", "green", "blue") if "red" in value else ("r", "g", "b")
        try:
            rgb = [value[k] for k in keys]
        except KeyError as e:
            raise DecodeError("color", value, f"missing component {e}") from e
        return [*rgb, value.get("alpha", value.get("a", 1.0))]

    def path(self, value: Any) -> list[PathOp]:
        if isinstance(value, (bytes, bytearray)):
            raise DecodeError("path", value, "archived bezier path data is not supported")
        if not _is_sequence(value):
            raise DecodeError("path", value)
        return [self._path_op(op) for op in value]

    def _path_op(self, op: Any) -> PathOp:
        if isinstance(op, (MoveTo, LineTo, CurveTo, ClosePath)):
            return op
        if not _is_sequence(op) or not op or not isinstance(op[0], str):
            raise DecodeError("path element", op)
        try:
            cls, arity = _PATH_OPS[op[0].lower()]
        except KeyError as e:
            raise DecodeError("path element", op, f"unknown operator {op[0]!r}") from e
        args = list(_flatten(op[1:]))
        if len(args) != arity:
            raise DecodeError("path element", op, f"{op[0]} takes {arity} numbers")
        try:
            nums = [float(n) for n in args]
        except (TypeError, ValueError) as e:
            raise DecodeError("path element", op, "non-numeric coordinate") from e
        points = [Point(nums[i], nums[i + 1]) for i in range(0, arity, 2)]
        return cls(*points)

    def rich_text(self, value: Any) -> RichText:
        if isinstance(value, RichText):
            return value
        if isinstance(value, (bytes, bytearray)):
            raise DecodeError("rich text", value, "RTFD data is not supported")
        if isinstance(value, str):
            return RichText(value, (TextRun(0, len(value)),) if value else ())
        if not isinstance(value, Mapping) or not isinstance(value.get("string"), str):
            raise DecodeError("rich text", value, "expected a mapping with a 'string'")

        string = value["string"]
        runs = []
        position = 0
        for entry in value.get("runs") or [{"length": len(string)}]:
            if not isinstance(entry, Mapping):
                raise DecodeError("text run", entry)
            try:
                start = int(entry.get("start", position))
                length = int(entry.get("length", len(string) - start))
            except (TypeError, ValueError) as e:
                raise DecodeError("text run", entry, "non-numeric range") from e
            if start < 0 or length < 0 or start + length > len(string):
                raise DecodeError("text run", entry, "range outside the string")
            font = self.font(entry["font"]) if entry.get("font") is not None else None
            color = self.color(entry["color"]) if entry.get("color") is not None else None
            runs.append(TextRun(start, length, font, color))
            position = start + length
        return RichText(string, tuple(runs))

    def font(self, value: Any) -> FontDescriptor:
        if isinstance(value, FontDescriptor):
            return value
        if not isinstance(value, Mapping) or not value.get("name"):
            raise DecodeError("font", value, "expected a mapping with a 'name'")

        name = str(value["name"])
        traits = value.get("traits") or []
        if isinstance(traits, str):
            traits = traits.replace(",", " ").split()
        flags = FontTraits.NONE
        for trait in traits:
            try:
                flags |= _TRAITS[str(trait).lower()]
            except KeyError:
                logger.debug("Ignoring unknown font trait %r on %s", trait, name)

        family_class = FontClass.UNKNOWN
        if value.get("class"):
            try:
                family_class = FontClass(str(value["class"]).lower())
            except ValueError:
                logger.debug("Unknown font class %r on %s", value["class"], name)

        metrics = None
        if value.get("file"):
            try:
                font_number = int(value.get("font_number", 0))
            except (TypeError, ValueError) as e:
                raise DecodeError("font", value, "non-numeric font_number") from e
            metrics = load_metrics(Path(value["file"]), font_number)

        try:
            return FontDescriptor(
                name=name,
                family=str(value.get("family") or name.split("-")[0]),
                size=float(value.get("size", 12.0)),
                weight=int(value.get("weight", 5)),
                traits=flags,
                family_class=family_class,
                fixed_pitch=bool(value.get("fixed_pitch", False)),
                metrics=metrics,
            )
        except (TypeError, ValueError) as e:
            raise DecodeError("font", value, str(e)) from e
