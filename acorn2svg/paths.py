"""Re-encode vector paths as compact SVG path data.

Coordinates are flipped into the layer's output frame. Straight segments
pick the shortest of ``h``/``v``, absolute ``L`` and relative ``l``, and
operator letters are only repeated when the operator changes.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass

from acorn2svg.geometry import Frame
from acorn2svg.model import ClosePath, CurveTo, LineTo, MoveTo, PathOp, Point
from acorn2svg.svg.numbers import DEFAULT_PRECISION, format_number, format_point

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Subpath:
    """Ops of one subpath (without its ``ClosePath``) and whether it closes."""

    ops: tuple[PathOp, ...]
    closed: bool


def split_subpaths(ops: Sequence[PathOp]) -> Iterator[Subpath]:
    """Split a path at every moveto and closepath.

    A closepath ends a closed subpath and is not part of its ops; a moveto
    ends the open subpath before it. Empty subpaths are yielded too, so
    callers see exactly where each boundary fell.
    """
    first = 0
    for index, op in enumerate(ops):
        if isinstance(op, MoveTo):
            if index > first:
                yield Subpath(tuple(ops[first:index]), False)
            first = index
        elif isinstance(op, ClosePath):
            yield Subpath(tuple(ops[first:index]), True)
            first = index + 1
    if len(ops) > first:
        yield Subpath(tuple(ops[first:]), False)


def needs_operator(op: str, implicit: str) -> bool:
    """Whether ``op`` must be written given the operator currently in force."""
    return op != implicit


class _Encoder:
    def __init__(self, frame: Frame, precision: int) -> None:
        self.frame = frame
        self.precision = precision
        self.tokens: list[str] = []
        self.implicit = "L"

    def num(self, value: float) -> str:
        return format_number(value, precision=self.precision)

    def point(self, p: Point) -> str:
        return format_point(p.x, p.y, self.precision)

    def operator(self, op: str) -> None:
        if needs_operator(op, self.implicit):
            self.tokens.append(op)
            self.implicit = op

    def subpath(self, subpath: Subpath) -> None:
        ops = subpath.ops
        start = self.frame.translate(ops[0].point)
        self.tokens.extend(("M", self.point(start)))
        # a moveto's coordinates are followed by implicit linetos
        self.implicit = "L"
        prev = start

        last = len(ops) - 1
        for index, op in enumerate(ops[1:], start=1):
            if isinstance(op, LineTo):
                target = self.frame.translate(op.point)
                if subpath.closed and index > 1 and index == last and target == start:
                    continue
                self.line(prev, target)
                prev = target
            elif isinstance(op, CurveTo):
                self.operator("C")
                for p in (op.control1, op.control2, op.point):
                    self.tokens.append(self.point(self.frame.translate(p)))
                prev = self.frame.translate(op.point)

        if subpath.closed:
            self.tokens.append("Z")

    def line(self, prev: Point, target: Point) -> None:
        # in relative mode h/v save nothing and may force a switch back
        relative = self.implicit == "l"
        if not relative and target.x == prev.x:
            self.operator("v")
            self.tokens.append(self.num(target.y - prev.y))
        elif not relative and target.y == prev.y:
            self.operator("h")
            self.tokens.append(self.num(target.x - prev.x))
        else:
            absolute = self.point(target)
            rel = self.point(Point(target.x - prev.x, target.y - prev.y))
            if len(absolute) <= len(rel):
                self.operator("L")
                self.tokens.append(absolute)
            else:
                self.operator("l")
                self.tokens.append(rel)


def encode_path(
    ops: Sequence[PathOp],
    frame: Frame,
    precision: int = DEFAULT_PRECISION,
    warn: Callable[[str], None] | None = None,
) -> str:
    """Encode ``ops`` as the value of a ``d`` attribute.

    Args:
        ops: Path operations in source (y-up) coordinates.
        frame: Output frame the coordinates are flipped into.
        precision: Decimal places for coordinates.
        warn: Called with a message for subpaths that cannot be encoded;
            defaults to logging a warning.

    Returns:
        Space-separated path data, empty when nothing is drawable.
    """
    encoder = _Encoder(frame, precision)
    position = 0
    for subpath in split_subpaths(ops):
        first = position
        position += len(subpath.ops) + (1 if subpath.closed else 0)
        if not subpath.ops:
            continue
        if not isinstance(subpath.ops[0], MoveTo):
            message = f"Path subpath at index {first} starts without a moveto, skipping it"
            if warn is not None:
                warn(message)
            else:
                logger.warning("%s", message)
            continue
        # an isolated moveto draws nothing
        if len(subpath.ops) < 2:
            continue
        encoder.subpath(subpath)
    return " ".join(encoder.tokens)
