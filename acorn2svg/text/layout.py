"""Text layout collaborators.

The flattener needs to know where each glyph of a text area ends up: the
line fragments, the glyph location inside its fragment, nominal advances,
and which glyph ranges are nominally spaced. ``LayoutManager`` is the seam
for a real text system; ``SimpleLayoutManager`` approximates one with a
single glyph per character and greedy word wrapping.
"""

from __future__ import annotations

import bisect
import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from acorn2svg.model import FontDescriptor, LineFragment, Point, Rect, RichText, Size

logger = logging.getLogger(__name__)

LINE_TERMINATORS = "\n\r\x85\u2028\u2029"

DEFAULT_FONT_SIZE = 12.0
LINE_HEIGHT_FACTOR = 1.2
# Fallbacks when a font has no metrics, as fractions of the point size
ESTIMATED_ASCENT = 0.8
ESTIMATED_ADVANCE = 0.6

_WORD_RE = re.compile(r"\S+[^\S\n\r\x85\u2028\u2029]*|[^\S\n\r\x85\u2028\u2029]+|[\n\r\x85\u2028\u2029]+")


@dataclass
class GlyphLayout:
    """Result of laying out a rich text.

    Attributes:
        fragments: Line fragments in order; their glyph ranges are
            contiguous.
        char_glyphs: Glyph index of each character.
        glyph_chars: First character index of each glyph.
        locations: Glyph origin relative to its fragment's origin, y down to
            the baseline.
        advances: Nominal advance width of each glyph.
        nominal_ranges: Glyph ranges laid out at nominal advances.
    """

    fragments: list[LineFragment] = field(default_factory=list)
    char_glyphs: list[int] = field(default_factory=list)
    glyph_chars: list[int] = field(default_factory=list)
    locations: list[Point] = field(default_factory=list)
    advances: list[float] = field(default_factory=list)
    nominal_ranges: list[range] = field(default_factory=list)

    def glyph_for_char(self, index: int) -> int:
        return self.char_glyphs[index]

    def glyph_range_for_chars(self, start: int, stop: int) -> range:
        if stop <= start:
            return range(0)
        return range(self.char_glyphs[start], self.char_glyphs[stop - 1] + 1)

    def char_range_for_glyphs(self, glyphs: range) -> range:
        if not glyphs:
            return range(0)
        start = self.glyph_chars[glyphs.start]
        if glyphs.stop < len(self.glyph_chars):
            stop = self.glyph_chars[glyphs.stop]
        else:
            stop = len(self.char_glyphs)
        return range(start, stop)

    def fragment_for_glyph(self, glyph: int) -> LineFragment:
        starts = [f.glyphs.start for f in self.fragments]
        i = bisect.bisect_right(starts, glyph) - 1
        if i < 0 or glyph >= self.fragments[i].glyphs.stop:
            raise IndexError(f"glyph {glyph} is not in any line fragment")
        return self.fragments[i]

    def location(self, glyph: int) -> Point:
        return self.locations[glyph]

    def advance(self, glyph: int) -> float:
        return self.advances[glyph]

    def nominal_range_containing(self, glyph: int) -> range:
        for glyphs in self.nominal_ranges:
            if glyph in glyphs:
                return glyphs
        return range(glyph, glyph)


class LayoutManager(ABC):
    """Lays out rich text inside a container of a given size."""

    @abstractmethod
    def layout(self, text: RichText, container: Size) -> GlyphLayout:
        """Return the glyph layout of ``text`` in ``container``."""


def font_size(font: FontDescriptor | None) -> float:
    return font.size if font is not None else DEFAULT_FONT_SIZE


def nominal_advance(font: FontDescriptor | None, char: str) -> float:
    """Advance width of ``char`` in points."""
    if char in LINE_TERMINATORS:
        return 0.0
    size = font_size(font)
    if font is not None and font.metrics is not None:
        metrics = font.metrics
        return metrics.advance_for(char) * size / metrics.units_per_em
    return ESTIMATED_ADVANCE * size


def ascent(font: FontDescriptor | None) -> float:
    size = font_size(font)
    if font is not None and font.metrics is not None:
        return font.metrics.ascent * size / font.metrics.units_per_em
    return ESTIMATED_ASCENT * size


class SimpleLayoutManager(LayoutManager):
    """Greedy word-wrapping layout on nominal advances.

    Each character is one glyph. Lines break after hard line terminators and
    before a word that would overflow the container width; a word wider
    than the container is never split. Every line is nominally spaced.
    """

    def layout(self, text: RichText, container: Size) -> GlyphLayout:
        string = text.string
        fonts = self._fonts_by_char(text)
        advances = [nominal_advance(fonts[i], c) for i, c in enumerate(string)]

        lines = self._break_lines(string, advances, container.width)

        result = GlyphLayout(
            char_glyphs=list(range(len(string))),
            glyph_chars=list(range(len(string))),
            advances=advances,
        )
        locations: list[Point] = [Point(0.0, 0.0)] * len(string)
        top = 0.0
        for start, stop in lines:
            line_fonts = [fonts[i] for i in range(start, stop)]
            height = LINE_HEIGHT_FACTOR * max(font_size(f) for f in line_fonts)
            baseline = max(ascent(f) for f in line_fonts)
            x = 0.0
            for i in range(start, stop):
                locations[i] = Point(x, baseline)
                x += advances[i]
            glyphs = range(start, stop)
            result.fragments.append(LineFragment(Rect(0.0, top, container.width, height), glyphs))
            result.nominal_ranges.append(glyphs)
            top += height
        result.locations = locations
        logger.debug("Laid out %d characters in %d lines", len(string), len(lines))
        return result

    def _fonts_by_char(self, text: RichText) -> list[FontDescriptor | None]:
        fonts: list[FontDescriptor | None] = [None] * len(text.string)
        for run in text.runs:
            for i in range(run.start, run.stop):
                fonts[i] = run.font
        return fonts

    def _break_lines(self, string: str, advances: list[float], width: float) -> list[tuple[int, int]]:
        lines: list[tuple[int, int]] = []
        line_start = 0
        line_width = 0.0
        for match in _WORD_RE.finditer(string):
            start, stop = match.span()
            token = match.group()
            if token[0] in LINE_TERMINATORS:
                # each terminator ends a line; \r\n counts as one
                i = start
                while i < stop:
                    end = i + 2 if string[i : i + 2] == "\r\n" else i + 1
                    lines.append((line_start, end))
                    line_start = end
                    i = end
                line_width = 0.0
                continue

            word = token.rstrip()
            word_width = sum(advances[start : start + len(word)])
            if width > 0 and start > line_start and line_width + word_width > width:
                lines.append((line_start, start))
                line_start = start
                line_width = 0.0
            line_width += sum(advances[start:stop])
        if line_start < len(string):
            lines.append((line_start, len(string)))
        return lines
