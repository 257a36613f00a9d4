"""Flatten laid-out rich text into positioned spans.

Font changes need a new ``<tspan>``, and each line fragment gets its own
span so that a line's y position is written once instead of per character.
"""

from __future__ import annotations

import logging
import math

from acorn2svg.model import RichText, TextSpan
from acorn2svg.text.layout import LINE_TERMINATORS, GlyphLayout

logger = logging.getLogger(__name__)


def line_bounds(string: str, chars: range) -> tuple[int, int]:
    """End and contents end of the line holding the last character of ``chars``.

    The end includes the line terminator (``\\r\\n`` counts as one); the
    contents end excludes it.
    """
    n = len(string)
    index = max(chars.start, chars.stop - 1)
    if index >= n:
        return n, n
    if string[index] == "\n" and index > 0 and string[index - 1] == "\r":
        return index + 1, index - 1

    i = index
    while i < n and string[i] not in LINE_TERMINATORS:
        i += 1
    contents_end = i
    if i >= n:
        return n, contents_end
    if string[i : i + 2] == "\r\n":
        return i + 2, contents_end
    return i + 1, contents_end


def flatten_text(text: RichText, layout: GlyphLayout, text_length: bool = True) -> list[TextSpan]:
    """Split ``text`` into one span per (run x line fragment).

    Args:
        text: The attributed string.
        layout: Its glyph layout.
        text_length: Compute ``textLength`` hints for simply spaced spans.

    Returns:
        Spans in document order, positioned relative to the text container's
        top-left corner.
    """
    spans: list[TextSpan] = []
    string = text.string

    for run in text.runs:
        wanted = layout.glyph_range_for_chars(run.start, run.stop)
        next_glyph = wanted.start
        while next_glyph < wanted.stop:
            fragment = layout.fragment_for_glyph(next_glyph)
            start = max(fragment.glyphs.start, next_glyph)
            stop = min(fragment.glyphs.stop, wanted.stop)
            if stop <= next_glyph:
                next_glyph += 1
                continue

            glyphs = range(start, stop)
            chars = layout.char_range_for_glyphs(glyphs)
            next_glyph = stop
            if not chars:
                continue

            line_end, contents_end = line_bounds(string, chars)
            trimmed = contents_end < chars.stop <= line_end
            # the terminator's own position does not matter
            positioned_end = layout.glyph_for_char(line_end - 1) if trimmed else stop

            origin = fragment.rect
            span = TextSpan(string[chars.start : chars.stop], run.font, run.color, [], [])
            nominal = layout.nominal_range_containing(start)
            if nominal.stop < positioned_end:
                for c in chars:
                    loc = layout.location(layout.glyph_for_char(c))
                    span.x.append(loc.x + origin.x)
                    span.y.append(loc.y + origin.y)
            else:
                first = layout.location(start)
                span.x.append(first.x + origin.x)
                span.y.append(first.y + origin.y)
                if text_length and not trimmed and run.font is not None and len(chars) > 1:
                    last_glyph = layout.glyph_for_char(chars.stop - 1)
                    last = layout.location(last_glyph)
                    span.text_length = math.hypot(
                        last.x + layout.advance(last_glyph) - first.x,
                        last.y - first.y,
                    )
            spans.append(span)

    logger.debug("Flattened %d runs into %d spans", len(text.runs), len(spans))
    return spans
