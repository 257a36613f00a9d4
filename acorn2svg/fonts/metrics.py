#!/usr/bin/env python3
"""
Font metrics extraction.

Reads the font-wide values needed for ``<font-face>`` definitions and the
nominal advances used by the simple layout manager from a font file with
fontTools.
"""

from __future__ import annotations

import logging
from pathlib import Path

from fontTools.ttLib import TTFont, TTLibError

from acorn2svg.model import FontMetrics

logger = logging.getLogger(__name__)


def metrics_from_ttfont(ttfont: TTFont) -> FontMetrics:
    """Collect metrics from an opened font, in font units."""
    upem = ttfont["head"].unitsPerEm

    ascent = upem * 0.8
    descent = -upem * 0.2
    if "hhea" in ttfont:
        hhea = ttfont["hhea"]
        ascent = hhea.ascent
        descent = hhea.descent

    cap_height = upem * 0.7
    x_height = upem * 0.5
    default_advance = upem * 0.6
    if "OS/2" in ttfont:
        os2 = ttfont["OS/2"]
        if os2.version >= 2:
            cap_height = os2.sCapHeight or cap_height
            x_height = os2.sxHeight or x_height
        default_advance = os2.xAvgCharWidth or default_advance

    italic_angle = 0.0
    underline_position = -upem * 0.1
    underline_thickness = upem * 0.05
    if "post" in ttfont:
        post = ttfont["post"]
        italic_angle = post.italicAngle
        underline_position = post.underlinePosition
        underline_thickness = post.underlineThickness

    advances: dict[str, float] = {}
    cmap = ttfont.getBestCmap() or {}
    if "hmtx" in ttfont:
        hmtx = ttfont["hmtx"].metrics
        for codepoint, glyph_name in cmap.items():
            if glyph_name in hmtx:
                advances[chr(codepoint)] = hmtx[glyph_name][0]

    return FontMetrics(
        units_per_em=upem,
        ascent=ascent,
        descent=descent,
        cap_height=cap_height,
        x_height=x_height,
        italic_angle=italic_angle,
        underline_position=underline_position,
        underline_thickness=underline_thickness,
        default_advance=default_advance,
        advances=advances,
    )


def load_metrics(path: Path, font_number: int = 0) -> FontMetrics | None:
    """Read metrics from a font file.

    Returns ``None`` (after logging a warning) when the file cannot be read
    as a font; text then falls back to estimated metrics.
    """
    try:
        with TTFont(path, fontNumber=font_number, lazy=True) as ttfont:
            return metrics_from_ttfont(ttfont)
    except (OSError, TTLibError, KeyError) as e:
        logger.warning("Cannot read font metrics from %s: %s", path, e)
        return None
