"""Font handling for acorn2svg.

This subpackage provides:
- Font descriptor to SVG font property mapping, cached per font name
- ``<font-face>`` definitions for the fonts in use
- Font metrics extraction with fontTools
"""

from acorn2svg.fonts.attributes import (
    FontCache,
    compute_font_attributes,
    font_face_element,
    font_family,
    font_stretch,
    font_style,
    font_weight,
    is_css_identifier,
    quote_css_string,
)
from acorn2svg.fonts.metrics import load_metrics, metrics_from_ttfont

__all__ = [
    "FontCache",
    "compute_font_attributes",
    "font_face_element",
    "font_family",
    "font_stretch",
    "font_style",
    "font_weight",
    "is_css_identifier",
    "quote_css_string",
    "load_metrics",
    "metrics_from_ttfont",
]
