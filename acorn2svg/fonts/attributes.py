"""Map fonts to SVG font properties.

The AppKit font system identifies a font by its PostScript name and point
size. Everything except the size maps to the same SVG properties, so the
derived attributes are cached by name and ``font-size`` is written per span.
"""

from __future__ import annotations

import logging
import re
import unicodedata
from collections.abc import Callable

from acorn2svg.model import FontAttributes, FontDescriptor, FontTraits
from acorn2svg.svg.numbers import format_number
from acorn2svg.svg.tree import Element

logger = logging.getLogger(__name__)

# CSS 2.1 identifier, with escapes left out
_CSS_IDENT_RE = re.compile(r"-?[_a-zA-Z\u0080-\U0010FFFF][_a-zA-Z0-9\-\u0080-\U0010FFFF]*")

_CSS_KEYWORDS = frozenset(
    {
        "serif",
        "sans-serif",
        "cursive",
        "fantasy",
        "monospace",
        "inherit",
        "initial",
        "default",
    }
)


def is_css_identifier(name: str) -> bool:
    """True when ``name`` can be written as an unquoted font family."""
    return bool(_CSS_IDENT_RE.fullmatch(name)) and name.lower() not in _CSS_KEYWORDS


def quote_css_string(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace("'", "\\'").replace("\n", "\\A ")
    return f"'{escaped}'"


def font_style(font: FontDescriptor) -> str | None:
    """``italic``/``oblique`` for slanted fonts, else ``None``.

    AppKit has a single italic trait; the PostScript name decides whether the
    slant is oblique. SVG font matching prefers ``italic`` when unsure.
    """
    if not font.traits & FontTraits.ITALIC:
        return None
    name = font.name.lower()
    italic = name.rfind("italic")
    oblique = name.rfind("oblique")
    if oblique >= 0 and (italic < 0 or italic < oblique):
        return "oblique"
    return "italic"


def font_weight(font: FontDescriptor) -> str:
    """Map an AppKit weight (0..15, 5 regular) to a CSS font-weight."""
    weight = font.weight
    if font.traits & FontTraits.BOLD or weight > 5:
        if weight == 7 or weight <= 4:
            return "bold"
        return str(100 * weight)
    if weight < 5:
        if weight in (4, 3):
            return "300"
        if weight in (2, 1):
            return "200"
        return "100"
    return "normal"


def font_stretch(font: FontDescriptor) -> str | None:
    if font.traits & FontTraits.EXPANDED:
        return "expanded"
    if font.traits & FontTraits.CONDENSED:
        return "condensed"
    return None


def font_family(font: FontDescriptor) -> str:
    """CSS font-family list: the family plus generic fallbacks."""
    family = unicodedata.normalize("NFC", font.family)
    if not is_css_identifier(family):
        family = quote_css_string(family)

    if font.fixed_pitch:
        family += ", monospace"

    generic = None
    if font.family_class.value == "sans-serif":
        generic = "sans-serif"
    elif font.family_class.value == "scripts":
        generic = "cursive"
    elif font.family_class.value == "ornamentals":
        generic = "fantasy"
    elif font.family_class.is_serif:
        generic = "serif"
    if generic:
        family += f", {generic}"
    return family


def compute_font_attributes(font: FontDescriptor) -> FontAttributes:
    return FontAttributes(
        style=font_style(font),
        weight=font_weight(font),
        stretch=font_stretch(font),
        family=font_family(font),
    )


class FontCache:
    """Font attributes computed once per font name, in first-use order."""

    def __init__(self) -> None:
        self._attributes: dict[str, FontAttributes] = {}
        self._fonts: dict[str, FontDescriptor] = {}

    def __len__(self) -> int:
        return len(self._attributes)

    def __contains__(self, name: str) -> bool:
        return name in self._attributes

    def attributes_for(self, font: FontDescriptor) -> FontAttributes:
        attrs = self._attributes.get(font.name)
        if attrs is None:
            attrs = compute_font_attributes(font)
            self._attributes[font.name] = attrs
            self._fonts[font.name] = font
            logger.debug("Font %s -> %s", font.name, attrs)
        return attrs

    def apply(self, elem: Element, font: FontDescriptor, fmt: Callable[[float], str] = format_number) -> None:
        """Set ``font-size`` and the cached font properties on ``elem``."""
        elem.set("font-size", fmt(font.size))
        for name, value in self.attributes_for(font).items():
            elem.set(name, value)

    def items(self):
        return [(name, self._fonts[name], attrs) for name, attrs in self._attributes.items()]

    def font_faces(self, fmt: Callable[[float], str] = format_number) -> list[Element]:
        """One ``<font-face>`` per cached font."""
        return [font_face_element(font, attrs, fmt) for _, font, attrs in self.items()]


def font_face_element(
    font: FontDescriptor,
    attrs: FontAttributes,
    fmt: Callable[[float], str] = format_number,
) -> Element:
    """Describe a font for SVG font matching.

    The face takes the style, weight and stretch of the spans that use it;
    its ``font-family`` is the bare family name rather than the fallback
    list. Metric attributes are in font units and only written when the
    font's metrics are known.
    """
    face = Element("font-face")
    for name, value in attrs.items():
        if name != "font-family":
            face.set(name, value)
    face.set("font-family", font.family)

    sources = face.append(Element("font-face-src"))
    local = sources.append(Element("font-face-name"))
    local.set("name", font.name)

    metrics = font.metrics
    if metrics is None:
        return face

    # SVG's units-per-em defaults to 1000
    if metrics.units_per_em != 1000:
        face.set("units-per-em", str(metrics.units_per_em))
    face.set("ascent", fmt(metrics.ascent))
    face.set("descent", fmt(metrics.descent))
    face.set("cap-height", fmt(metrics.cap_height))
    face.set("x-height", fmt(metrics.x_height))
    face.set("slope", fmt(metrics.italic_angle))
    face.set("underline-position", fmt(metrics.underline_position))
    face.set("underline-thickness", fmt(metrics.underline_thickness))
    return face
