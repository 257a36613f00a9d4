"""Rich text layout and flattening."""

from acorn2svg.text.flatten import flatten_text, line_bounds
from acorn2svg.text.layout import GlyphLayout, LayoutManager, SimpleLayoutManager

__all__ = [
    "GlyphLayout",
    "LayoutManager",
    "SimpleLayoutManager",
    "flatten_text",
    "line_bounds",
]
