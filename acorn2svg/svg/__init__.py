"""SVG output tree for acorn2svg.

This subpackage provides:
- An owned element tree with namespace-tagged names
- Compact number formatting
- Post-processing passes (group pruning, namespace prefixes)
- Serialization through ElementTree
"""

from acorn2svg.svg.numbers import format_number, format_numbers, format_point
from acorn2svg.svg.postprocess import (
    assign_namespace_prefixes,
    prune_redundant_groups,
)
from acorn2svg.svg.tree import SVG_NS, XLINK_NS, Attribute, Element, svg_element
from acorn2svg.svg.writer import serialize, to_etree

__all__ = [
    "SVG_NS",
    "XLINK_NS",
    "Attribute",
    "Element",
    "svg_element",
    "format_number",
    "format_numbers",
    "format_point",
    "assign_namespace_prefixes",
    "prune_redundant_groups",
    "serialize",
    "to_etree",
]
