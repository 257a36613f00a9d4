"""Serialize a qualified output tree.

The tree is converted to ``xml.etree.ElementTree`` elements using the
already-qualified names, with namespace declarations written as plain
``xmlns`` attributes, so ElementTree never has to invent prefixes.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET

from acorn2svg.svg.tree import Element

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'


def to_etree(elem: Element) -> ET.Element:
    """Convert a qualified ``Element`` into an ElementTree element.

    Raises:
        ValueError: A name in the tree has not been qualified yet.
    """
    if elem.qname is None:
        raise ValueError(f"<{elem.tag}> has no qualified name; assign prefixes first")

    attrib: dict[str, str] = {}
    for prefix, uri in elem.namespaces.items():
        attrib["xmlns" if prefix == "" else f"xmlns:{prefix}"] = uri
    for attr in elem.attributes:
        if attr.qname is None:
            raise ValueError(f"attribute {attr.name!r} has no qualified name")
        attrib[attr.qname] = attr.value

    node = ET.Element(elem.qname, attrib)
    node.text = elem.text
    for child in elem.children:
        node.append(to_etree(child))
    return node


def serialize(elem: Element, pretty: bool = True) -> str:
    """Serialize a qualified tree to an XML document string."""
    root = to_etree(elem)
    if pretty:
        ET.indent(root)
    return XML_DECLARATION + ET.tostring(root, encoding="unicode") + "\n"
