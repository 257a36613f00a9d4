"""Owned output tree with namespace-tagged names.

Elements and attributes are created with a namespace URI and a local name
only. Prefixes are assigned afterwards by
``acorn2svg.svg.postprocess.assign_namespace_prefixes``, which fills in the
``qname`` fields the writer serializes.
"""

from __future__ import annotations

from dataclasses import dataclass, field

SVG_NS = "http://www.w3.org/2000/svg"
XLINK_NS = "http://www.w3.org/1999/xlink"


@dataclass
class Attribute:
    name: str
    value: str
    namespace: str | None = None
    qname: str | None = None


@dataclass
class Element:
    """An output element.

    Attributes:
        tag: Local element name.
        namespace: Namespace URI of the element (``None`` is an error at
            qualification time).
        attributes: Attributes in insertion order.
        children: Child elements in document order.
        text: Character content (only used by text spans).
        namespaces: Declarations made on this element, prefix -> URI; the
            empty prefix declares the default namespace.
        qname: Qualified name, set by prefix assignment.
    """

    tag: str
    namespace: str | None = SVG_NS
    attributes: list[Attribute] = field(default_factory=list)
    children: list[Element] = field(default_factory=list)
    text: str | None = None
    namespaces: dict[str, str] = field(default_factory=dict)
    qname: str | None = None

    def set(self, name: str, value: str, namespace: str | None = None) -> None:
        """Set an attribute, replacing an existing one with the same name."""
        for attr in self.attributes:
            if attr.name == name and attr.namespace == namespace:
                attr.value = value
                attr.qname = None
                return
        self.attributes.append(Attribute(name, value, namespace))

    def get(self, name: str, namespace: str | None = None, default: str | None = None) -> str | None:
        for attr in self.attributes:
            if attr.name == name and attr.namespace == namespace:
                return attr.value
        return default

    def append(self, child: Element) -> Element:
        self.children.append(child)
        return child

    def insert(self, index: int, child: Element) -> Element:
        self.children.insert(index, child)
        return child

    def declare(self, prefix: str, uri: str) -> None:
        self.namespaces[prefix] = uri

    def is_svg(self, tag: str) -> bool:
        return self.namespace == SVG_NS and self.tag == tag


def svg_element(tag: str, **attributes: str) -> Element:
    """Create an SVG-namespace element; ``_`` in keyword names becomes ``-``."""
    elem = Element(tag)
    for name, value in attributes.items():
        elem.set(name.replace("_", "-"), value)
    return elem
