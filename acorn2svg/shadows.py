"""Drop-shadow filter synthesis.

Shadows with the same color and blur radius share one ``<filter>``. A shape
that casts a shadow gets an id and a ``<use>`` that re-renders it through
the filter, placed immediately before the shape so the shadow sits under
it.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from acorn2svg.model import BLACK, Color, Shadow, ShadowDescriptor
from acorn2svg.paint import apply_paint
from acorn2svg.svg.numbers import format_number
from acorn2svg.svg.tree import XLINK_NS, Element, svg_element

if TYPE_CHECKING:
    from acorn2svg.context import GenerationContext

logger = logging.getLogger(__name__)

# Shadows fainter than this are not drawn
MIN_SHADOW_ALPHA = 1e-5


class ShadowCache:
    """Assigns ``shadowN`` names to distinct shadow descriptors.

    Blur radii are compared after formatting, so radii that render the same
    share a filter.
    """

    def __init__(self, fmt: Callable[[float], str] = format_number) -> None:
        self._fmt = fmt
        self._names: dict[tuple[Color, str], str] = {}

    def __len__(self) -> int:
        return len(self._names)

    def _key(self, descriptor: ShadowDescriptor) -> tuple[Color, str]:
        return (descriptor.color, self._fmt(descriptor.blur_radius))

    def filter_name_for(self, descriptor: ShadowDescriptor) -> str | None:
        """Name of the filter drawing ``descriptor``, or ``None`` if invisible."""
        if descriptor.color.alpha < MIN_SHADOW_ALPHA:
            return None
        key = self._key(descriptor)
        name = self._names.get(key)
        if name is None:
            name = f"shadow{1 + len(self._names)}"
            self._names[key] = name
            logger.debug("New shadow filter %s for %s", name, key)
        return name

    def filters(self) -> list[Element]:
        """Filter definitions in first-use order."""
        return [filter_element(name, color, blur, self._fmt) for (color, blur), name in self._names.items()]


def filter_element(name: str, color: Color, blur: str, fmt: Callable[[float], str] = format_number) -> Element:
    """Build the ``<filter>`` for one shadow.

    Args:
        name: Filter id.
        color: Shadow color; opaque black needs no colorizing.
        blur: Formatted blur radius used as the Gaussian deviation.
    """
    colorize = color != BLACK

    definition = svg_element("filter", id=name, filterUnits="objectBoundingBox", primitiveUnits="userSpaceOnUse")

    source = "SourceAlpha"
    if blur != "0":
        gaussian = definition.append(Element("feGaussianBlur"))
        gaussian.set("in", source)
        gaussian.set("stdDeviation", blur)
        if colorize:
            gaussian.set("result", "blur")
            source = "blur"

    if colorize:
        flood = definition.append(Element("feFlood"))
        composite = definition.append(Element("feComposite"))
        apply_paint(flood, "flood-color", "flood-opacity", color, fmt)
        flood.set("result", "flood")
        composite.set("in", "flood")
        composite.set("in2", source)
        composite.set("operator", "in")

    return definition


def add_shadow(parent: Element, element: Element, shadow: Shadow | None, ctx: GenerationContext) -> bool:
    """Insert a shadow ``<use>`` for ``element`` into ``parent``.

    Must be called before ``element`` is appended to ``parent``. Returns
    whether a shadow was added.
    """
    if shadow is None:
        return False
    name = ctx.shadows.filter_name_for(shadow.descriptor)
    if name is None:
        return False

    element_id = ctx.next_graphic_id()
    element.set("id", element_id)

    use = parent.append(Element("use"))
    use.set("filter", f"url(#{name})")
    use.set("href", f"#{element_id}", XLINK_NS)
    if shadow.offset.width != 0 or shadow.offset.height != 0:
        use.set("x", ctx.fmt(shadow.offset.width))
        use.set("y", ctx.fmt(-shadow.offset.height))
    return True
