"""Layer hierarchy construction."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from acorn2svg.model import LayerID, LayerNode, LayerRecord

logger = logging.getLogger(__name__)

ROOT_NAME = "<root>"


def build_layer_tree(
    records: Iterable[LayerRecord],
    warn: Callable[[str], None] | None = None,
) -> LayerNode:
    """Assemble flat layer records into a tree.

    Records must arrive in the store's sequence order; children keep that
    order under their parent. Records without a parent hang off a synthetic
    root. A record whose parent does not exist is reported through ``warn``
    (or logged) and dropped together with its own children.

    Args:
        records: Layer records in sequence order.
        warn: Receives a message for each orphaned group of layers.

    Returns:
        The synthetic root node, named ``<root>``.
    """
    root = LayerNode(id=None, name=ROOT_NAME)
    by_id: dict[LayerID, LayerNode] = {}
    children: dict[LayerID, list[LayerNode]] = {}

    for record in records:
        node = LayerNode(
            id=record.id,
            name=record.name,
            uti=record.uti,
            frame=record.frame,
            visible=record.visible,
        )
        by_id[record.id] = node
        if record.parent_id is None:
            root.children.append(node)
        else:
            children.setdefault(record.parent_id, []).append(node)

    for parent_id, nodes in children.items():
        parent = by_id.get(parent_id)
        if parent is None:
            names = ", ".join(n.name or "?" for n in nodes)
            message = f"Cannot find parent of child layer ({names}), dropping it"
            if warn is not None:
                warn(message)
            else:
                logger.warning("%s", message)
            continue
        parent.children = nodes

    return root


def format_tree(node: LayerNode, indent: int = 0) -> str:
    """Render a layer tree as indented ``name: type`` lines."""
    lines = [f"{'  ' * indent}{node.name}: {node.uti}"]
    for child in node.children:
        lines.append(format_tree(child, indent + 1))
    return "\n".join(lines)
