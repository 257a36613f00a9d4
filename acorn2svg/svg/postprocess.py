"""Normalization passes over a finished output tree.

Both passes return a new tree and leave their input untouched:

- ``prune_redundant_groups`` replaces attribute-less single-child groups
  with their child, bottom-up, until nothing more can be removed.
- ``assign_namespace_prefixes`` resolves every namespace-tagged element and
  attribute name against the declarations in scope.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from acorn2svg.exceptions import NamespaceResolutionError
from acorn2svg.svg.tree import Attribute, Element

logger = logging.getLogger(__name__)


def is_redundant_group(elem: Element) -> bool:
    """A ``g`` with one child element, no attributes, declarations or text."""
    return (
        elem.is_svg("g")
        and len(elem.children) == 1
        and not elem.attributes
        and not elem.namespaces
        and not elem.text
    )


def prune_redundant_groups(elem: Element) -> Element:
    """Return a copy of ``elem`` with redundant groups collapsed.

    Children are pruned first, so a chain of nested single-child groups
    collapses to its innermost non-redundant element. The root itself is
    replaced when it is a redundant group. Running the pass on its own
    output changes nothing.
    """
    pruned = replace(elem, children=[prune_redundant_groups(c) for c in elem.children])
    if is_redundant_group(pruned):
        logger.debug("Removing redundant group around <%s>", pruned.children[0].tag)
        return pruned.children[0]
    return pruned


def _resolve_prefix(scopes: list[dict[str, str]], uri: str) -> str | None:
    """Find the innermost in-scope prefix bound to ``uri``.

    ``scopes`` is ordered innermost first; a prefix redeclared by an inner
    scope hides the outer binding.
    """
    seen: set[str] = set()
    for scope in scopes:
        for prefix, bound in scope.items():
            if prefix in seen:
                continue
            seen.add(prefix)
            if bound == uri:
                return prefix
    return None


def _qualify_attribute(attr: Attribute, scopes: list[dict[str, str]]) -> Attribute:
    if attr.namespace is None:
        # Unprefixed attribute names are never in the default namespace.
        return replace(attr, qname=attr.name)
    prefix = _resolve_prefix(scopes, attr.namespace)
    if prefix is None:
        raise NamespaceResolutionError(
            "Namespace used without declaration", attr.name, attr.namespace
        )
    if prefix == "":
        raise NamespaceResolutionError(
            "Cannot qualify attribute in the default namespace",
            attr.name,
            attr.namespace,
        )
    return replace(attr, qname=f"{prefix}:{attr.name}")


def assign_namespace_prefixes(
    elem: Element, _outer: list[dict[str, str]] | None = None
) -> Element:
    """Return a copy of ``elem`` with ``qname`` set on every name.

    Raises:
        NamespaceResolutionError: An element carries no namespace, a
            namespace has no declaration in scope, or an attribute
            namespace is only bound as the default namespace.
    """
    scopes = [elem.namespaces, *(_outer or [])]

    if elem.namespace is None:
        raise NamespaceResolutionError("Element not in any namespace", elem.tag, None)
    prefix = _resolve_prefix(scopes, elem.namespace)
    if prefix is None:
        raise NamespaceResolutionError(
            "Namespace used without declaration", elem.tag, elem.namespace
        )
    qname = elem.tag if prefix == "" else f"{prefix}:{elem.tag}"

    return replace(
        elem,
        qname=qname,
        attributes=[_qualify_attribute(a, scopes) for a in elem.attributes],
        children=[assign_namespace_prefixes(c, scopes) for c in elem.children],
        namespaces=dict(elem.namespaces),
    )
