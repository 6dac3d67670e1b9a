from __future__ import annotations

"""Mutable document tree used by the rewrite passes.

A :class:`DocumentTree` owns one lxml tree and offers the few operations the
converter needs: selecting elements by their current tag name, renaming an
element in place and locating the first element of a given tag.
"""

import logging
from typing import Dict, List, Optional

from lxml import etree as ET

__all__ = ["HTML_ENVELOPE", "DocumentTree", "rename_element"]

logger = logging.getLogger(__name__)

HTML_ENVELOPE = "<!doctype html><html><head><meta charset='utf-8' /></head><body>{content}</body></html>"


def rename_element(
    node: ET._Element,
    name: str,
    skip_attribute_copy: bool = False,
    nsmap: Optional[Dict[str, str]] = None,
) -> ET._Element:
    """Replace *node* by a new element called *name* and return the new element.

    Attributes are copied unless *skip_attribute_copy* is set.  The leading
    text and every child move to the new element in their original order;
    children are relocated, never copied.  The tail text stays at the same
    position in the parent.
    """
    parent = node.getparent()
    if parent is None:
        raise ValueError(f"Cannot rename root element <{node.tag}>")

    renamed = ET.Element(name, nsmap=nsmap) if nsmap else ET.Element(name)
    if not skip_attribute_copy:
        for key, value in node.attrib.items():
            renamed.set(key, value)

    renamed.text = node.text
    for child in list(node):
        renamed.append(child)

    renamed.tail = node.tail
    parent.replace(node, renamed)
    return renamed


class DocumentTree:
    """Single owner of a parsed document."""

    def __init__(self, root: ET._Element) -> None:
        self.root = root

    @classmethod
    def from_html_fragment(cls, fragment: str) -> "DocumentTree":
        """Parse *fragment* as the body of a minimal HTML document."""
        document = HTML_ENVELOPE.format(content=fragment)
        parser = ET.HTMLParser(encoding="utf-8", remove_comments=True, remove_pis=True)
        root = ET.fromstring(document.encode("utf-8"), parser)
        return cls(root)

    def select(self, *tags: str) -> List[ET._Element]:
        """Return all elements whose current tag is one of *tags*, in document order.

        The list is a snapshot: renaming a selected element does not affect
        the remaining items.
        """
        return list(self.root.iter(*tags))

    def find_first(self, tag: str) -> Optional[ET._Element]:
        return next(self.root.iter(tag), None)

    def rename(
        self,
        node: ET._Element,
        name: str,
        skip_attribute_copy: bool = False,
        nsmap: Optional[Dict[str, str]] = None,
    ) -> ET._Element:
        renamed = rename_element(node, name, skip_attribute_copy, nsmap)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Renamed <%s> -> <%s>", node.tag, name)
        return renamed
