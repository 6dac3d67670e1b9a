from __future__ import annotations

"""Serialization of the rewritten tree into XML field text.

The ``section`` element produced by the rewrite passes is copied into a
fresh document and written out behind a fixed XML declaration.  Empty
paragraphs are dropped twice: structurally before serialization, and by a
textual pass over the output that catches whitespace-only paragraphs the
tree pass cannot see (for instance entity-only content coming from
elsewhere).  Neither pass cascades to parents that become empty.
"""

import copy
import logging
import re
from typing import Dict

from lxml import etree as ET
from lxml import html as lxml_html

__all__ = [
    "NAMESPACES",
    "XML_DECLARATION",
    "serialize_section",
    "remove_empty_paragraphs",
    "cleanup_empty_paragraphs",
    "string_to_xml_field",
    "strip_illegal_xml_chars",
]

logger = logging.getLogger(__name__)

NAMESPACES: Dict[str, str] = {
    "image": "http://ez.no/namespaces/ezpublish3/image/",
    "xhtml": "http://ez.no/namespaces/ezpublish3/xhtml/",
    "custom": "http://ez.no/namespaces/ezpublish3/custom/",
}

XML_DECLARATION = '<?xml version="1.0" encoding="utf-8"?>'

_WHITESPACE_PARAGRAPH_RE = re.compile(r"<paragraph>\s+</paragraph>", re.IGNORECASE)
_NBSP_PARAGRAPH_RE = re.compile(
    r"<paragraph>\s*(?:&nbsp;|&#160;|&#xa0;|\u00a0)\s*</paragraph>",
    re.IGNORECASE,
)

# Characters that may not appear in XML 1.0 text
_XML_ILLEGAL_RE = re.compile(r"[^\u0009\u000a\u000d\u0020-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]")


def strip_illegal_xml_chars(text: str) -> str:
    """Drop characters XML 1.0 cannot carry (control chars, lone surrogates)."""
    return _XML_ILLEGAL_RE.sub("", text or "")


def _remove_keep_tail(node: ET._Element) -> None:
    """Detach *node* from its parent without losing the text that follows it."""
    parent = node.getparent()
    if parent is None:
        return
    if node.tail:
        previous = node.getprevious()
        if previous is not None:
            previous.tail = (previous.tail or "") + node.tail
        else:
            parent.text = (parent.text or "") + node.tail
    parent.remove(node)


def remove_empty_paragraphs(root: ET._Element) -> int:
    """Remove ``paragraph`` elements with blank text and no child elements.

    Blank means whitespace only, non-breaking spaces included.  Paragraphs
    are judged once, before any removal, so a parent emptied by this pass
    is kept.  Returns the number of removed paragraphs.
    """
    candidates = [
        p for p in root.iter("paragraph")
        if len(p) == 0 and not (p.text or "").strip()
    ]
    for paragraph in candidates:
        _remove_keep_tail(paragraph)
    if candidates:
        logger.debug("Removed %d empty paragraph(s)", len(candidates))
    return len(candidates)


def serialize_section(section: ET._Element) -> str:
    """Write *section* as a standalone XML document string."""
    imported = copy.deepcopy(section)
    imported.tail = None
    body = ET.tostring(imported, encoding="unicode", with_tail=False)
    return f"{XML_DECLARATION}\n{body}"


def cleanup_empty_paragraphs(content: str) -> str:
    """Textual removal of whitespace-only and ``&nbsp;``-only paragraphs."""
    content = _WHITESPACE_PARAGRAPH_RE.sub("", content)
    content = _NBSP_PARAGRAPH_RE.sub("", content)
    return content


def _strip_tags(content: str) -> str:
    if not content or not content.strip():
        return content or ""
    fragment = lxml_html.fragment_fromstring(content, create_parent="div")
    return str(fragment.text_content())


def string_to_xml_field(content: str) -> str:
    """Wrap the plain text of *content* in a single-paragraph section.

    All tags are stripped; the text is escaped only as XML requires.
    """
    text = _strip_tags(strip_illegal_xml_chars(content))
    section = ET.Element("section", nsmap=NAMESPACES)
    ET.SubElement(section, "paragraph").text = text
    return serialize_section(section)
