from __future__ import annotations

"""Per-tag rewrite passes from sanitized HTML to XML field elements.

Each pass selects the elements whose *current* tag matches its source tag,
then converts them one by one.  Selection happens right before the pass
runs, so an element renamed by an earlier pass is only seen under its new
name.  The order of :data:`PASSES` is part of the output contract.

=========  ==========  =============================================
source     target      attributes
=========  ==========  =============================================
a[href]    link        url_id
p          paragraph   -
img        embed       view, size, object_id
b          strong      -
body       section     xmlns:image, xmlns:xhtml, xmlns:custom
h1..h6     header      level
=========  ==========  =============================================
"""

import logging
import os
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from lxml import etree as ET

from xmlfield_toolkit.core.image_cache import ImageCache
from xmlfield_toolkit.core.interfaces import ImageSourceResolver, ImageStore
from xmlfield_toolkit.core.links import LinkRegistryAdapter
from xmlfield_toolkit.core.models import ImageStorageLocation
from xmlfield_toolkit.core.serializer import NAMESPACES
from xmlfield_toolkit.core.tree import DocumentTree

__all__ = [
    "HEADING_TAGS",
    "DEFAULT_HEADING_LEVEL",
    "RewriteContext",
    "TagRewriter",
    "heading_level",
]

logger = logging.getLogger(__name__)

HEADING_TAGS: Tuple[str, ...] = ("h1", "h2", "h3", "h4", "h5", "h6")
DEFAULT_HEADING_LEVEL = 6

_HEADING_LEVEL_RE = re.compile(r"h(\d+)", re.IGNORECASE)


def heading_level(tag: str) -> int:
    """Return the level encoded in a heading tag name (``h3`` -> 3), default 6."""
    match = _HEADING_LEVEL_RE.search(tag or "")
    return int(match.group(1)) if match else DEFAULT_HEADING_LEVEL


@dataclass
class RewriteContext:
    """Collaborators and settings shared by all passes of one conversion."""

    links: LinkRegistryAdapter
    image_source_resolver: ImageSourceResolver
    image_store: ImageStore
    image_cache: ImageCache
    storage_location: ImageStorageLocation
    log: Callable[..., None]
    image_settings: Dict[str, Any] = field(default_factory=dict)


PassFunc = Callable[[DocumentTree, ET._Element, RewriteContext], None]


def rewrite_link(tree: DocumentTree, node: ET._Element, ctx: RewriteContext) -> None:
    href = node.get("href")
    if not href:
        ctx.log("href not found on a tag.", logging.WARNING)
        return
    ctx.log(f"HREF {href}")
    url_id = ctx.links.register(href)
    link = tree.rename(node, "link", skip_attribute_copy=True)
    link.set("url_id", url_id)


def rewrite_paragraph(tree: DocumentTree, node: ET._Element, ctx: RewriteContext) -> None:
    tree.rename(node, "paragraph", skip_attribute_copy=True)


def rewrite_image(tree: DocumentTree, node: ET._Element, ctx: RewriteContext) -> None:
    src = node.get("src")
    location = ctx.image_source_resolver(src) if src else None
    if not (src and location):
        ctx.log(f"src not found in img tag. Was {src}", logging.WARNING)
        return
    if not os.path.exists(location):
        ctx.log(f"Could not find image {location} in folder, skipping...", logging.WARNING)
        return

    ctx.log(f"Using image {location}")
    object_id = ctx.image_cache.resolve_or_create(
        location,
        ctx.image_store,
        ctx.storage_location,
        log=ctx.log,
        class_identifier=ctx.image_settings.get("class_identifier", "image"),
    )
    embed = tree.rename(node, "embed", skip_attribute_copy=True)
    embed.set("view", str(ctx.image_settings.get("view", "embed")))
    embed.set("size", str(ctx.image_settings.get("size", "halfwidth")))
    embed.set("object_id", str(object_id))


def rewrite_bold(tree: DocumentTree, node: ET._Element, ctx: RewriteContext) -> None:
    tree.rename(node, "strong", skip_attribute_copy=True)


def rewrite_body(tree: DocumentTree, node: ET._Element, ctx: RewriteContext) -> None:
    tree.rename(node, "section", skip_attribute_copy=True, nsmap=NAMESPACES)


def rewrite_heading(tree: DocumentTree, node: ET._Element, ctx: RewriteContext) -> None:
    level = heading_level(node.tag)
    header = tree.rename(node, "header", skip_attribute_copy=True)
    header.set("level", str(level))


PASSES: List[Tuple[Tuple[str, ...], PassFunc]] = [
    (("a",), rewrite_link),
    (("p",), rewrite_paragraph),
    (("img",), rewrite_image),
    (("b",), rewrite_bold),
    (("body",), rewrite_body),
    (HEADING_TAGS, rewrite_heading),
]


class TagRewriter:
    """Runs the rewrite passes, in order, over one document tree."""

    def __init__(self, context: RewriteContext, passes: Optional[List[Tuple[Tuple[str, ...], PassFunc]]] = None) -> None:
        self.context = context
        self.passes = list(passes) if passes is not None else list(PASSES)

    def rewrite(self, tree: DocumentTree) -> DocumentTree:
        for tags, func in self.passes:
            nodes = tree.select(*tags)
            logger.debug("Pass %s: %d node(s)", func.__name__, len(nodes))
            for node in nodes:
                func(tree, node, self.context)
        return tree
