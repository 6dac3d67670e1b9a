from __future__ import annotations

"""HTML → XML field conversion pipeline.

Entry-point for any caller (import scripts, CMS handlers, tests) that needs
to turn untrusted HTML into the XML stored by a rich-text field::

    parser = HtmlToXmlFieldParser(resolver, image_store, link_registry)
    xml = parser.parse("<p>Hello <a href='http://x.com'>world</a></p>")
    parser.messages  # anomalies met during the call

Images are created through *image_store* at most once per resolved path;
see :mod:`xmlfield_toolkit.core.image_cache`.
"""

import logging
from typing import Any, Dict, List, Optional

from xmlfield_toolkit.config import ConfigManager
from xmlfield_toolkit.core.exceptions import ConversionError
from xmlfield_toolkit.core.image_cache import SHARED_IMAGE_CACHE, ImageCache
from xmlfield_toolkit.core.interfaces import ImageSourceResolver, ImageStore, LinkRegistry, Sanitizer
from xmlfield_toolkit.core.links import LinkRegistryAdapter
from xmlfield_toolkit.core.models import ImageStorageLocation
from xmlfield_toolkit.core.rewriter import RewriteContext, TagRewriter
from xmlfield_toolkit.core.sanitizer import ALLOWED_TAGS, WhitelistSanitizer
from xmlfield_toolkit.core.serializer import (
    cleanup_empty_paragraphs,
    remove_empty_paragraphs,
    serialize_section,
    strip_illegal_xml_chars,
)
from xmlfield_toolkit.core.tree import DocumentTree

logger = logging.getLogger(__name__)

__all__ = ["HtmlToXmlFieldParser", "html_to_xml_field"]


class HtmlToXmlFieldParser:
    """Sanitize, rewrite and serialize HTML into XML field markup.

    Args:
        image_source_resolver: Maps an ``<img src>`` to a local file path.
        image_store: Creates image objects for resolved files.
        link_registry: Registers ``<a href>`` targets.
        allowed_tags: Whitelist in ``tag[attr|attr],tag`` notation.  Defaults
            to ``parser.allowed_tags`` from the config.
        storage_location: Owner and parent folder of created images.
            Defaults to the ``storage`` config section.
        image_cache: Dedup cache for created images.  Defaults to the
            process-wide :data:`SHARED_IMAGE_CACHE`.
        sanitizer: Replaces the bleach-based whitelist sanitizer.
    """

    def __init__(
        self,
        image_source_resolver: ImageSourceResolver,
        image_store: ImageStore,
        link_registry: LinkRegistry,
        *,
        allowed_tags: Optional[str] = None,
        storage_location: Optional[ImageStorageLocation] = None,
        image_cache: Optional[ImageCache] = None,
        sanitizer: Optional[Sanitizer] = None,
    ) -> None:
        config = ConfigManager()
        parser_config = config.get_parser_config()

        self.image_source_resolver = image_source_resolver
        self.image_store = image_store
        self.links = LinkRegistryAdapter(link_registry)
        self.image_cache = image_cache if image_cache is not None else SHARED_IMAGE_CACHE
        self.storage_location = (
            storage_location
            if storage_location is not None
            else ImageStorageLocation.from_config(config.get_storage_config())
        )
        self.image_settings: Dict[str, Any] = dict(parser_config.get("image") or {})

        if sanitizer is None:
            sanitizer = WhitelistSanitizer(allowed_tags or parser_config.get("allowed_tags") or ALLOWED_TAGS)
        self.sanitizer = sanitizer

        self.messages: List[str] = []

    # ---------------------------------------------------------------------
    # PUBLIC API
    # ---------------------------------------------------------------------
    def parse(self, html: str) -> str:
        """Convert *html* into an XML field document string.

        ``messages`` is cleared first and filled while converting; it stays
        readable after the call, also when it raises.

        Raises:
            ImageStoreError: If an image object could not be created.
            ConversionError: If no ``section`` is left after rewriting.
        """
        self.messages = []
        logger.debug("Parsing %d characters of HTML", len(html or ""))

        content = self.sanitizer.sanitize(strip_illegal_xml_chars(html))
        tree = DocumentTree.from_html_fragment(content)

        context = RewriteContext(
            links=self.links,
            image_source_resolver=self.image_source_resolver,
            image_store=self.image_store,
            image_cache=self.image_cache,
            storage_location=self.storage_location,
            log=self.log,
            image_settings=self.image_settings,
        )
        TagRewriter(context).rewrite(tree)

        section = tree.find_first("section")
        if section is None:
            raise ConversionError("No <section> element after rewriting; was <body> removed by the sanitizer?")

        remove_empty_paragraphs(section)
        output = cleanup_empty_paragraphs(serialize_section(section))
        logger.info("Converted HTML to XML field (%d message(s))", len(self.messages))
        return output

    def log(self, message: str, level: int = logging.INFO) -> None:
        """Record *message* in the processing log of the current call."""
        self.messages.append(message)
        logger.log(level, "%s", message)


def html_to_xml_field(
    html: str,
    image_source_resolver: ImageSourceResolver,
    image_store: ImageStore,
    link_registry: LinkRegistry,
    **kwargs: Any,
) -> str:
    """One-shot conversion with a throwaway parser.

    Keyword arguments are passed to :class:`HtmlToXmlFieldParser`.
    """
    parser = HtmlToXmlFieldParser(image_source_resolver, image_store, link_registry, **kwargs)
    return parser.parse(html)
