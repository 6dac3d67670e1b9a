from __future__ import annotations

"""Conversion core: sanitizer, rewrite passes, image cache and serializer."""

from .exceptions import ConfigurationError, ConversionError, ImageStoreError, XmlFieldError  # noqa: F401
from .image_cache import SHARED_IMAGE_CACHE, ImageCache  # noqa: F401
from .interfaces import (  # noqa: F401
    CallableImageStore,
    CallableLinkRegistry,
    ImageSourceResolver,
    ImageStore,
    LinkRegistry,
    Sanitizer,
)
from .models import ImageCreationParams, ImageStorageLocation  # noqa: F401
from .parser import HtmlToXmlFieldParser, html_to_xml_field  # noqa: F401
from .resolvers import default_image_source_resolver  # noqa: F401
from .serializer import string_to_xml_field  # noqa: F401

__all__: list[str] = [
    "CallableImageStore",
    "CallableLinkRegistry",
    "ConfigurationError",
    "ConversionError",
    "HtmlToXmlFieldParser",
    "ImageCache",
    "ImageCreationParams",
    "ImageSourceResolver",
    "ImageStorageLocation",
    "ImageStore",
    "ImageStoreError",
    "LinkRegistry",
    "SHARED_IMAGE_CACHE",
    "Sanitizer",
    "XmlFieldError",
    "default_image_source_resolver",
    "html_to_xml_field",
    "string_to_xml_field",
]
