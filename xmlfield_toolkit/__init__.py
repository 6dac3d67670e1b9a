"""Top-level package of xmlfield-toolkit.

Callers should only depend on the public API re-exported here rather than
importing internal modules directly.
"""

from .core import (
    HtmlToXmlFieldParser,
    ImageCache,
    ImageStoreError,
    XmlFieldError,
    html_to_xml_field,
    string_to_xml_field,
)

__all__: list[str] = [
    "HtmlToXmlFieldParser",
    "ImageCache",
    "ImageStoreError",
    "XmlFieldError",
    "html_to_xml_field",
    "string_to_xml_field",
]
