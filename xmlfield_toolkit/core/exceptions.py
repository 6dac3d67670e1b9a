from __future__ import annotations

"""Exception classes raised by the conversion pipeline.

Only conditions that must abort a conversion are raised.  Recoverable
anomalies (a link without target, an image that cannot be resolved) are
recorded in the parser's processing log instead.
"""

from typing import Optional

__all__ = [
    "XmlFieldError",
    "ImageStoreError",
    "ConversionError",
    "ConfigurationError",
]


class XmlFieldError(Exception):
    """Base exception for all conversion errors."""

    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.cause = cause


class ImageStoreError(XmlFieldError):
    """Raised when the image store cannot create an image object.

    This is fatal for the whole ``parse`` call: no partial document is
    returned.
    """

    def __init__(self, path: str, cause: Optional[BaseException] = None) -> None:
        self.path = path
        message = f"Could not create image from '{path}'"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message, cause)


class ConversionError(XmlFieldError):
    """Raised when the rewritten tree cannot be turned into a document."""


class ConfigurationError(XmlFieldError):
    """Raised when settings required by the converter are missing or invalid."""
