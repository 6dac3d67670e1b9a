from __future__ import annotations

"""Collaborator interface definitions.

The converter never talks to the CMS directly.  Image lookup, image object
creation and URL registration are supplied by the caller through the
protocols below, which makes every collaborator replaceable by a fake in
tests.
"""

from typing import Callable, Optional, Protocol, Union, runtime_checkable

from xmlfield_toolkit.core.models import ImageCreationParams

__all__ = [
    "ImageSourceResolver",
    "ImageStore",
    "LinkRegistry",
    "Sanitizer",
    "CallableImageStore",
    "CallableLinkRegistry",
]

ReferenceId = Union[int, str]


@runtime_checkable
class ImageSourceResolver(Protocol):
    """Turns the ``src`` of an ``<img>`` into a local file path.

    Returning ``None`` tells the converter to leave the image alone.
    """

    def __call__(self, src: str) -> Optional[str]:
        ...


@runtime_checkable
class ImageStore(Protocol):
    """Creates image objects in the content store."""

    def store(self, params: ImageCreationParams) -> Optional[int]:
        """Create an image object and return its object id.

        Args:
            params: Creation parameters derived from the local image path.

        Returns:
            The id of the new object, or ``None`` when creation failed.
            Raising is treated the same way as returning ``None``.
        """
        ...


@runtime_checkable
class LinkRegistry(Protocol):
    """Registers external URLs and hands back their reference id."""

    def register_url(self, url: str) -> ReferenceId:
        ...


@runtime_checkable
class Sanitizer(Protocol):
    """Whitelist filter applied to raw input before parsing."""

    def sanitize(self, html: str) -> str:
        ...


class CallableImageStore:
    """Adapts a plain ``params -> id`` function to :class:`ImageStore`."""

    def __init__(self, func: Callable[[ImageCreationParams], Optional[int]]) -> None:
        self._func = func

    def store(self, params: ImageCreationParams) -> Optional[int]:
        return self._func(params)


class CallableLinkRegistry:
    """Adapts a plain ``url -> id`` function to :class:`LinkRegistry`."""

    def __init__(self, func: Callable[[str], ReferenceId]) -> None:
        self._func = func

    def register_url(self, url: str) -> ReferenceId:
        return self._func(url)
