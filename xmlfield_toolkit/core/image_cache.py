from __future__ import annotations

"""Deduplicating cache in front of the image store.

The same picture often appears several times in imported content.  The
cache maps a resolved local path to the object id of the image created for
it, so each path is stored at most once.  Entries are never evicted.

:data:`SHARED_IMAGE_CACHE` is the instance parsers use when none is given;
it lives for the whole process.  The cache is not thread-safe.
"""

import logging
from typing import Callable, Dict, Optional

from xmlfield_toolkit.core.exceptions import ImageStoreError
from xmlfield_toolkit.core.interfaces import ImageStore
from xmlfield_toolkit.core.models import ImageCreationParams, ImageStorageLocation

__all__ = ["ImageCache", "SHARED_IMAGE_CACHE"]

logger = logging.getLogger(__name__)


class ImageCache:
    """Path → object id mapping with create-on-miss semantics."""

    def __init__(self) -> None:
        self._ids: Dict[str, int] = {}

    def __contains__(self, path: object) -> bool:
        return path in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def get(self, path: str) -> Optional[int]:
        return self._ids.get(path)

    def reset(self) -> None:
        """Drop every entry.  Later lookups create their images again."""
        self._ids.clear()

    def resolve_or_create(
        self,
        path: str,
        store: ImageStore,
        location: ImageStorageLocation,
        log: Optional[Callable[[str], None]] = None,
        class_identifier: str = "image",
    ) -> int:
        """Return the object id for *path*, creating the image on first use.

        Raises:
            ImageStoreError: If the store returns nothing, returns a
                non-numeric id or raises.  Nothing is cached in that case.
        """
        cached = self._ids.get(path)
        if cached is not None:
            logger.debug("Image cache hit: %s -> %s", path, cached)
            return cached

        params = ImageCreationParams.for_path(path, location, class_identifier)
        try:
            object_id = store.store(params)
        except Exception as exc:
            logger.error("Image store raised for %s: %s", path, exc)
            raise ImageStoreError(path, exc) from exc

        if not object_id:
            logger.error("Image store returned no object for %s", path)
            raise ImageStoreError(path)

        try:
            object_id = int(object_id)
        except (TypeError, ValueError) as exc:
            logger.error("Image store returned a non-numeric id for %s: %r", path, object_id)
            raise ImageStoreError(path, exc) from exc

        if log is not None:
            log(f"Image created. Content Object ID: {object_id}")
        self._ids[path] = object_id
        return object_id


SHARED_IMAGE_CACHE = ImageCache()
