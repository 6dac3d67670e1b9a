from __future__ import annotations

"""Shared data structures used across the conversion core.

This module is intentionally free of I/O so that the contained objects can
be reused in any context (unit-tests, scripts, CMS import jobs).
"""

import os
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from xmlfield_toolkit.core.exceptions import ConfigurationError

__all__ = ["ImageStorageLocation", "ImageCreationParams"]


@dataclass(frozen=True)
class ImageStorageLocation:
    """Where, and on whose behalf, image objects are created.

    Attributes
    ----------
    creator_id
        Content object id of the user owning new image objects.
    parent_node_id
        Node id of the folder new image objects are placed under.
    section_id
        Section inherited from the parent node's object.
    """

    creator_id: Optional[int] = None
    parent_node_id: Optional[int] = None
    section_id: Optional[int] = None

    @classmethod
    def from_config(cls, storage_config: Mapping[str, Any]) -> "ImageStorageLocation":
        """Build a location from the ``storage`` config section."""
        values: Dict[str, Optional[int]] = {}
        for key in ("creator_id", "parent_node_id", "section_id"):
            raw = storage_config.get(key)
            if raw is None:
                values[key] = None
                continue
            try:
                values[key] = int(raw)
            except (TypeError, ValueError) as exc:
                raise ConfigurationError(f"storage.{key} must be an integer, got {raw!r}", exc) from exc
        return cls(**values)


@dataclass
class ImageCreationParams:
    """Parameters handed to an :class:`ImageStore` to create one image object."""

    path: str
    class_identifier: str = "image"
    creator_id: Optional[int] = None
    parent_node_id: Optional[int] = None
    section_id: Optional[int] = None
    storage_dir: str = ""
    attributes: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def for_path(
        cls,
        path: str,
        location: ImageStorageLocation,
        class_identifier: str = "image",
    ) -> "ImageCreationParams":
        """Derive creation parameters for the local image at *path*."""
        filename = os.path.basename(path)
        return cls(
            path=path,
            class_identifier=class_identifier,
            creator_id=location.creator_id,
            parent_node_id=location.parent_node_id,
            section_id=location.section_id,
            storage_dir=os.path.dirname(path) + "/",
            attributes={"title": filename, "image": filename},
        )
