from __future__ import annotations

"""Link registration for ``<a href>`` elements."""

import logging

from xmlfield_toolkit.core.interfaces import LinkRegistry

__all__ = ["LinkRegistryAdapter"]

logger = logging.getLogger(__name__)


class LinkRegistryAdapter:
    """Passes URLs through to the external registry and returns the id as text."""

    def __init__(self, registry: LinkRegistry) -> None:
        self.registry = registry

    def register(self, url: str) -> str:
        url_id = self.registry.register_url(url)
        logger.debug("Registered URL %s as %s", url, url_id)
        return str(url_id)
