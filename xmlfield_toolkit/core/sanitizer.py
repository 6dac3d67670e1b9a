from __future__ import annotations

"""Whitelist-based HTML sanitization.

Raw input is reduced to the handful of tags the rewrite passes know how to
convert.  The whitelist uses a compact notation::

    p,img[src],a[href|title],h1,b

Each comma-separated entry is a tag name, optionally followed by the
attributes allowed on it in brackets (``|``-separated).  Everything else is
removed silently: disallowed tags are stripped with their content kept,
disallowed attributes and comments are dropped.
"""

import logging
import re
from typing import Dict, FrozenSet, List, Optional, Tuple

from bleach.sanitizer import Cleaner

from xmlfield_toolkit.config import DEFAULT_ALLOWED_TAGS

__all__ = ["ALLOWED_TAGS", "WhitelistSanitizer", "parse_whitelist"]

logger = logging.getLogger(__name__)

ALLOWED_TAGS = DEFAULT_ALLOWED_TAGS

_ENTRY_RE = re.compile(r"^([a-zA-Z][a-zA-Z0-9]*)\s*(?:\[([^\]]*)\])?$")


def parse_whitelist(spec: str) -> Tuple[FrozenSet[str], Dict[str, List[str]]]:
    """Split a whitelist string into allowed tags and per-tag attributes.

    Examples:
        >>> tags, attributes = parse_whitelist("p, img[src], a[href|title]")
        >>> sorted(tags)
        ['a', 'img', 'p']
        >>> attributes
        {'img': ['src'], 'a': ['href', 'title']}

    Raises:
        ValueError: If an entry is not a tag name with an optional bracket list.
    """
    tags = set()
    attributes: Dict[str, List[str]] = {}
    for raw_entry in (spec or "").split(","):
        entry = raw_entry.strip()
        if not entry:
            continue
        match = _ENTRY_RE.match(entry)
        if not match:
            raise ValueError(f"Invalid whitelist entry: {entry!r}")
        tag = match.group(1).lower()
        tags.add(tag)
        if match.group(2):
            names = [a.strip().lower() for a in match.group(2).split("|") if a.strip()]
            if names:
                known = attributes.setdefault(tag, [])
                known.extend(n for n in names if n not in known)
    return frozenset(tags), attributes


class WhitelistSanitizer:
    """Sanitizer backed by :class:`bleach.sanitizer.Cleaner`."""

    def __init__(self, allowed: Optional[str] = None) -> None:
        self.allowed = allowed if allowed is not None else ALLOWED_TAGS
        self.tags, self.attributes = parse_whitelist(self.allowed)
        self._cleaner = Cleaner(
            tags=self.tags,
            attributes=self.attributes,
            strip=True,
            strip_comments=True,
        )
        logger.debug("Sanitizer whitelist: tags=%s attributes=%s", sorted(self.tags), self.attributes)

    def sanitize(self, html: str) -> str:
        """Return *html* with everything outside the whitelist removed."""
        if not html:
            return ""
        return self._cleaner.clean(html)
