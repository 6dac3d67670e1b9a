from __future__ import annotations

"""Ready-made image source resolvers.

:func:`default_image_source_resolver` downloads ``http(s)`` images into a
working directory and hands their local path to the converter.  A file
already present under the same name is reused without downloading.
"""

import logging
import os
import shutil
from pathlib import Path
from typing import Callable, Optional, Union
from urllib.error import HTTPError, URLError
from urllib.parse import unquote, urlparse
from urllib.request import Request, urlopen

__all__ = ["default_image_source_resolver", "download_image"]

logger = logging.getLogger(__name__)

_USER_AGENT = "xmlfield-toolkit/1.0"
_REQUEST_TIMEOUT = 30


def _filename_from_url(url: str) -> str:
    return os.path.basename(unquote(urlparse(url).path))


def download_image(url: str, destination: Path) -> bool:
    """Fetch *url* into *destination*.  Returns False on any network error."""
    request = Request(url)
    request.add_header("User-Agent", _USER_AGENT)
    tmp_path = destination.with_name(destination.name + ".part")
    try:
        with urlopen(request, timeout=_REQUEST_TIMEOUT) as response, open(tmp_path, "wb") as fh:
            shutil.copyfileobj(response, fh)
        tmp_path.replace(destination)
        logger.debug("Downloaded %s -> %s", url, destination)
        return True
    except (HTTPError, URLError, OSError, ValueError) as exc:
        logger.warning("Could not download image %s: %s", url, exc)
        if tmp_path.exists():
            tmp_path.unlink()
        return False


def default_image_source_resolver(temp_dir: Union[str, Path]) -> Callable[[str], Optional[str]]:
    """Return a resolver that caches remote images in *temp_dir*.

    Args:
        temp_dir: Existing directory receiving downloaded images.

    Raises:
        ValueError: If *temp_dir* is not a directory.
    """
    directory = Path(temp_dir)
    if not directory.is_dir():
        raise ValueError(f"temp_dir must be an existing folder for downloaded images: {temp_dir}")

    def resolve(src: str) -> Optional[str]:
        if not src or not src.lower().startswith("http"):
            logger.debug("Not a remote image, skipping: %s", src)
            return None

        filename = _filename_from_url(src)
        if not filename:
            logger.warning("No file name in image URL %s", src)
            return None

        path = directory / filename
        if path.exists():
            return str(path)
        if download_image(src, path):
            return str(path)
        return None

    return resolve
