"""Shared fixtures for xmlfield-toolkit tests.

Provides fake collaborators (image store, link registry, resolver) and
isolates every test from user configuration and from images cached by
earlier tests.
"""

import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from xmlfield_toolkit.config import ConfigManager
from xmlfield_toolkit.core.image_cache import SHARED_IMAGE_CACHE, ImageCache
from xmlfield_toolkit.core.links import LinkRegistryAdapter
from xmlfield_toolkit.core.models import ImageCreationParams, ImageStorageLocation
from xmlfield_toolkit.core.rewriter import RewriteContext

logging.basicConfig(
    level=logging.DEBUG,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)


class FakeImageStore:
    """Image store handing out sequential ids, recording every call."""

    def __init__(self, first_id: int = 42, fail: bool = False) -> None:
        self.first_id = first_id
        self.fail = fail
        self.calls: List[ImageCreationParams] = []

    def store(self, params: ImageCreationParams) -> Optional[int]:
        self.calls.append(params)
        if self.fail:
            return None
        return self.first_id + len(self.calls) - 1


class FakeLinkRegistry:
    """Link registry handing out sequential ids, recording every URL."""

    def __init__(self, first_id: int = 7) -> None:
        self.first_id = first_id
        self.urls: List[str] = []

    def register_url(self, url: str) -> int:
        self.urls.append(url)
        return self.first_id + len(self.urls) - 1


class MappingResolver:
    """Resolver backed by a dict; unknown sources resolve to nothing."""

    def __init__(self, mapping: Optional[Dict[str, str]] = None) -> None:
        self.mapping = dict(mapping or {})
        self.calls: List[str] = []

    def __call__(self, src: str) -> Optional[str]:
        self.calls.append(src)
        return self.mapping.get(src)


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point user overrides at an empty directory and reload the config."""
    config_dir = tmp_path / "user_config"
    config_dir.mkdir()
    monkeypatch.setenv("XMLFIELD_CONFIG_DIR", str(config_dir))
    ConfigManager.reset()
    yield config_dir
    ConfigManager.reset()


@pytest.fixture(autouse=True)
def reset_shared_image_cache():
    """Images created by one test must not leak into the next."""
    SHARED_IMAGE_CACHE.reset()
    yield
    SHARED_IMAGE_CACHE.reset()


@pytest.fixture
def image_store():
    return FakeImageStore()


@pytest.fixture
def link_registry():
    return FakeLinkRegistry()


@pytest.fixture
def image_file(tmp_path):
    """An existing local image file."""
    path = tmp_path / "images" / "a.png"
    path.parent.mkdir()
    path.write_bytes(b"\x89PNG\r\n\x1a\n")
    return path


@pytest.fixture
def resolver(image_file):
    return MappingResolver({"http://x.com/a.png": str(image_file)})


@pytest.fixture
def storage_location():
    return ImageStorageLocation(creator_id=14, parent_node_id=51, section_id=3)


@pytest.fixture
def messages():
    return []


@pytest.fixture
def rewrite_context(resolver, image_store, link_registry, storage_location, messages):
    """A RewriteContext whose log appends to the ``messages`` fixture."""
    return RewriteContext(
        links=LinkRegistryAdapter(link_registry),
        image_source_resolver=resolver,
        image_store=image_store,
        image_cache=ImageCache(),
        storage_location=storage_location,
        log=lambda message, level=logging.INFO: messages.append(message),
        image_settings={"class_identifier": "image", "view": "embed", "size": "halfwidth"},
    )
