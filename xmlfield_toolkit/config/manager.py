from __future__ import annotations

"""Configuration loading and access helpers.

This module centralises the declarative settings of the converter (tag
whitelist, embed attributes, image storage location, logging).  It loads
YAML files packaged with *xmlfield_toolkit* and optionally merges them with
user overrides.

Override directory: ``$XMLFIELD_CONFIG_DIR`` when set, otherwise
``~/.xmlfield_toolkit``.  Only keys present in an override file replace the
packaged values; a broken override is logged and ignored.
"""

import importlib.resources as pkg_resources
import logging
import os
from pathlib import Path
from typing import Any, Dict

import yaml

logger = logging.getLogger(__name__)

__all__ = ["ConfigManager", "DEFAULT_ALLOWED_TAGS"]

# Tag whitelist used when neither parser.yml nor the caller provides one
DEFAULT_ALLOWED_TAGS = "p,img[src],a[href],h1,h2,h3,h4,h5,h6,b,strong"


def _get_user_config_dir() -> Path:
    """Return the directory searched for user override files."""
    override = os.environ.get("XMLFIELD_CONFIG_DIR")
    if override:
        return Path(override)
    return Path.home() / ".xmlfield_toolkit"


class _Singleton(type):
    _instance: "ConfigManager" | None = None

    def __call__(cls, *args, **kwargs):
        if cls._instance is None:
            cls._instance = super().__call__(*args, **kwargs)
        return cls._instance

    def reset(cls) -> None:
        """Forget the cached instance so the next call reloads from disk."""
        cls._instance = None


class ConfigManager(metaclass=_Singleton):
    """Lazy-loads and exposes configuration sections as dictionaries."""

    _DEFAULT_FILENAMES = {
        "parser": "parser.yml",
        "storage": "storage.yml",
        "logging": "logging.yml",
    }

    def __init__(self) -> None:
        self._data: Dict[str, Dict[str, Any]] = {}
        self._ensure_loaded()

    # ------------------------------------------------------------------
    # Public helpers
    # ------------------------------------------------------------------
    def get_parser_config(self) -> Dict[str, Any]:
        return self._data.get("parser", {})

    def get_storage_config(self) -> Dict[str, Any]:
        return self._data.get("storage", {})

    def get_logging_config(self) -> Dict[str, Any]:
        return self._data.get("logging", {})

    # ------------------------------------------------------------------
    # Internal loading logic
    # ------------------------------------------------------------------
    def _ensure_loaded(self) -> None:
        if self._data:
            return  # already loaded

        startup_summary = []
        user_config_dir = _get_user_config_dir()

        for key, filename in self._DEFAULT_FILENAMES.items():
            merged_cfg: Dict[str, Any] = {}
            status = "missing"

            # 1. load packaged default
            try:
                resource = pkg_resources.files(__package__).joinpath(filename)
                with resource.open("r", encoding="utf-8") as fh:
                    packaged_data = yaml.safe_load(fh) or {}
                    merged_cfg.update(packaged_data)
                    status = "loaded"
            except (FileNotFoundError, OSError):
                logger.error("Missing packaged config for %s (%s)", key, filename)
                merged_cfg.update(self._builtin_defaults().get(key, {}))
                status = "builtin"
            except yaml.YAMLError as exc:
                logger.error("Invalid packaged config for %s (%s): %s", key, filename, exc)
                merged_cfg.update(self._builtin_defaults().get(key, {}))
                status = "invalid"

            # 2. load user overrides
            user_path = user_config_dir / filename
            if user_path.exists():
                try:
                    user_data = yaml.safe_load(user_path.read_text(encoding="utf-8")) or {}
                    if isinstance(user_data, dict):
                        merged_cfg.update(user_data)
                        status = f"{status}+overrides"
                    else:
                        logger.error("Ignoring user config %s: expected a mapping", user_path)
                except (OSError, yaml.YAMLError) as exc:
                    logger.error("Could not parse user config %s: %s", user_path, exc)

            self._data[key] = merged_cfg
            startup_summary.append(f"{key}: {status}")

        logger.info("Config startup: %s", " | ".join(startup_summary))

    @staticmethod
    def _builtin_defaults() -> Dict[str, Dict[str, Any]]:
        """Values used when a packaged file cannot be read."""
        return {
            "parser": {
                "allowed_tags": DEFAULT_ALLOWED_TAGS,
                "image": {"class_identifier": "image", "view": "embed", "size": "halfwidth"},
            },
            "storage": {},
            "logging": {},
        }
