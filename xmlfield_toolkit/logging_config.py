from __future__ import annotations

"""Central logging configuration for xmlfield-toolkit.

Import and call :func:`setup_logging` once, from the application embedding
the converter.  The library itself only creates module loggers.
"""

import logging
import logging.config
import os

from xmlfield_toolkit.config import ConfigManager

__all__ = ["setup_logging"]

_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging() -> None:
    """Configure logging using the ``logging`` section of the YAML config."""
    log_dir = os.environ.get("XMLFIELD_LOG_DIR", "logs")
    os.makedirs(log_dir, exist_ok=True)
    log_file = os.path.join(log_dir, "xmlfield.log")

    try:
        logging_config = ConfigManager().get_logging_config()

        if logging_config and isinstance(logging_config, dict) and logging_config.get("version"):
            # Update the filename dynamically
            if "handlers" in logging_config and "file" in logging_config["handlers"]:
                logging_config["handlers"]["file"]["filename"] = log_file

            logging.config.dictConfig(logging_config)
            logging.getLogger("xmlfield_toolkit").info("===== Logging initialised from config files =====")
        else:
            _setup_minimal_logging()
    except (ValueError, TypeError, AttributeError, ImportError) as exc:
        # dictConfig reports every schema problem through these types
        _setup_minimal_logging()
        logging.getLogger("xmlfield_toolkit").error("Error loading logging config: %s", exc)

    _apply_debug_overrides()


def _setup_minimal_logging() -> None:
    """Set up console-only logging when the config is unusable."""
    minimal_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "simple": {"format": _LOG_FORMAT},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "simple",
                "level": "INFO",
            },
        },
        "root": {
            "level": "INFO",
            "handlers": ["console"],
        },
    }

    logging.config.dictConfig(minimal_config)
    logging.warning("===== Logging initialised with minimal fallback =====")


def _apply_debug_overrides() -> None:
    """Apply environment-driven module-specific debug overrides.

    ``XMLFIELD_DEBUG_MODULES=comma,separated,logger,names`` switches the listed
    loggers to DEBUG and attaches a console handler when none would emit it.
    """
    extra_modules = os.environ.get("XMLFIELD_DEBUG_MODULES", "").strip()
    targets = [m.strip() for m in extra_modules.split(",") if m.strip()]
    for name in targets:
        logger = logging.getLogger(name)
        logger.setLevel(logging.DEBUG)
        has_debug_handler = any(h.level <= logging.DEBUG for h in logger.handlers)
        if not has_debug_handler:
            handler = logging.StreamHandler()
            handler.setLevel(logging.DEBUG)
            handler.setFormatter(logging.Formatter(_LOG_FORMAT))
            logger.addHandler(handler)
        logger.info("Debug override active for logger '%s'", name)
