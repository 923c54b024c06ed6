"""
Logging configuration.

The packaged `src/arnav/config/logging.yaml` is applied with `dictConfig`, after the
level is replaced by `settings.app.log_level` (e.g. `ARNAV_LOG_LEVEL=DEBUG`).
"""

from __future__ import annotations

import logging.config

from arnav.config.settings import get_logging_config, get_settings


def configure_logging() -> None:
    """Configure the Python logging system based on packaged YAML config + settings."""
    level = get_settings().app.log_level.upper()
    # Copy: the loaded mapping is lru_cached and dictConfig mutates what it is given.
    config = {**get_logging_config()}
    config["root"] = {**config.get("root", {}), "level": level}
    config["handlers"] = {
        name: ({**handler, "level": level} if isinstance(handler, dict) and "level" in handler else handler)
        for name, handler in config.get("handlers", {}).items()
    }

    logging.config.dictConfig(config)
