"""Logging configuration helpers."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_handler: Optional[logging.Handler] = None


def configure_logging(config: Optional[Dict[str, Any]] = None) -> logging.Handler:
    """Install a single stream handler on the root logger.

    ``config`` is the full application config; only its ``logging.level``
    entry is read. Calling this again reuses the existing handler and just
    updates the level.
    """
    global _handler
    level_name = str(((config or {}).get("logging") or {}).get("level", "WARNING")).upper()
    level = getattr(logging, level_name, logging.WARNING)

    root_logger = logging.getLogger()
    if _handler is None:
        _handler = logging.StreamHandler()
        _handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root_logger.addHandler(_handler)
    root_logger.setLevel(level)
    _handler.setLevel(level)
    return _handler


def set_runtime_level(level_name: str) -> None:
    level = logging.getLevelName(level_name.upper()) if level_name else None
    if not isinstance(level, int):
        raise ValueError(f"Invalid log level: {level_name}")
    logging.getLogger().setLevel(level)
    if _handler is not None:
        _handler.setLevel(level)
