"""Logging for the convrag package.

All modules log through children of the ``convrag`` logger, which owns the
single stdout handler. Set ``DEBUG_RAG=true`` to see stage transitions and
gateway calls.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional

ROOT_LOGGER_NAME = "convrag"
_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"

_configured = False


def _level_from_env() -> int:
    return logging.DEBUG if os.getenv("DEBUG_RAG", "false").lower() == "true" else logging.INFO


def setup_logger(level: Optional[int] = None) -> logging.Logger:
    """Attach the stdout handler to the package logger once and set its level."""
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level if level is not None else _level_from_env())

    if not any(getattr(handler, "_convrag", False) for handler in logger.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(_FORMAT, datefmt=_DATEFMT))
        handler._convrag = True
        logger.addHandler(handler)

    logger.propagate = False
    return logger


def get_logger(name: str) -> logging.Logger:
    """Module logger nested under the package logger."""
    setup_logger_once()
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def setup_logger_once() -> None:
    global _configured
    if not _configured:
        setup_logger()
        _configured = True


__all__ = ["get_logger", "setup_logger"]
