"""Logging helpers shared by every nistview module."""

import logging
import sys

PACKAGE_LOGGER = "nistview"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str) -> logging.Logger:
    """Return a module logger under the package namespace."""
    return logging.getLogger(name)


def configure_logging(level: str = "INFO") -> logging.Logger:
    """
    Install a single stderr handler on the package root logger.

    Calling this more than once only updates the level.
    """
    root = logging.getLogger(PACKAGE_LOGGER)
    root.setLevel(level.upper())
    if not any(getattr(h, "_nistview_handler", False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._nistview_handler = True  # type: ignore[attr-defined]
        root.addHandler(handler)
    return root
