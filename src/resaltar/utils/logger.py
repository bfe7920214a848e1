"""Minimal logging utilities for resaltar.

Provides a get_logger function that wraps the standard library logging and
keeps every logger under the "resaltar" namespace.

Example:
    >>> from resaltar.utils.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.debug("Rewriting %d regions", 3)
"""

from __future__ import annotations

import logging


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given name.

    Returns a standard library logger with the "resaltar." prefix.

    Args:
        name: Logger name (typically __name__)

    Returns:
        logging.Logger instance

    Example:
        >>> logger = get_logger("grammars")
        >>> logger.name
        'resaltar.grammars'
    """
    if not (name == "resaltar" or name.startswith("resaltar.")):
        name = f"resaltar.{name}"
    return logging.getLogger(name)
