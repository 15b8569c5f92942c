"""Minimal logging utilities for domdown.

Provides a simple get_logger function that wraps the standard library logging.

Example:
    >>> from domdown.utils.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.info("Rendering turn")
"""

from __future__ import annotations

import logging


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given name.

    Returns a standard library logger with the "domdown." prefix.

    Args:
        name: Logger name (typically __name__)

    Returns:
        logging.Logger instance

    Example:
        >>> logger = get_logger("mymodule")
        >>> logger.name
        'domdown.mymodule'
    """
    if not (name == "domdown" or name.startswith("domdown.")):
        name = f"domdown.{name}"
    return logging.getLogger(name)
