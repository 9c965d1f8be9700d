"""
Loggers for shopping_cart.

The package only attaches a NullHandler to its own ``shopping_cart`` logger.
Output is left to the host application, or to ``configure_logging()`` when
it wants a ready-made stdout handler.

Usage:
    from shopping_cart.logging import get_logger
    logger = get_logger(__name__)
"""

import logging
import os
import sys
from functools import cache
from typing import Optional

PACKAGE_LOGGER = "shopping_cart"

CART_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
CART_LOG_FORMAT_SIMPLE = "%(levelname)s - %(name)s - %(message)s"

_package_logger = logging.getLogger(PACKAGE_LOGGER)
if not any(isinstance(h, logging.NullHandler) for h in _package_logger.handlers):
    _package_logger.addHandler(logging.NullHandler())


def configure_logging(level: Optional[str] = None, simple: Optional[bool] = None) -> logging.Handler:
    """
    Send cart logs to stdout.

    Only the ``shopping_cart`` logger is touched, never the root logger.

    Args:
        level: Level name; defaults to LOG_LEVEL or INFO
        simple: Short format; defaults to LOG_FORMAT=simple

    Returns:
        The handler that was attached
    """
    level_name = (level or os.environ.get("LOG_LEVEL", "INFO")).upper()
    if simple is None:
        simple = os.environ.get("LOG_FORMAT", "").lower() == "simple"

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(CART_LOG_FORMAT_SIMPLE if simple else CART_LOG_FORMAT))

    _package_logger.setLevel(getattr(logging, level_name, logging.INFO))
    _package_logger.addHandler(handler)
    return handler


@cache
def get_logger(name: str) -> logging.Logger:
    """Logger for a module of this package (pass ``__name__``)."""
    return logging.getLogger(name)


def _strip_control_chars(value: str) -> str:
    # One log record per line
    for char, escaped in (("\n", "\\n"), ("\r", "\\r"), ("\t", "\\t"), ("\x00", "")):
        value = value.replace(char, escaped)
    return value


def sanitize_id_for_logging(id_value: object | None) -> str:
    """Short, single-line form of a row id or cart identifier ("N/A" if empty)."""
    if id_value is None or id_value == "":
        return "N/A"
    return _strip_control_chars(str(id_value))[:8]


def sanitize_string_for_logging(value: str | None, max_length: int = 50) -> str:
    """Sanitize free text (item names, instance names) for logging."""
    if not value:
        return "N/A"
    safe_value = _strip_control_chars(str(value))
    if len(safe_value) <= max_length:
        return safe_value
    return safe_value[:max_length] + "..."


__all__ = [
    "configure_logging",
    "get_logger",
    "sanitize_id_for_logging",
    "sanitize_string_for_logging",
]
