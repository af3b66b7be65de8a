"""
utils/logger.py
---------------
Logging setup shared by the repository, service and CLI layers.

Records go to stderr so that stdout carries nothing but the JSON that
main.py prints. Modules call `get_logger(__name__)`; the CLI may raise or
lower the level once at start-up with `set_level`.
"""

import logging
import sys

from config import LOG_LEVEL

_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
_handler: logging.Handler | None = None


def _install_handler() -> logging.Handler:
    global _handler
    if _handler is None:
        _handler = logging.StreamHandler(sys.stderr)
        _handler.setFormatter(logging.Formatter(_LOG_FORMAT, _DATE_FORMAT))
        root = logging.getLogger()
        root.addHandler(_handler)
        root.setLevel(_level_from_name(LOG_LEVEL))
    return _handler


def _level_from_name(name: str) -> int:
    """Map 'debug' / 'INFO' / ... to a logging level; unknown names fall back to INFO."""
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO


def set_level(name: str) -> None:
    """Change the root level, e.g. to DEBUG for `main.py --verbose`."""
    _install_handler()
    logging.getLogger().setLevel(_level_from_name(name))


def get_logger(name: str) -> logging.Logger:
    """
    Get a named logger, installing the stderr handler on first use.

    Args:
        name: Usually ``__name__`` of the calling module.
    """
    _install_handler()
    return logging.getLogger(name)
