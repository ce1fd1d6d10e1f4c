"""
Logging setup for scripts driving fvflux.

Library modules only emit records through loguru; nothing is configured on
import.
"""

import sys

from loguru import logger

_FORMAT = "<level>{level: <8}</level> | <cyan>{module}</cyan> - <level>{message}</level>"
_TIMED_FORMAT = "<green>{elapsed}</green> | " + _FORMAT


def setup_logging(level="INFO", show_time=True, sink=sys.stderr, package_only=False):
    """
    Replace the loguru handlers with one handler for flux evaluation runs.

    Args:
        level: Minimum level (DEBUG, INFO, WARNING, ...)
        show_time: Prefix records with the time elapsed since start
        sink: Any loguru sink (stream, path or callable)
        package_only: Drop records that do not come from fvflux

    Returns:
        The handler id
    """
    logger.remove()
    return logger.add(sink,
                      format=_TIMED_FORMAT if show_time else _FORMAT,
                      level=level,
                      filter="fvflux" if package_only else None,
                      colorize=sink is sys.stderr)
