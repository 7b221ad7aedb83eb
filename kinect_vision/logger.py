"""Logging helpers built on top of loguru."""

import sys

from loguru import logger as _logger

from kinect_vision.config import LOG_LEVEL

LOG_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<cyan>{extra[module]}</cyan> - <level>{message}</level>"
)

_is_configured = False


class Logger:
    """Project-wide logger wrapper around loguru."""

    @staticmethod
    def _configure(level):
        global _is_configured
        _logger.remove()
        _logger.add(sys.stderr, level=level, format=LOG_FORMAT)
        _is_configured = True

    @staticmethod
    def get_logger(name, level=None):
        """Return a loguru logger bound to ``name``, configuring sinks on first use."""
        if not _is_configured:
            Logger._configure(level or LOG_LEVEL)
        return _logger.bind(module=name)

    @staticmethod
    def configure(level=None):
        """Reset the stderr sink to ``level``."""
        Logger._configure(level or LOG_LEVEL)
