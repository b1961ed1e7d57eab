# app/core/logger.py
"""
Logging configuration
"""
import logging
import sys

from app.core.config import get_settings

_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"
_ROOT = "app"


def setup_logging() -> logging.Logger:
    """
    Attach a single stdout handler to the ``app`` logger tree.

    Safe to call more than once; the handler is only added the first time.
    """
    settings = get_settings()
    logger = logging.getLogger(_ROOT)
    logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(_FORMAT, datefmt=_DATEFMT))
        logger.addHandler(handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Module logger (usually ``__name__``) under the ``app`` tree."""
    return logging.getLogger(name)
