"""Centralized logger configuration.

Usage:
    from glassrubber.utils.logger import get_logger
    logger = get_logger(__name__)

Modules only ask for named loggers. Entrypoints call ``setup_logging()``
once the settings are known; it may run after a module has already logged,
so it always applies the level to the root logger.
"""
import logging
from typing import Optional

from glassrubber.config import get_settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def _resolve_level(level: Optional[str]) -> int:
    if level is None:
        level = get_settings().effective_log_level
    return getattr(logging, level.upper(), logging.INFO)


def setup_logging(level: Optional[str] = None) -> None:
    """Configure the root logger; ``None`` reads GR_LOG_LEVEL / GR_VERBOSE."""
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(format=LOG_FORMAT)
    root.setLevel(_resolve_level(level))


def get_logger(name: str) -> logging.Logger:
    if not logging.getLogger().handlers:
        setup_logging()
    return logging.getLogger(name)
